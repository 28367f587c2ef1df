from __future__ import annotations

import argparse
import asyncio
import json
from typing import List

from psp_detect.config import MODES, config_from_env
from psp_detect.fetcher import FetchError
from psp_detect.matcher import detect_platform, detect_psps
from psp_detect.scanner import open_fetcher
from psp_detect.url_list import normalize_url


async def _inspect(urls: List[str], mode: str) -> None:
    cfg = config_from_env(mode)
    async with open_fetcher(cfg) as fetcher:
        for u in urls:
            url = normalize_url(u)
            print("\nURL:", url)
            try:
                out = await fetcher.fetch(url)
            except FetchError as e:
                print("  error:", e)
                continue
            except Exception as e:
                print("  error:", f"{type(e).__name__}: {e}")
                continue
            print("  final_url:", out.final_url)
            print("  status:", out.status)
            print("  html_chars:", len(out.evidence.html))
            print("  observed_urls:", len(out.evidence.observed_urls))
            print("  psps_json:", json.dumps(list(detect_psps(out.evidence)), ensure_ascii=False))
            if out.platform_evidence is not None:
                print("  platform:", detect_platform(out.platform_evidence) or "")
                print("  cart_url:", out.cart_url)
            if out.note:
                print("  note:", out.note)


def main() -> int:
    ap = argparse.ArgumentParser(description="Inspect PSP/platform fingerprints for one or more URLs/domains.")
    ap.add_argument("urls", nargs="+", help="One or more URLs/domains")
    ap.add_argument("--mode", choices=MODES, default="http", help="Fetch strategy (default: http)")
    args = ap.parse_args()
    asyncio.run(_inspect(args.urls, args.mode))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
