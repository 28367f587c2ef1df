from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from playwright.async_api import Error as PlaywrightError

from .config import MODE_CART, MODES, ScanConfig, config_from_env, default_mode
from .models import SiteResult
from .report import write_csv
from .scanner import scan_urls, summarize
from .url_list import load_url_list


def _progress_line(done: int, total: int, r: SiteResult) -> str:
    label = "ERROR" if r.failed else f"HTTP {r.http_status if r.http_status is not None else '-'}"
    psps = ", ".join(r.detected_psps) if r.detected_psps else "none"
    line = f"[{done}/{total}] {label:<10} {r.input_url} -> {psps}"
    if r.platform:
        line += f" [{r.platform}]"
    if r.error:
        line += f" ({r.error})"
    return line


def _print_progress(done: int, total: int, r: SiteResult) -> None:
    print(_progress_line(done, total, r), flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect payment service providers (PSPs) on a list of e-commerce sites and write a CSV report."
    )
    parser.add_argument("urls_file", help="Text file with one URL or hostname per line (# comments allowed)")
    parser.add_argument(
        "--mode",
        choices=MODES,
        default=default_mode(),
        help="Fetch strategy: http (plain GET), browser (rendered DOM), cart (rendered DOM + cart page discovery). "
        "Env: PSP_DETECT_MODE (default: browser)",
    )
    parser.add_argument("--output", default=None, help="Output CSV path (default: results.csv). Env: PSP_DETECT_OUTPUT")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Sites scanned in parallel (default: 5 for http, 3 for browser modes). Env: PSP_DETECT_CONCURRENCY",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Per-request / navigation timeout in ms (default: 15000 http, 30000 browser). Env: PSP_DETECT_TIMEOUT_MS",
    )
    parser.add_argument(
        "--wait",
        type=int,
        default=None,
        help="Browser modes: extra wait in ms after load for JS payment widgets (default: 3000). Env: PSP_DETECT_WAIT_MS",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ScanConfig:
    cfg = config_from_env(args.mode)
    overrides = {}
    if args.output:
        overrides["output_path"] = args.output
    if args.concurrency is not None:
        overrides["concurrency"] = args.concurrency
    if args.timeout is not None:
        overrides["timeout_ms"] = args.timeout
    if args.wait is not None:
        overrides["post_load_wait_ms"] = args.wait
    return dataclasses.replace(cfg, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    if hasattr(sys.stderr, "reconfigure"):
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg = config_from_args(args).validate()
    except ValueError as e:
        parser.error(str(e))

    input_path = Path(args.urls_file)
    if not input_path.is_file():
        print(f"Error: File not found: {input_path}", file=sys.stderr, flush=True)
        return 1
    try:
        urls = load_url_list(input_path)
    except OSError as e:
        print(f"Error: Could not read {input_path}: {e}", file=sys.stderr, flush=True)
        return 1
    if not urls:
        print("Error: No URLs found in input file.", file=sys.stderr, flush=True)
        return 1

    print("\nPSP Detector", flush=True)
    print(f"   URLs:        {len(urls)}", flush=True)
    print(f"   Mode:        {cfg.mode}", flush=True)
    print(f"   Concurrency: {cfg.concurrency}", flush=True)
    print(f"   Timeout:     {cfg.timeout_ms}ms", flush=True)
    if cfg.uses_browser:
        print(f"   JS Wait:     {cfg.post_load_wait_ms}ms", flush=True)
    print(f"   Output:      {cfg.output_path}\n", flush=True)

    try:
        results = asyncio.run(scan_urls(urls, cfg, on_result=_print_progress))
    except PlaywrightError as e:
        print(
            f"Error: could not start the headless browser ({e}). Run: playwright install chromium",
            file=sys.stderr,
            flush=True,
        )
        return 1

    out_path = write_csv(Path(cfg.output_path), results, extended=cfg.mode == MODE_CART)

    s = summarize(results)
    print("\nDone!", flush=True)
    print(f"   Total:      {s.total}", flush=True)
    print(f"   Detected:   {s.detected} sites with PSPs", flush=True)
    if cfg.mode == MODE_CART:
        print(f"   Cart found: {s.cart_found}", flush=True)
    print(f"   Errors:     {s.errors}", flush=True)
    print(f"   Output:     {out_path.resolve()}\n", flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
