from __future__ import annotations

from pathlib import Path
from typing import Iterable, List


def normalize_url(url: str) -> str:
    u = (url or "").strip()
    if not u:
        return ""
    if not u.lower().startswith(("http://", "https://")):
        u = "https://" + u
    return u


def parse_url_lines(lines: Iterable[str]) -> List[str]:
    """Drop blanks and `#` comments, trim, and add https:// to bare hostnames. Order and duplicates are kept."""
    out: List[str] = []
    for line in lines:
        s = (line or "").strip()
        if not s or s.startswith("#"):
            continue
        out.append(normalize_url(s))
    return out


def load_url_list(path: Path) -> List[str]:
    # utf-8-sig so lists saved by spreadsheet tools (BOM-prefixed) parse cleanly.
    with path.open("r", encoding="utf-8-sig", errors="replace") as f:
        return parse_url_lines(f)
