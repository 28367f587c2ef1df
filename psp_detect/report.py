from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, List, Sequence

from .fingerprints import psp_names
from .models import CART_NOT_FOUND, SiteResult

PSP_SEPARATOR = " | "
CART_URL_NOT_FOUND = "not found"


def csv_header(*, extended: bool = False, names: Sequence[str] | None = None) -> List[str]:
    flags = list(names if names is not None else psp_names())
    if extended:
        return ["URL", "Cart URL", "Platform", "Status", "Detected PSPs", "Error", *flags]
    return ["URL", "Status", "Detected PSPs", "Error", *flags]


def csv_row(r: SiteResult, *, extended: bool = False, names: Sequence[str] | None = None) -> List[str]:
    flags = list(names if names is not None else psp_names())
    detected = set(r.detected_psps)
    status = "" if r.http_status is None else str(r.http_status)
    head = [r.input_url]
    if extended:
        cart_cell = r.cart_url or (CART_URL_NOT_FOUND if r.error == CART_NOT_FOUND else "")
        head += [cart_cell, r.platform or ""]
    return [
        *head,
        status,
        PSP_SEPARATOR.join(r.detected_psps),
        r.error or "",
        *("1" if n in detected else "0" for n in flags),
    ]


def csv_rows(results: Iterable[SiteResult], *, extended: bool = False) -> List[List[str]]:
    names = psp_names()
    return [csv_header(extended=extended, names=names)] + [csv_row(r, extended=extended, names=names) for r in results]


def write_csv(path: Path, results: Iterable[SiteResult], *, extended: bool = False) -> Path:
    """
    Write the report with a leading BOM (utf-8-sig) so spreadsheet tools pick up UTF-8.

    Fields containing the delimiter, a quote or a line break are quoted, with inner quotes doubled.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8-sig", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
        writer.writerows(csv_rows(results, extended=extended))
    return path
