from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

CART_NOT_FOUND = "cart page not found"


@dataclass(frozen=True)
class SiteResult:
    input_url: str
    resolved_url: str = ""  # final page after redirects, or the accepted cart page
    http_status: int | None = None
    platform: str | None = None  # cart mode only
    cart_url: str = ""  # cart mode only; empty when no cart page was accepted
    detected_psps: Tuple[str, ...] = ()
    error: str = ""
    failed: bool = False  # hard failure: nothing was classified

    @property
    def has_psps(self) -> bool:
        return bool(self.detected_psps)


def error_result(input_url: str, error: str, *, http_status: int | None = None) -> SiteResult:
    return SiteResult(input_url=input_url, http_status=http_status, error=error, failed=True)
