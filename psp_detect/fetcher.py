from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


class FetchError(Exception):
    """A per-site fetch failure (invalid URL, timeout, redirect loop, connection error)."""


@dataclass(frozen=True)
class FetchEvidence:
    html: str
    observed_urls: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FetchOutcome:
    evidence: FetchEvidence
    final_url: str
    status: int | None
    # Top-page evidence for platform detection (cart mode only).
    platform_evidence: FetchEvidence | None = None
    cart_url: str = ""
    # Partial-success annotation, e.g. "cart page not found".
    note: str = ""


class Fetcher:
    """
    Strategy interface: obtain renderable text + observed sub-resource URLs for a target URL.

    Implementations raise on failure; the scan task turns exceptions into per-site errors.
    """

    mode: str = ""

    async def fetch(self, url: str) -> FetchOutcome:
        raise NotImplementedError
