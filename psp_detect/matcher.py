from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .fetcher import FetchEvidence
from .fingerprints import CART_PAGE_RE, PLATFORM_CATALOG, PSP_CATALOG, FingerprintEntry


def build_haystack(evidence: FetchEvidence) -> str:
    """Page text plus every observed request URL, one per line."""
    return "\n".join([evidence.html or "", *(evidence.observed_urls or [])])


def _entry_matches(entry: FingerprintEntry, text: str) -> bool:
    return any(p.search(text) for p in entry.patterns)


def detect_psps(evidence: FetchEvidence, catalog: Sequence[FingerprintEntry] = PSP_CATALOG) -> Tuple[str, ...]:
    """
    Return every catalog entry with at least one matching pattern.

    Output follows catalog order (not match position in the page) and each name appears at most once.
    """
    text = build_haystack(evidence)
    return tuple(entry.name for entry in catalog if _entry_matches(entry, text))


def detect_platform(
    evidence: FetchEvidence, catalog: Sequence[FingerprintEntry] = PLATFORM_CATALOG
) -> Optional[str]:
    """First matching catalog entry wins; None when nothing matches."""
    text = build_haystack(evidence)
    for entry in catalog:
        if _entry_matches(entry, text):
            return entry.name
    return None


def looks_like_cart_page(html: str) -> bool:
    # Loose textual plausibility check; "bag" or "カート" anywhere is enough.
    return bool(CART_PAGE_RE.search(html or ""))
