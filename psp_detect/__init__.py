__all__ = [
    "PSP_CATALOG",
    "PLATFORM_CATALOG",
    "FetchEvidence",
    "SiteResult",
    "ScanConfig",
    "detect_psps",
    "detect_platform",
    "run_with_concurrency",
    "scan_site",
    "scan_urls",
]

from .config import ScanConfig
from .fetcher import FetchEvidence
from .fingerprints import PLATFORM_CATALOG, PSP_CATALOG
from .matcher import detect_platform, detect_psps
from .models import SiteResult
from .scanner import scan_site, scan_urls
from .scheduler import run_with_concurrency
