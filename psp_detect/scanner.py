from __future__ import annotations

import contextlib
from dataclasses import dataclass
from typing import AsyncIterator, Callable, List, Optional, Sequence

from playwright.async_api import async_playwright

from .browser_fetch import LAUNCH_ARGS, BrowserFetcher
from .cart_discovery import CartDiscoveryFetcher
from .config import MODE_CART, MODE_HTTP, ScanConfig
from .fetcher import FetchError, Fetcher
from .http_fetch import HttpFetcher, build_session
from .matcher import detect_platform, detect_psps
from .models import SiteResult, error_result
from .scheduler import run_with_concurrency

ProgressCallback = Callable[[int, int, SiteResult], None]


@dataclass(frozen=True)
class RunSummary:
    total: int
    detected: int
    cart_found: int
    errors: int


async def scan_site(fetcher: Fetcher, url: str) -> SiteResult:
    """
    Fetch + match for one site. Never raises: any failure becomes an error-bearing SiteResult,
    so one bad site cannot abort its siblings or the run.
    """
    try:
        outcome = await fetcher.fetch(url)
        platform = None
        if outcome.platform_evidence is not None:
            platform = detect_platform(outcome.platform_evidence)
        return SiteResult(
            input_url=url,
            resolved_url=outcome.final_url,
            http_status=outcome.status,
            platform=platform,
            cart_url=outcome.cart_url,
            detected_psps=detect_psps(outcome.evidence),
            error=outcome.note,
        )
    except FetchError as e:
        return error_result(url, str(e))
    except Exception as e:
        return error_result(url, f"{type(e).__name__}: {e}")


@contextlib.asynccontextmanager
async def open_fetcher(config: ScanConfig) -> AsyncIterator[Fetcher]:
    """
    Set up the strategy selected by config.mode and tear it down afterwards.

    Browser modes launch a single headless Chromium that all workers share; each scan opens its own context.
    """
    if config.mode == MODE_HTTP:
        async with build_session() as session:
            yield HttpFetcher(session, timeout_ms=config.timeout_ms)
        return

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True, args=LAUNCH_ARGS)
        try:
            cls = CartDiscoveryFetcher if config.mode == MODE_CART else BrowserFetcher
            yield cls(browser, timeout_ms=config.timeout_ms, post_load_wait_ms=config.post_load_wait_ms)
        finally:
            await browser.close()


async def _scan_all(
    fetcher: Fetcher,
    urls: Sequence[str],
    concurrency: int,
    on_result: Optional[ProgressCallback],
) -> List[SiteResult]:
    total = len(urls)
    done = 0

    def make_task(url: str):
        async def task() -> SiteResult:
            nonlocal done
            result = await scan_site(fetcher, url)
            done += 1
            if on_result is not None:
                on_result(done, total, result)
            return result

        return task

    return await run_with_concurrency([make_task(u) for u in urls], concurrency)


async def scan_urls(
    urls: Sequence[str],
    config: ScanConfig,
    *,
    on_result: Optional[ProgressCallback] = None,
    fetcher: Optional[Fetcher] = None,
) -> List[SiteResult]:
    """Scan normalized URLs; results come back in input order. Pass `fetcher` to reuse an existing one."""
    config.validate()
    if fetcher is not None:
        return await _scan_all(fetcher, urls, config.concurrency, on_result)
    async with open_fetcher(config) as f:
        return await _scan_all(f, urls, config.concurrency, on_result)


def summarize(results: Sequence[SiteResult]) -> RunSummary:
    return RunSummary(
        total=len(results),
        detected=sum(1 for r in results if r.detected_psps),
        cart_found=sum(1 for r in results if r.cart_url),
        errors=sum(1 for r in results if r.error),
    )
