from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterator, List, Tuple

from playwright.async_api import Browser, Page, Request
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .config import DEFAULT_WAIT_MS, MODE_BROWSER
from .fetcher import FetchEvidence, FetchOutcome, Fetcher

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
EXTRA_HTTP_HEADERS = {"Accept-Language": "ja-JP,ja;q=0.9,en;q=0.8"}
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]


class RequestLog:
    """Ordered log of every outbound request URL (all resource types, duplicates kept)."""

    def __init__(self) -> None:
        self.urls: List[str] = []

    def record(self, request: Request) -> None:
        self.urls.append(request.url)

    def reset(self) -> None:
        self.urls = []

    def snapshot(self) -> List[str]:
        return list(self.urls)


@contextlib.asynccontextmanager
async def open_page(browser: Browser) -> AsyncIterator[Tuple[Page, RequestLog]]:
    """
    Exclusive browser context + page for one scan, attached to the shared browser.

    The context is closed on every exit path so scans never leak contexts into the shared browser.
    """
    context = await browser.new_context(user_agent=BROWSER_USER_AGENT, extra_http_headers=EXTRA_HTTP_HEADERS)
    try:
        page = await context.new_page()
        log = RequestLog()
        page.on("request", log.record)
        yield page, log
    finally:
        try:
            await context.close()
        except Exception:
            pass


class BrowserFetcher(Fetcher):
    """Strategy B: headless navigation, network-idle heuristic, then a fixed wait for deferred scripts."""

    mode = MODE_BROWSER

    def __init__(self, browser: Browser, *, timeout_ms: int, post_load_wait_ms: int = DEFAULT_WAIT_MS) -> None:
        self.browser = browser
        self.timeout_ms = int(timeout_ms)
        self.post_load_wait_ms = int(post_load_wait_ms)

    async def _load(self, page: Page, log: RequestLog, url: str, *, strict_idle: bool = False) -> FetchOutcome:
        if strict_idle:
            resp = await page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
        else:
            loop = asyncio.get_running_loop()
            deadline = loop.time() + self.timeout_ms / 1000.0
            resp = await page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
            # Navigation and the idle wait share one timeout budget.
            remaining_ms = int((deadline - loop.time()) * 1000)
            if remaining_ms > 0:
                # Busy pages may never go fully idle; the timeout just ends the wait.
                try:
                    await page.wait_for_load_state("networkidle", timeout=remaining_ms)
                except PlaywrightTimeoutError:
                    pass
        if self.post_load_wait_ms > 0:
            await asyncio.sleep(self.post_load_wait_ms / 1000.0)
        html = await page.content()
        return FetchOutcome(
            evidence=FetchEvidence(html=html or "", observed_urls=log.snapshot()),
            final_url=page.url or url,
            status=int(resp.status) if resp is not None else None,
        )

    async def fetch(self, url: str) -> FetchOutcome:
        async with open_page(self.browser) as (page, log):
            return await self._load(page, log, url)
