from __future__ import annotations

import dataclasses
import urllib.parse
from typing import Sequence

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .browser_fetch import BrowserFetcher, open_page
from .config import MODE_CART
from .fetcher import FetchOutcome
from .fingerprints import CART_PATHS
from .matcher import looks_like_cart_page
from .models import CART_NOT_FOUND

# Upper bound for a single cart-path probe, so trying every path stays bounded.
CART_PROBE_TIMEOUT_MS = 10_000


def _origin_from_url(url: str) -> str:
    pu = urllib.parse.urlparse(url or "")
    if not pu.scheme or not pu.netloc:
        return ""
    return f"{pu.scheme}://{pu.netloc}"


class CartDiscoveryFetcher(BrowserFetcher):
    """
    Strategy C: load the top page, then look for the site's cart/checkout page and classify that instead.

    - Platform evidence always comes from the top page.
    - Probe failures (navigation errors, non-2xx, non-cart-looking content) just move on to the next path.
    - Without a cart page the top page is classified and the outcome is annotated with CART_NOT_FOUND.
    """

    mode = MODE_CART

    def __init__(self, *args, cart_paths: Sequence[str] = CART_PATHS, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.cart_paths = tuple(cart_paths)

    @property
    def probe_timeout_ms(self) -> int:
        return min(self.timeout_ms, CART_PROBE_TIMEOUT_MS)

    async def discover_cart(self, page: Page, origin: str) -> str:
        """Return the first probed URL that answers 2xx and reads like a cart page, else ""."""
        if not origin:
            return ""
        for path in self.cart_paths:
            candidate = urllib.parse.urljoin(origin, path)
            try:
                resp = await page.goto(candidate, wait_until="domcontentloaded", timeout=self.probe_timeout_ms)
                if resp is None or not (200 <= int(resp.status) < 300):
                    continue
                html = await page.content()
            except PlaywrightError:
                continue
            if looks_like_cart_page(html):
                return candidate
        return ""

    async def fetch(self, url: str) -> FetchOutcome:
        async with open_page(self.browser) as (page, log):
            top = await self._load(page, log, url)
            cart_url = await self.discover_cart(page, _origin_from_url(top.final_url or url))
            if not cart_url:
                return dataclasses.replace(top, platform_evidence=top.evidence, note=CART_NOT_FOUND)

            # Only requests made by the cart page itself count as its evidence.
            log.reset()
            try:
                cart = await self._load(page, log, cart_url, strict_idle=True)
            except PlaywrightError as e:
                return dataclasses.replace(
                    top,
                    platform_evidence=top.evidence,
                    note=f"cart page load failed: {type(e).__name__}: {e}",
                )
            return dataclasses.replace(cart, platform_evidence=top.evidence, cart_url=cart_url)
