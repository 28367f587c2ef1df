from __future__ import annotations

import asyncio
import urllib.parse
from typing import Tuple

import aiohttp

from .config import MODE_HTTP
from .fetcher import FetchError, FetchEvidence, FetchOutcome, Fetcher

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) psp-detect/1.0"
HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ja-JP,ja;q=0.9,en-US;q=0.8,en;q=0.7",
}

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
MAX_REDIRECTS = 10
MAX_BODY_BYTES = 2 * 1024 * 1024
_CHUNK_BYTES = 64 * 1024


def build_session() -> aiohttp.ClientSession:
    """Shared session for a plain-HTTP run; headers and redirects are handled per request by HttpFetcher."""
    return aiohttp.ClientSession()


def check_url(url: str) -> str:
    u = (url or "").strip()
    try:
        pu = urllib.parse.urlparse(u)
    except ValueError as e:
        raise FetchError(f"invalid url: {u!r} ({e})") from e
    if pu.scheme.lower() not in ("http", "https") or not pu.hostname:
        raise FetchError(f"invalid url: {u!r}")
    return u


async def _read_capped(resp: aiohttp.ClientResponse, max_bytes: int) -> bytes:
    # Stops pulling from the socket once the cap is hit; whatever was captured is kept.
    buf = bytearray()
    async for chunk in resp.content.iter_chunked(_CHUNK_BYTES):
        buf.extend(chunk)
        if len(buf) >= max_bytes:
            break
    return bytes(buf[:max_bytes])


def _decode(raw: bytes, charset: str | None) -> str:
    try:
        return raw.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


class HttpFetcher(Fetcher):
    """Strategy A: plain GET, manual redirect following, capped body. No sub-resources are observed."""

    mode = MODE_HTTP

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        timeout_ms: int,
        max_redirects: int = MAX_REDIRECTS,
        max_body_bytes: int = MAX_BODY_BYTES,
    ) -> None:
        self.session = session
        self.timeout_ms = int(timeout_ms)
        self.max_redirects = int(max_redirects)
        self.max_body_bytes = int(max_body_bytes)
        self._timeout = aiohttp.ClientTimeout(total=self.timeout_ms / 1000.0)

    async def _get_once(self, url: str) -> Tuple[int, str, str]:
        """Return (status, location, body_text). Location is only set for redirect responses."""
        async with self.session.get(url, headers=HEADERS, allow_redirects=False, timeout=self._timeout) as resp:
            location = resp.headers.get("Location", "") if resp.status in REDIRECT_STATUSES else ""
            if location:
                return resp.status, location, ""
            raw = await _read_capped(resp, self.max_body_bytes)
            return resp.status, "", _decode(raw, resp.charset)

    async def fetch(self, url: str) -> FetchOutcome:
        current = check_url(url)
        try:
            for _hop in range(self.max_redirects + 1):
                status, location, body = await self._get_once(current)
                if location:
                    current = check_url(urllib.parse.urljoin(current, location))
                    continue
                return FetchOutcome(
                    evidence=FetchEvidence(html=body, observed_urls=[]),
                    final_url=current,
                    status=status,
                )
        except asyncio.TimeoutError as e:
            raise FetchError(f"timeout after {self.timeout_ms} ms") from e
        except aiohttp.ClientError as e:
            raise FetchError(f"{type(e).__name__}: {e}") from e
        raise FetchError(f"too many redirects (more than {self.max_redirects})")
