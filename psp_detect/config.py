from __future__ import annotations

import os
from dataclasses import dataclass

MODE_HTTP = "http"
MODE_BROWSER = "browser"
MODE_CART = "cart"
MODES = (MODE_HTTP, MODE_BROWSER, MODE_CART)

DEFAULT_OUTPUT = "results.csv"
DEFAULT_WAIT_MS = 3000

_DEFAULT_CONCURRENCY = {MODE_HTTP: 5, MODE_BROWSER: 3, MODE_CART: 3}
_DEFAULT_TIMEOUT_MS = {MODE_HTTP: 15_000, MODE_BROWSER: 30_000, MODE_CART: 30_000}


def _int_from_env(name: str, default: int, *, minimum: int) -> int:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        v = int(raw)
    except ValueError:
        return default
    return v if v >= minimum else default


def default_mode() -> str:
    raw = (os.environ.get("PSP_DETECT_MODE") or "").strip().lower()
    return raw if raw in MODES else MODE_BROWSER


@dataclass(frozen=True)
class ScanConfig:
    mode: str = MODE_BROWSER
    output_path: str = DEFAULT_OUTPUT
    concurrency: int = 3
    timeout_ms: int = 30_000
    # Rendered-DOM modes only: extra delay after the page settles so deferred payment widgets can load.
    post_load_wait_ms: int = DEFAULT_WAIT_MS

    @property
    def uses_browser(self) -> bool:
        return self.mode in (MODE_BROWSER, MODE_CART)

    @property
    def extended(self) -> bool:
        return self.mode == MODE_CART

    def validate(self) -> "ScanConfig":
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode {self.mode!r}. Use: {'/'.join(MODES)}.")
        if self.concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if self.timeout_ms < 1:
            raise ValueError("timeout_ms must be >= 1")
        if self.post_load_wait_ms < 0:
            raise ValueError("post_load_wait_ms must be >= 0")
        return self


def config_from_env(mode: str | None = None) -> ScanConfig:
    """
    Mode-dependent defaults, optionally overridden via env:
      PSP_DETECT_MODE, PSP_DETECT_OUTPUT, PSP_DETECT_CONCURRENCY, PSP_DETECT_TIMEOUT_MS, PSP_DETECT_WAIT_MS
    Invalid env values fall back to the built-in defaults.
    """
    m = mode if mode in MODES else default_mode()
    return ScanConfig(
        mode=m,
        output_path=(os.environ.get("PSP_DETECT_OUTPUT") or "").strip() or DEFAULT_OUTPUT,
        concurrency=_int_from_env("PSP_DETECT_CONCURRENCY", _DEFAULT_CONCURRENCY[m], minimum=1),
        timeout_ms=_int_from_env("PSP_DETECT_TIMEOUT_MS", _DEFAULT_TIMEOUT_MS[m], minimum=1),
        post_load_wait_ms=_int_from_env("PSP_DETECT_WAIT_MS", DEFAULT_WAIT_MS, minimum=0),
    )
