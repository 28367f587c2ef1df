from __future__ import annotations

from pathlib import Path

import pytest

import psp_detect.cli as cli
from psp_detect.models import CART_NOT_FOUND
from psp_detect.models import SiteResult


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for k in ("PSP_DETECT_MODE", "PSP_DETECT_OUTPUT", "PSP_DETECT_CONCURRENCY", "PSP_DETECT_TIMEOUT_MS", "PSP_DETECT_WAIT_MS"):
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setattr(cli, "load_dotenv", lambda **_kw: False)


def test_missing_input_file_is_fatal(tmp_path: Path, capsys) -> None:
    rc = cli.main([str(tmp_path / "nope.txt")])
    assert rc == 1
    assert "File not found" in capsys.readouterr().err


def test_empty_url_list_is_fatal(tmp_path: Path, monkeypatch, capsys) -> None:
    p = tmp_path / "urls.txt"
    p.write_text("# only comments\n\n", encoding="utf-8")

    async def _never(*_a, **_kw):
        raise AssertionError("scan must not start")

    monkeypatch.setattr(cli, "scan_urls", _never)
    rc = cli.main([str(p)])
    assert rc == 1
    assert "No URLs found" in capsys.readouterr().err


def test_missing_positional_argument_exits_non_zero() -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code != 0


def test_run_writes_csv_and_summary(tmp_path: Path, monkeypatch, capsys) -> None:
    p = tmp_path / "urls.txt"
    p.write_text("a.example\n# skip\nhttps://b.example\n", encoding="utf-8")
    out = tmp_path / "report.csv"
    seen = {}

    async def _fake_scan(urls, cfg, *, on_result=None, fetcher=None):
        seen["urls"] = list(urls)
        seen["cfg"] = cfg
        results = [
            SiteResult(
                input_url=urls[0],
                resolved_url=urls[0] + "/cart",
                cart_url=urls[0] + "/cart",
                platform="Shopify",
                http_status=200,
                detected_psps=("Stripe",),
            ),
            SiteResult(input_url=urls[1], http_status=200, platform="BASE", error=CART_NOT_FOUND),
        ]
        for i, r in enumerate(results, start=1):
            on_result(i, len(results), r)
        return results

    monkeypatch.setattr(cli, "scan_urls", _fake_scan)
    rc = cli.main([str(p), "--mode", "cart", "--output", str(out), "--concurrency", "2", "--wait", "0"])
    assert rc == 0

    assert seen["urls"] == ["https://a.example", "https://b.example"]
    cfg = seen["cfg"]
    assert (cfg.mode, cfg.concurrency, cfg.timeout_ms, cfg.post_load_wait_ms) == ("cart", 2, 30_000, 0)

    text = out.read_bytes().decode("utf-8-sig")
    lines = text.split("\r\n")
    assert lines[0].startswith("URL,Cart URL,Platform,Status,Detected PSPs,Error,Stripe")
    assert lines[1].startswith("https://a.example,https://a.example/cart,Shopify,200,Stripe,,1,0")
    assert lines[2].startswith(f"https://b.example,not found,BASE,200,,{CART_NOT_FOUND},0,0")

    stdout = capsys.readouterr().out
    assert "[1/2] HTTP 200" in stdout
    assert "Cart found: 1" in stdout
    assert "Errors:     1" in stdout


def test_http_mode_uses_http_defaults(tmp_path: Path, monkeypatch) -> None:
    p = tmp_path / "urls.txt"
    p.write_text("a.example\n", encoding="utf-8")
    seen = {}

    async def _fake_scan(urls, cfg, *, on_result=None, fetcher=None):
        seen["cfg"] = cfg
        return [SiteResult(input_url=urls[0], error="timeout after 15000 ms", failed=True)]

    monkeypatch.setattr(cli, "scan_urls", _fake_scan)
    rc = cli.main([str(p), "--mode", "http", "--output", str(tmp_path / "r.csv")])
    assert rc == 0
    assert (seen["cfg"].concurrency, seen["cfg"].timeout_ms) == (5, 15_000)
    header = (tmp_path / "r.csv").read_text(encoding="utf-8-sig").splitlines()[0]
    assert header.startswith("URL,Status,Detected PSPs,Error,")


def test_invalid_concurrency_is_a_usage_error(tmp_path: Path) -> None:
    p = tmp_path / "urls.txt"
    p.write_text("a.example\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main([str(p), "--concurrency", "0"])
    assert exc.value.code == 2
