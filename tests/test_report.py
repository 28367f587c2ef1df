from __future__ import annotations

import csv
from pathlib import Path

from psp_detect.fingerprints import psp_names
from psp_detect.models import CART_NOT_FOUND, SiteResult
from psp_detect.report import CART_URL_NOT_FOUND, csv_header, csv_rows, write_csv


def test_header_layouts() -> None:
    names = list(psp_names())
    assert csv_header() == ["URL", "Status", "Detected PSPs", "Error", *names]
    assert csv_header(extended=True) == ["URL", "Cart URL", "Platform", "Status", "Detected PSPs", "Error", *names]


def test_rows_have_flags_per_catalog_entry() -> None:
    r = SiteResult(input_url="https://a.example", http_status=200, detected_psps=("Stripe", "PayPal"))
    header, row = csv_rows([r])
    assert len(row) == len(header)
    by_col = dict(zip(header, row))
    assert by_col["Status"] == "200"
    assert by_col["Detected PSPs"] == "Stripe | PayPal"
    assert by_col["Error"] == ""
    assert by_col["Stripe"] == "1"
    assert by_col["PayPal"] == "1"
    assert by_col["Adyen"] == "0"


def test_missing_status_is_blank() -> None:
    r = SiteResult(input_url="https://x.example", error="timeout after 10 ms", failed=True)
    _, row = csv_rows([r])
    assert row[1] == ""
    assert row[3] == "timeout after 10 ms"


def test_extended_rows() -> None:
    r = SiteResult(
        input_url="https://s.example",
        cart_url="https://s.example/cart",
        platform="Shopify",
        http_status=200,
        detected_psps=("Stripe",),
    )
    _, row = csv_rows([r], extended=True)
    assert row[:6] == ["https://s.example", "https://s.example/cart", "Shopify", "200", "Stripe", ""]


def test_extended_rows_mark_missing_cart_page() -> None:
    not_found = SiteResult(input_url="https://n.example", platform="BASE", http_status=200, error=CART_NOT_FOUND)
    reload_failed = SiteResult(input_url="https://f.example", http_status=200, error="cart page load failed: TimeoutError: x")
    hard_error = SiteResult(input_url="https://e.example", error="timeout after 30000 ms", failed=True)
    _, row_nf, row_rf, row_he = csv_rows([not_found, reload_failed, hard_error], extended=True)
    assert row_nf[:3] == ["https://n.example", CART_URL_NOT_FOUND, "BASE"]
    assert row_rf[1] == ""
    assert row_he[1] == ""
    # The base layout has no cart column to mark.
    _, base = csv_rows([not_found])
    assert base[:4] == ["https://n.example", "200", "", CART_NOT_FOUND]


def test_file_starts_with_bom_and_quotes_special_fields(tmp_path: Path) -> None:
    results = [
        SiteResult(input_url="https://acme.example/?q=Acme, Inc.", http_status=200),
        SiteResult(input_url="https://b.example", error='said "no"\nthen left', failed=True),
    ]
    out = write_csv(tmp_path / "out" / "results.csv", results)

    raw = out.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    text = raw.decode("utf-8-sig")
    assert '"https://acme.example/?q=Acme, Inc."' in text
    assert '"said ""no""\nthen left"' in text
    assert text.split("\r\n")[0].startswith("URL,Status,Detected PSPs,Error,Stripe,PayPal")

    with out.open("r", encoding="utf-8-sig", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[1][0] == "https://acme.example/?q=Acme, Inc."
    assert rows[2][3] == 'said "no"\nthen left'
    assert len(rows) == 3
