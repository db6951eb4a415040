import asyncio

import pytest

from voucherdesk.core.exceptions import RenderError
from voucherdesk.services import pdf_renderer

FIELDS = {
    "date": "2024-01-01",
    "pay_to": "Ravi Traders",
    "account_head": "Office Supplies",
    "account": "Printer paper",
    "transaction_type": "Cash",
    "amount": "500",
    "amount_rs": "Five hundred only",
    "checked_by": "Meera",
    "approved_by": "Arjun",
    "receiver_signature": "A rather long receiver name that exceeds the minimum line",
}


def test_renders_single_page_pdf(tmp_path):
    path = pdf_renderer.render_voucher_pdf(tmp_path / "v.pdf", "Contentstack", 1, FIELDS)

    content = path.read_bytes()
    assert content.startswith(b"%PDF")
    assert b"/Count 1" in content


def test_missing_fields_render_blank(tmp_path):
    path = pdf_renderer.render_voucher_pdf(tmp_path / "v.pdf", "Surfboard", 3, {})
    assert path.read_bytes().startswith(b"%PDF")


def test_unknown_company_renders_without_logo(tmp_path):
    assert pdf_renderer.logo_for("Acme") is None
    path = pdf_renderer.render_voucher_pdf(tmp_path / "v.pdf", "Acme", 1, FIELDS)
    assert path.read_bytes().startswith(b"%PDF")


def test_missing_logo_file_is_skipped(render_dir):
    assert pdf_renderer.logo_for("Contentstack") is None


def test_logo_is_embedded(render_dir, tmp_path):
    Image = pytest.importorskip("PIL.Image")
    logos = tmp_path / "logos"
    logos.mkdir()
    Image.new("RGB", (300, 100), "navy").save(logos / "contentstack.png")

    path, width = pdf_renderer.logo_for("Contentstack")
    assert path.name == "contentstack.png"
    assert width == 150

    out = pdf_renderer.render_voucher_pdf(tmp_path / "v.pdf", "Contentstack", 1, FIELDS)
    assert b"/Subtype /Image" in out.read_bytes()


def test_unwritable_target_raises_render_error(tmp_path):
    with pytest.raises(RenderError):
        pdf_renderer.render_voucher_pdf(tmp_path / "missing" / "v.pdf", "Contentstack", 1, FIELDS)


def test_render_to_file_uses_unique_names(render_dir):
    first = asyncio.run(pdf_renderer.render_to_file("Contentstack", 1, FIELDS))
    second = asyncio.run(pdf_renderer.render_to_file("Contentstack", 1, FIELDS))

    assert first != second
    assert first.parent == render_dir
    assert first.name.endswith("_Contentstack_1.pdf")

    pdf_renderer.remove_render_file(first)
    pdf_renderer.remove_render_file(second)
    assert list(render_dir.iterdir()) == []


def test_remove_render_file_tolerates_missing(tmp_path):
    pdf_renderer.remove_render_file(tmp_path / "gone.pdf")
    pdf_renderer.remove_render_file(None)


def test_pdf_file_name():
    assert pdf_renderer.pdf_file_name("RawEngineering", 12) == "RawEngineering_12.pdf"
