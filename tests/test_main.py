import logging

import pytest

from main import app, get_settings
from models import parse_invoice
from errors import InvalidInput


@pytest.fixture
def client(static_dir, tmp_path, monkeypatch):
    monkeypatch.setenv("INVOICE_STATIC_DIR", str(static_dir))
    monkeypatch.setenv("INVOICE_OUTPUT_PATH", str(tmp_path / "out" / "invoice.pdf"))
    (tmp_path / "out").mkdir()
    app.config["TESTING"] = True
    return app.test_client()


def test_settings_defaults(monkeypatch):
    for key in ("INVOICE_STATIC_DIR", "INVOICE_OUTPUT_PATH", "INVOICE_SAVE_PDF",
                "INVOICE_RESPONSE_MODE", "INVOICE_LAYOUT"):
        monkeypatch.delenv(key, raising=False)
    s = get_settings()
    assert s.static_dir.name == "static"
    assert s.output_path.name == "invoice.pdf"
    assert s.save_pdf is True
    assert s.response_mode == "pdf"
    assert s.layout == "compact"


def test_generate_returns_pdf_and_writes_file(client, payload, tmp_path):
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 200
    assert r.headers["Content-Type"] == "application/pdf"
    assert r.headers["Content-Disposition"] == "attachment; filename=invoice.pdf"
    assert r.data.startswith(b"%PDF")
    assert (tmp_path / "out" / "invoice.pdf").read_bytes() == r.data


def test_generate_without_disk_write(client, payload, tmp_path, monkeypatch):
    monkeypatch.setenv("INVOICE_SAVE_PDF", "false")
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 200
    assert not (tmp_path / "out" / "invoice.pdf").exists()


def test_generate_message_mode(client, payload, tmp_path, monkeypatch):
    monkeypatch.setenv("INVOICE_RESPONSE_MODE", "message")
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 200
    assert r.mimetype == "text/plain"
    assert b"Invoice generated successfully" in r.data
    assert (tmp_path / "out" / "invoice.pdf").read_bytes().startswith(b"%PDF")


def test_message_mode_without_disk_write_returns_pdf(client, payload, tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("INVOICE_RESPONSE_MODE", "message")
    monkeypatch.setenv("INVOICE_SAVE_PDF", "false")
    with caplog.at_level(logging.WARNING):
        r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 200
    assert r.data.startswith(b"%PDF")
    assert not (tmp_path / "out" / "invoice.pdf").exists()
    assert "INVOICE_SAVE_PDF is off" in caplog.text


def test_numeric_pincode_and_state_code(client, payload):
    payload["sellerDetails"]["pincode"] = 560027
    payload["billingDetails"]["stateCode"] = 29
    payload["shippingDetails"]["pincode"] = 560066
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 200
    assert r.data.startswith(b"%PDF")


def test_numeric_codes_become_text(payload):
    payload["sellerDetails"]["pincode"] = 560027
    payload["billingDetails"]["stateCode"] = 29
    inv = parse_invoice(payload)
    assert inv.seller.postal_code == "560027"
    assert inv.billing.state_code == "29"


def test_nested_value_in_text_field_rejected(payload):
    payload["billingDetails"]["stateCode"] = {"code": 29}
    with pytest.raises(InvalidInput):
        parse_invoice(payload)


def test_generate_wide_layout(client, payload, monkeypatch):
    monkeypatch.setenv("INVOICE_LAYOUT", "wide")
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 200
    assert r.data.startswith(b"%PDF")


def test_missing_asset_is_500(client, payload, static_dir):
    (static_dir / "logo.png").unlink()
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 500
    assert r.data == b"Error generating invoice"


def test_invalid_payload_is_500(client, payload):
    del payload["sellerDetails"]["gstNo"]
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 500
    assert r.mimetype == "text/plain"


def test_non_json_body_is_500(client):
    r = client.post("/generate-invoice", data="not json", content_type="text/plain")
    assert r.status_code == 500


def test_unknown_layout_is_500(client, payload, monkeypatch):
    monkeypatch.setenv("INVOICE_LAYOUT", "letter")
    r = client.post("/generate-invoice", json=payload)
    assert r.status_code == 500


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.get_json()["status"] == "healthy"


def test_health_missing_signature(client, static_dir):
    (static_dir / "signature.png").unlink()
    r = client.get("/health")
    assert r.status_code == 500
    assert r.get_json()["checks"]["signature"] is False


def test_parse_invoice_defaults(payload):
    del payload["reverseCharge"]
    inv = parse_invoice(payload)
    assert inv.reverse_charge == "No"
    assert inv.items[0].discount == 0


@pytest.mark.parametrize("field,value", [
    ("quantity", 0),
    ("quantity", -1),
    ("unitPrice", -5),
    ("discount", -1),
])
def test_parse_invoice_rejects_bad_items(payload, field, value):
    payload["items"][0][field] = value
    with pytest.raises(InvalidInput):
        parse_invoice(payload)


def test_parse_invoice_rejects_non_object():
    with pytest.raises(InvalidInput):
        parse_invoice(["not", "an", "object"])
