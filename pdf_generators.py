"""
pdf_generators.py
====================================
Fixed-position ReportLab rendering of the single-page tax invoice.

Entry point (called from main.py):
    generate_invoice(invoice, static_dir, layout)   → PDF bytes

Every coordinate lives in a LayoutConfig preset. Two presets exist:
    compact  — A4 portrait, 10pt, ten columns (with Discount)
    wide     — 842 x 1190, 9pt, nine columns (no Discount)
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from reportlab.pdfgen import canvas
from reportlab.lib.utils import ImageReader

from errors import AssetMissing, InvalidInput
from tax_calc import aggregate, breakdown, round_money

log = logging.getLogger(__name__)

FONT      = "Helvetica"
TITLE     = "Tax Invoice/Bill of Supply/Cash Memo"
SUBTITLE  = "(Original for Recipient)"
SIGNATORY = "Authorized Signatory"

LOGO_FILE      = "logo.png"
SIGNATURE_FILE = "signature.png"

HEADERS = ["Sl. No", "Description", "Unit Price", "Qty", "Discount",
           "Net Amount", "Tax Rate", "Tax Type", "Tax Amount", "Total Amount"]


# ═══════════════════════════════════════════════════════════════════════════════
# LAYOUT PRESETS
# ═══════════════════════════════════════════════════════════════════════════════
Point = Tuple[float, float]


@dataclass(frozen=True)
class LayoutConfig:
    """
    All positions are PDF points from the bottom-left corner.
    Table rows start at rows_y and step down by row_height; the totals
    block starts at rows_y - row_height * len(items).
    """
    name: str
    page_size: Tuple[float, float]
    font_size: float
    title_size: float
    subtitle_size: float
    line_spacing: float

    logo: Tuple[float, float, float, float]        # x, y, width, height
    title: Point
    subtitle: Point
    seller_label: Point
    seller_block: Point
    order_block: Point
    invoice_block: Point
    billing_label: Point
    billing_block: Point
    shipping_label: Point
    shipping_block: Point

    header_y: float
    rows_y: float
    row_height: float
    columns: Tuple[float, ...]
    show_discount: bool

    totals_x: float
    totals_gap: float
    signatory_gap: float
    signature_gap: float
    signature_size: Tuple[float, float]
    caption_gap: float

    @property
    def headers(self):
        if self.show_discount:
            return list(HEADERS)
        return [h for h in HEADERS if h != "Discount"]


def _compact():
    w, h = 595, 842
    return LayoutConfig(
        name="compact",
        page_size=(w, h),
        font_size=10,
        title_size=14,
        subtitle_size=10,
        line_spacing=2,
        logo=(40, h - 80, 100, 50),
        title=(180, h - 40),
        subtitle=(180, h - 55),
        seller_label=(40, h - 100),
        seller_block=(40, h - 110),
        order_block=(320, h - 100),
        invoice_block=(320, h - 140),
        billing_label=(40, h - 180),
        billing_block=(40, h - 190),
        shipping_label=(320, h - 180),
        shipping_block=(320, h - 190),
        header_y=h - 250,
        rows_y=h - 270,
        row_height=20,
        columns=tuple(40 + i * 50 for i in range(len(HEADERS))),
        show_discount=True,
        totals_x=40,
        totals_gap=20,
        signatory_gap=30,
        signature_gap=40,
        signature_size=(100, 30),
        caption_gap=10,
    )


def _wide():
    w, h = 842, 1190
    return LayoutConfig(
        name="wide",
        page_size=(w, h),
        font_size=9,
        title_size=16,
        subtitle_size=10,
        line_spacing=3,
        logo=(40, h - 90, 120, 60),
        title=(300, h - 45),
        subtitle=(300, h - 62),
        seller_label=(40, h - 115),
        seller_block=(40, h - 127),
        order_block=(460, h - 115),
        invoice_block=(460, h - 160),
        billing_label=(40, h - 215),
        billing_block=(40, h - 227),
        shipping_label=(460, h - 215),
        shipping_block=(460, h - 227),
        header_y=h - 300,
        rows_y=h - 320,
        row_height=18,
        columns=(40, 80, 300, 380, 430, 510, 570, 660, 750),
        show_discount=False,
        totals_x=40,
        totals_gap=18,
        signatory_gap=36,
        signature_gap=48,
        signature_size=(120, 36),
        caption_gap=12,
    )


LAYOUTS = {
    "compact": _compact(),
    "wide":    _wide(),
}
DEFAULT_LAYOUT = "compact"


def get_layout(name=None) -> LayoutConfig:
    return LAYOUTS[name or DEFAULT_LAYOUT]


# ═══════════════════════════════════════════════════════════════════════════════
# DOCUMENT RENDERER
# ═══════════════════════════════════════════════════════════════════════════════
class PdfDocument:
    """One-page ReportLab canvas writing into memory."""

    def __init__(self, page_size, title=TITLE):
        self.buf = io.BytesIO()
        self.c = canvas.Canvas(self.buf, pagesize=page_size)
        self.c.setTitle(title)

    def embed_image(self, path):
        return ImageReader(str(path))

    def draw_text(self, text, x, y, size):
        self.c.setFont(FONT, size)
        self.c.drawString(x, y, text)

    def draw_image(self, image, x, y, width, height):
        self.c.drawImage(image, x, y, width=width, height=height, mask="auto")

    def save(self) -> bytes:
        self.c.showPage()
        self.c.save()
        return self.buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════════
# ASSETS
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class InvoiceAssets:
    logo: Path
    signature: Path


def load_assets(static_dir) -> InvoiceAssets:
    static_dir = Path(static_dir)
    logo      = static_dir / LOGO_FILE
    signature = static_dir / SIGNATURE_FILE
    if not logo.is_file():
        raise AssetMissing(f"Logo image not found: {logo}")
    if not signature.is_file():
        raise AssetMissing(f"Signature image not found: {signature}")
    return InvoiceAssets(logo=logo, signature=signature)


# ═══════════════════════════════════════════════════════════════════════════════
# TEXT BLOCKS
# ═══════════════════════════════════════════════════════════════════════════════
def fmt(val):
    """Two decimals, no thousands separator."""
    return f"{round_money(val):.2f}"


def format_seller(s):
    return (f"{s.name}\n{s.address}\n{s.city}, {s.state}, {s.postal_code}\n"
            f"PAN No: {s.pan_no}\nGST Registration No: {s.gst_no}")


def format_party(a):
    return (f"{a.name}\n{a.address}\n{a.city}, {a.state}, {a.postal_code}\n"
            f"State/UT Code: {a.state_code}")


def format_order(o):
    return f"Order Number: {o.order_no}\nOrder Date: {o.order_date}"


def format_invoice_info(i):
    return (f"Invoice Number: {i.invoice_no}\nInvoice Details: {i.invoice_details}\n"
            f"Invoice Date: {i.invoice_date}")


def draw_multiline(doc, text, x, y, size, line_spacing=2):
    if not isinstance(text, str):
        raise InvalidInput(f"Expected string for text, but received {type(text).__name__}")
    for idx, line in enumerate(text.split("\n")):
        doc.draw_text(line, x, y - idx * (size + line_spacing), size)


# ═══════════════════════════════════════════════════════════════════════════════
# TABLE + TOTALS
# ═══════════════════════════════════════════════════════════════════════════════
def draw_table_headers(doc, layout: LayoutConfig):
    for x, header in zip(layout.columns, layout.headers):
        doc.draw_text(header, x, layout.header_y, layout.font_size)


def row_values(idx, item, tb, show_discount=True):
    values = [
        str(idx + 1),
        item.description,
        fmt(item.unit_price),
        str(item.quantity),
    ]
    if show_discount:
        values.append(fmt(item.discount))
    values += [
        fmt(tb.net_amount),
        f"{tb.tax_rate}%",
        tb.tax_type,
        fmt(tb.tax_amount),
        fmt(tb.total_amount),
    ]
    return values


def draw_table_rows(doc, layout: LayoutConfig, items, billing_state, shipping_state):
    for idx, item in enumerate(items):
        tb = breakdown(item, billing_state, shipping_state)
        y  = layout.rows_y - idx * layout.row_height
        for x, value in zip(layout.columns, row_values(idx, item, tb, layout.show_discount)):
            doc.draw_text(value, x, y, layout.font_size)


def draw_totals(doc, layout: LayoutConfig, y, totals):
    """Draw the totals lines under the table. Returns the y of the last line."""
    lines = [
        f"Total Net Amount: {fmt(totals.net_total)}",
        f"Total Tax Amount: {fmt(totals.tax_total)}",
        f"Total Amount: {totals.rounded_total:.2f}",
        f"Amount in Words: {totals.words}",
    ]
    for line in lines:
        y -= layout.totals_gap
        doc.draw_text(line, layout.totals_x, y, layout.font_size)
    return y


def draw_signatory(doc, layout: LayoutConfig, y, seller_name, signature):
    x = layout.totals_x
    sig_w, sig_h = layout.signature_size

    y -= layout.signatory_gap
    doc.draw_text(f"For {seller_name}:", x, y, layout.font_size)
    y -= layout.signature_gap
    doc.draw_image(signature, x, y, sig_w, sig_h)
    y -= layout.caption_gap
    doc.draw_text(SIGNATORY, x, y, layout.font_size)


# ═══════════════════════════════════════════════════════════════════════════════
# FULL PAGE
# ═══════════════════════════════════════════════════════════════════════════════
def draw_invoice(doc, invoice, layout: LayoutConfig, logo, signature):
    """
    Issue the whole draw sequence for one invoice, top to bottom.
    Totals are computed before the first draw call, so a bad amount
    never leaves a half-drawn page behind.
    """
    bill_state = invoice.billing.state
    ship_state = invoice.shipping.state
    totals = aggregate(invoice.items, bill_state, ship_state)

    fs, ls = layout.font_size, layout.line_spacing

    # ── Logo + title ──────────────────────────────────────────────────────────
    doc.draw_image(logo, *layout.logo)
    doc.draw_text(TITLE, *layout.title, layout.title_size)
    doc.draw_text(SUBTITLE, *layout.subtitle, layout.subtitle_size)

    # ── Seller | Order + Invoice ──────────────────────────────────────────────
    doc.draw_text("Sold By:", *layout.seller_label, fs)
    draw_multiline(doc, format_seller(invoice.seller), *layout.seller_block, fs, ls)
    draw_multiline(doc, format_order(invoice.order), *layout.order_block, fs, ls)
    draw_multiline(doc, format_invoice_info(invoice.invoice_info), *layout.invoice_block, fs, ls)

    # ── Billing | Shipping ────────────────────────────────────────────────────
    doc.draw_text("Billing Address:", *layout.billing_label, fs)
    draw_multiline(doc, format_party(invoice.billing), *layout.billing_block, fs, ls)
    doc.draw_text("Shipping Address:", *layout.shipping_label, fs)
    draw_multiline(doc, format_party(invoice.shipping), *layout.shipping_block, fs, ls)

    # ── Items ─────────────────────────────────────────────────────────────────
    draw_table_headers(doc, layout)
    draw_table_rows(doc, layout, invoice.items, bill_state, ship_state)

    # ── Totals + signatory ────────────────────────────────────────────────────
    y = layout.rows_y - layout.row_height * len(invoice.items)
    y = draw_totals(doc, layout, y, totals)
    draw_signatory(doc, layout, y, invoice.seller.name, signature)
    return totals


def generate_invoice(invoice, static_dir, layout=None, document=None) -> bytes:
    """Assets → totals → draw → bytes. Raises on the first failure, nothing partial."""
    layout = layout or get_layout()
    assets = load_assets(static_dir)
    log.info(f"Assets OK — logo: {assets.logo} | signature: {assets.signature}")

    doc = document if document is not None else PdfDocument(layout.page_size)
    logo      = doc.embed_image(assets.logo)
    signature = doc.embed_image(assets.signature)

    totals = draw_invoice(doc, invoice, layout, logo, signature)
    pdf_bytes = doc.save()
    log.info(f"Invoice {invoice.invoice_info.invoice_no} rendered ({layout.name}) — "
             f"{len(invoice.items)} item(s), total {totals.rounded_total}, {len(pdf_bytes)} bytes")
    return pdf_bytes


def save_pdf(pdf_bytes: bytes, path) -> Path:
    """Overwrite the persisted copy."""
    path = Path(path)
    path.write_bytes(pdf_bytes)
    log.info(f"PDF written → {path.resolve()}")
    return path
