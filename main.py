"""
GST Invoice Service
Single-page tax invoice PDFs from a JSON payload.

    POST /generate-invoice   → application/pdf (or a plain message, see INVOICE_RESPONSE_MODE)
    GET  /health             → asset + config check

Environment:
    INVOICE_STATIC_DIR      directory with logo.png + signature.png  (default: ./static)
    INVOICE_OUTPUT_PATH     where the last PDF is written              (default: invoice.pdf)
    INVOICE_SAVE_PDF        "false" to skip the disk write             (default: true)
    INVOICE_RESPONSE_MODE   "pdf" | "message"                          (default: pdf)
                            "message" needs INVOICE_SAVE_PDF on; without it the PDF is returned
    INVOICE_LAYOUT          "compact" | "wide"                         (default: compact)
    PORT                    dev server port                            (default: 3000)
"""

import os
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from flask import Flask, request, Response

from models import parse_invoice
from pdf_generators import LAYOUTS, LOGO_FILE, SIGNATURE_FILE, generate_invoice, get_layout, save_pdf

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
log = logging.getLogger(__name__)
app = Flask(__name__)

BASE_DIR = Path(__file__).resolve().parent


# ─── Config ───────────────────────────────────────────────────────────────────
def env(key, default=""):
    return os.environ.get(key, default)


@dataclass(frozen=True)
class Settings:
    static_dir: Path
    output_path: Path
    save_pdf: bool
    response_mode: str
    layout: str


def get_settings():
    """Read per request so a changed environment takes effect without restart."""
    return Settings(
        static_dir=Path(env("INVOICE_STATIC_DIR") or BASE_DIR / "static"),
        output_path=Path(env("INVOICE_OUTPUT_PATH") or "invoice.pdf"),
        save_pdf=env("INVOICE_SAVE_PDF", "true").strip().lower() not in ("0", "false", "no", "off"),
        response_mode=(env("INVOICE_RESPONSE_MODE") or "pdf").strip().lower(),
        layout=(env("INVOICE_LAYOUT") or "compact").strip().lower(),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# GENERATE INVOICE
# ═══════════════════════════════════════════════════════════════════════════════
@app.route("/generate-invoice", methods=["POST"])
def generate_invoice_route():
    settings = get_settings()
    try:
        invoice = parse_invoice(request.get_json(silent=True))
        log.info(f"Invoice request — No: {invoice.invoice_info.invoice_no} | "
                 f"Seller: {invoice.seller.name} | Items: {len(invoice.items)} | "
                 f"Reverse charge: {invoice.reverse_charge}")

        pdf_bytes = generate_invoice(invoice, settings.static_dir, get_layout(settings.layout))

        if settings.save_pdf:
            save_pdf(pdf_bytes, settings.output_path)

        if settings.response_mode == "message":
            if settings.save_pdf:
                return Response(f"Invoice generated successfully: {settings.output_path}",
                                status=200, mimetype="text/plain")
            log.warning("INVOICE_RESPONSE_MODE=message ignored because INVOICE_SAVE_PDF is off — returning PDF bytes")

        return Response(
            pdf_bytes,
            status=200,
            mimetype="application/pdf",
            headers={"Content-Disposition": "attachment; filename=invoice.pdf"},
        )

    except Exception as e:
        log.error(f"❌ Error generating invoice: {e}", exc_info=True)
        return Response("Error generating invoice", status=500, mimetype="text/plain")


# ═══════════════════════════════════════════════════════════════════════════════
# HEALTH CHECK
# ═══════════════════════════════════════════════════════════════════════════════
@app.route("/health")
def health():
    settings = get_settings()
    checks = {
        "logo":      (settings.static_dir / LOGO_FILE).is_file(),
        "signature": (settings.static_dir / SIGNATURE_FILE).is_file(),
        "layout":    settings.layout in LAYOUTS,
    }
    all_ok = all(checks.values())
    return {
        "status":    "healthy" if all_ok else "missing_config",
        "checks":    checks,
        "layout":    settings.layout,
        "timestamp": datetime.now().isoformat()
    }, 200 if all_ok else 500


if __name__ == "__main__":
    port = int(env("PORT", "3000"))
    log.info(f"🚀 Invoice service starting on port {port}")
    app.run(host="0.0.0.0", port=port, debug=False)
