"""Shared fixtures: sample payload, PNG assets and a draw-recording document."""
import copy

import pytest
from PIL import Image

from models import parse_invoice

PAYLOAD = {
    "sellerDetails": {
        "name": "Varasiddhi Silk Exports",
        "address": "75, 3rd Cross, Lalbagh Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560027",
        "panNo": "AACFV3325K",
        "gstNo": "29AACFV3325K1ZY",
    },
    "billingDetails": {
        "name": "Madhu B",
        "address": "Eurofins IT Solutions India Pvt Ltd., 1st Floor, Maruti Platinum",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560066",
        "stateCode": "29",
    },
    "shippingDetails": {
        "name": "Madhu B",
        "address": "Eurofins IT Solutions India Pvt Ltd., 1st Floor, Maruti Platinum",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560066",
        "stateCode": "29",
    },
    "orderDetails": {"orderNo": "403-3225714-7676307", "orderDate": "28.10.2019"},
    "invoiceDetails": {
        "invoiceNo": "IN-761",
        "invoiceDetails": "KA-310565025-1920",
        "invoiceDate": "28.10.2019",
    },
    "items": [
        {"description": "Silk Saree", "unitPrice": 100, "quantity": 2},
    ],
    "reverseCharge": "No",
}


class RecordingDocument:
    """Stands in for PdfDocument and keeps every draw call in order."""

    def __init__(self):
        self.ops = []

    def embed_image(self, path):
        return f"img:{path.name}"

    def draw_text(self, text, x, y, size):
        self.ops.append(("text", text, x, y, size))

    def draw_image(self, image, x, y, width, height):
        self.ops.append(("image", image, x, y, width, height))

    def save(self):
        return b""

    def texts(self):
        return [op[1] for op in self.ops if op[0] == "text"]

    def find(self, text):
        for op in self.ops:
            if op[0] == "text" and op[1] == text:
                return op
        raise AssertionError(f"{text!r} was never drawn; drawn texts: {self.texts()}")


@pytest.fixture
def payload():
    return copy.deepcopy(PAYLOAD)


@pytest.fixture
def invoice(payload):
    return parse_invoice(payload)


@pytest.fixture
def static_dir(tmp_path):
    d = tmp_path / "static"
    d.mkdir()
    Image.new("RGB", (40, 20), "navy").save(d / "logo.png")
    Image.new("RGBA", (40, 12), (0, 0, 0, 0)).save(d / "signature.png")
    return d


@pytest.fixture
def recorder():
    return RecordingDocument()
