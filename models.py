"""
Request schema for POST /generate-invoice.
Field names are snake_case in Python; the JSON keys (camelCase) are aliases.
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from errors import InvalidInput


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)


class Party(_Schema):
    name: str
    address: str
    city: str
    state: str
    postal_code: str = Field(alias="pincode")


class Seller(Party):
    pan_no: str = Field(alias="panNo")
    gst_no: str = Field(alias="gstNo")


class Address(Party):
    """Billing or shipping party."""
    state_code: str = Field(alias="stateCode")


class OrderInfo(_Schema):
    order_no: str = Field(alias="orderNo")
    order_date: str = Field(alias="orderDate")


class InvoiceInfo(_Schema):
    invoice_no: str = Field(alias="invoiceNo")
    invoice_details: str = Field(default="", alias="invoiceDetails")
    invoice_date: str = Field(alias="invoiceDate")


class LineItem(_Schema):
    description: str
    unit_price: Decimal = Field(ge=0, alias="unitPrice")
    quantity: int = Field(gt=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)


class Invoice(_Schema):
    seller: Seller = Field(alias="sellerDetails")
    billing: Address = Field(alias="billingDetails")
    shipping: Address = Field(alias="shippingDetails")
    order: OrderInfo = Field(alias="orderDetails")
    invoice_info: InvoiceInfo = Field(alias="invoiceDetails")
    items: List[LineItem] = Field(default_factory=list)
    reverse_charge: str = Field(default="No", alias="reverseCharge")


def parse_invoice(payload) -> Invoice:
    """Validate a decoded JSON body. Raises InvalidInput on any schema error."""
    if not isinstance(payload, dict):
        raise InvalidInput(f"Expected a JSON object, got {type(payload).__name__}")
    try:
        return Invoice.model_validate(payload)
    except ValidationError as e:
        raise InvalidInput(f"Invalid invoice payload: {e.error_count()} error(s)\n{e}") from e
