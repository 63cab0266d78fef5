"""
GST math for the invoice generator.

Per item:   net = unit_price * qty - discount
            same state  -> CGST 9% + SGST 9%
            other state -> IGST 18%
Invoice:    grand total = sum(net) + sum(tax), rounded to paise only here.

Everything is Decimal so 200 * 0.09 is exactly 18.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from num2words import num2words

from errors import InvalidAmount

log = logging.getLogger(__name__)

CGST_RATE = Decimal("0.09")
SGST_RATE = Decimal("0.09")
IGST_RATE = Decimal("0.18")

TAX_TYPE_SPLIT = "CGST + SGST"
TAX_TYPE_IGST  = "IGST"

ZERO  = Decimal("0")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class TaxBreakdown:
    net_amount: Decimal
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    tax_type: str
    tax_rate: int          # percentage printed in the table
    tax_amount: Decimal
    total_amount: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    net_total: Decimal
    tax_total: Decimal
    cgst_total: Decimal
    sgst_total: Decimal
    igst_total: Decimal
    grand_total: Decimal
    rounded_total: Decimal
    words: str


def _dec(val):
    if isinstance(val, Decimal):
        return val
    return Decimal(str(val))


def round_money(amount):
    return _dec(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


# ═══════════════════════════════════════════════════════════════════════════════
# PER-ITEM
# ═══════════════════════════════════════════════════════════════════════════════
def net_amount(unit_price, quantity, discount=0) -> Decimal:
    """unit_price * quantity - discount. Not floored: a big discount goes negative."""
    return _dec(unit_price) * _dec(quantity) - _dec(discount or 0)


def tax_split(net, billing_state, shipping_state):
    """Return (cgst, sgst, igst). States are compared exactly, case included."""
    net = _dec(net)
    if billing_state == shipping_state:
        return net * CGST_RATE, net * SGST_RATE, ZERO
    return ZERO, ZERO, net * IGST_RATE


def tax_type(cgst) -> str:
    return TAX_TYPE_SPLIT if cgst else TAX_TYPE_IGST


def item_total(net, tax) -> Decimal:
    return _dec(net) + _dec(tax)


def breakdown(item, billing_state, shipping_state) -> TaxBreakdown:
    net = net_amount(item.unit_price, item.quantity, item.discount)
    cgst, sgst, igst = tax_split(net, billing_state, shipping_state)
    tax = cgst + sgst + igst
    return TaxBreakdown(
        net_amount=net,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        tax_type=tax_type(cgst),
        tax_rate=int(CGST_RATE * 100) if cgst else int(IGST_RATE * 100),
        tax_amount=tax,
        total_amount=item_total(net, tax),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# INVOICE TOTALS
# ═══════════════════════════════════════════════════════════════════════════════
def aggregate(items, billing_state, shipping_state) -> InvoiceTotals:
    """
    Sum nets and taxes separately over all items, then add them.
    Rounding happens once, on the grand total, and the words are built
    from that rounded figure so the printed number and words always agree.
    """
    net_sum = cgst_sum = sgst_sum = igst_sum = ZERO
    try:
        for it in items:
            net = net_amount(it.unit_price, it.quantity, it.discount)
            cgst, sgst, igst = tax_split(net, billing_state, shipping_state)
            net_sum  += net
            cgst_sum += cgst
            sgst_sum += sgst
            igst_sum += igst
        tax_sum = cgst_sum + sgst_sum + igst_sum
        grand   = net_sum + tax_sum
    except InvalidOperation as e:
        raise InvalidAmount(f"Invoice total could not be computed: {e!r}") from e

    if not grand.is_finite():
        raise InvalidAmount(f"Invoice total is not a finite number: {grand}")

    rounded = round_money(grand)
    log.info(f"Totals — net: {net_sum} | tax: {tax_sum} | grand: {rounded}")
    return InvoiceTotals(
        net_total=net_sum,
        tax_total=tax_sum,
        cgst_total=cgst_sum,
        sgst_total=sgst_sum,
        igst_total=igst_sum,
        grand_total=grand,
        rounded_total=rounded,
        words=amount_in_words(rounded),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# AMOUNT IN WORDS
# ═══════════════════════════════════════════════════════════════════════════════
def amount_in_words(amount) -> str:
    """
    236      -> "two hundred and thirty-six only"
    236.50   -> "two hundred and thirty-six and fifty paise only"
    0        -> "zero only"
    -12      -> "minus twelve only"
    """
    amount = _dec(amount)
    if not amount.is_finite():
        raise InvalidAmount(f"Cannot spell out a non-finite amount: {amount}")

    amount = round_money(amount)
    sign = "minus " if amount < 0 else ""
    rupees, fraction = divmod(abs(amount), 1)
    paise = int(fraction * 100)

    words = num2words(int(rupees), lang="en_IN")
    if paise:
        words += f" and {num2words(paise, lang='en_IN')} paise"
    return f"{sign}{words} only"
