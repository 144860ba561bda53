"""
Order total arithmetic.

Per line: ``line = unit_price * quantity`` and ``discount = line * pct / 100``.
Tax is carved out of the discounted amount for GST-inclusive prices and
added on top for GST-exclusive prices. When any line is GST-inclusive the
order total does not add tax again.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Protocol

from yqpaynow.core.models.domain.enums import GSTType


class PricedItem(Protocol):
    unit_price: float
    quantity: int
    tax_rate: float
    gst_type: str
    discount_percentage: float


@dataclass(frozen=True)
class LineItem:
    """Minimal priced line used by the calculator."""

    unit_price: float
    quantity: int
    tax_rate: float = 0.0
    gst_type: str = GSTType.EXCLUDE.value
    discount_percentage: float = 0.0


@dataclass(frozen=True)
class LineBreakdown:
    line_total: float
    discount: float
    tax: float
    gst_type: GSTType


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float
    tax: float
    total: float
    total_discount: float


def round2(value: float) -> float:
    """Round to two decimals with halves going up, like currency rounding on the till."""
    return math.floor(value * 100 + 0.5) / 100


def breakdown_line(item: PricedItem) -> LineBreakdown:
    line_total = float(item.unit_price) * int(item.quantity)
    rate = float(item.tax_rate or 0)
    pct = float(item.discount_percentage or 0)
    gst_type = GSTType.parse(item.gst_type)

    discount = line_total * pct / 100 if pct > 0 else 0.0
    taxable = line_total - discount
    if gst_type is GSTType.INCLUDE:
        tax = taxable * (rate / (100 + rate))
    else:
        tax = taxable * rate / 100
    return LineBreakdown(line_total=line_total, discount=discount, tax=tax, gst_type=gst_type)


def calculate_line_item_total(item: PricedItem) -> float:
    """Amount the customer pays for one line."""
    line = breakdown_line(item)
    after_discount = line.line_total - line.discount
    if line.gst_type is GSTType.INCLUDE:
        return round2(after_discount)
    return round2(after_discount + line.tax)


def calculate_order_totals(items: Iterable[PricedItem]) -> OrderTotals:
    """
    Subtotal (pre-discount), tax, discount and payable total of an order.

    Subtotal, tax and discount are each rounded to two decimals before the
    total is derived from them.
    """
    subtotal = tax = discount = 0.0
    has_inclusive = False
    for item in items:
        line = breakdown_line(item)
        subtotal += line.line_total
        discount += line.discount
        tax += line.tax
        has_inclusive = has_inclusive or line.gst_type is GSTType.INCLUDE

    subtotal, tax, discount = round2(subtotal), round2(tax), round2(discount)
    total = subtotal - discount if has_inclusive else subtotal - discount + tax
    return OrderTotals(subtotal=subtotal, tax=tax, total=round2(total), total_discount=discount)
