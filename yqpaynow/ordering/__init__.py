"""Order pricing."""

from .calculation import (
    LineItem,
    OrderTotals,
    calculate_line_item_total,
    calculate_order_totals,
    round2,
)

__all__ = ["LineItem", "OrderTotals", "calculate_line_item_total", "calculate_order_totals", "round2"]
