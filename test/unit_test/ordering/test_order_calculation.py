"""Unit tests for order pricing arithmetic."""

import pytest

from yqpaynow.core.models.domain.enums import GSTType
from yqpaynow.ordering import LineItem, calculate_line_item_total, calculate_order_totals, round2


class TestRound2:
    def test_halves_round_up(self):
        assert round2(0.125) == 0.13

    def test_truncates_below_half(self):
        assert round2(1.234) == 1.23

    def test_whole_numbers_unchanged(self):
        assert round2(42.0) == 42.0


class TestLineItemTotal:
    def test_exclusive_tax_is_added(self):
        item = LineItem(unit_price=100, quantity=2, tax_rate=5, gst_type="EXCLUDE")
        assert calculate_line_item_total(item) == 210.0

    def test_inclusive_tax_is_not_added(self):
        item = LineItem(unit_price=118, quantity=1, tax_rate=18, gst_type="INCLUDE")
        assert calculate_line_item_total(item) == 118.0

    def test_discount_applies_before_tax(self):
        item = LineItem(unit_price=100, quantity=1, tax_rate=5, discount_percentage=10)
        # 100 - 10 discount, plus 5% of 90
        assert calculate_line_item_total(item) == 94.5

    def test_gst_type_is_parsed_loosely(self):
        item = LineItem(unit_price=50, quantity=2, tax_rate=12, gst_type="gst included")
        assert calculate_line_item_total(item) == 100.0

    def test_missing_tax_rate(self):
        item = LineItem(unit_price=20, quantity=3, tax_rate=0)
        assert calculate_line_item_total(item) == 60.0


class TestOrderTotals:
    def test_exclusive_order(self):
        totals = calculate_order_totals(
            [
                LineItem(unit_price=100, quantity=2, tax_rate=5),
                LineItem(unit_price=50, quantity=1, tax_rate=5),
            ]
        )
        assert totals.subtotal == 250.0
        assert totals.tax == 12.5
        assert totals.total_discount == 0.0
        assert totals.total == 262.5

    def test_inclusive_order_does_not_add_tax(self):
        totals = calculate_order_totals([LineItem(unit_price=118, quantity=1, tax_rate=18, gst_type="INCLUDE")])
        assert totals.subtotal == 118.0
        assert totals.tax == pytest.approx(18.0)
        assert totals.total == 118.0

    def test_subtotal_is_before_discount(self):
        totals = calculate_order_totals([LineItem(unit_price=100, quantity=1, tax_rate=5, discount_percentage=10)])
        assert totals.subtotal == 100.0
        assert totals.total_discount == 10.0
        assert totals.tax == 4.5
        assert totals.total == 94.5

    def test_any_inclusive_line_skips_tax_for_whole_order(self):
        totals = calculate_order_totals(
            [
                LineItem(unit_price=100, quantity=1, tax_rate=5, gst_type=GSTType.EXCLUDE.value),
                LineItem(unit_price=118, quantity=1, tax_rate=18, gst_type=GSTType.INCLUDE.value),
            ]
        )
        assert totals.subtotal == 218.0
        assert totals.tax == pytest.approx(23.0)
        assert totals.total == 218.0

    def test_empty_order(self):
        totals = calculate_order_totals([])
        assert totals.subtotal == 0.0
        assert totals.total == 0.0


class TestGSTTypeParse:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("INCLUDE", GSTType.INCLUDE),
            ("include", GSTType.INCLUDE),
            ("GST INCLUDED", GSTType.INCLUDE),
            ("EXCLUDE", GSTType.EXCLUDE),
            ("", GSTType.EXCLUDE),
            (None, GSTType.EXCLUDE),
        ],
    )
    def test_parse(self, raw, expected):
        assert GSTType.parse(raw) is expected
