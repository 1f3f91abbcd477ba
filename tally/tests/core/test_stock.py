"""Unit tests for stock adjustment valuation."""

from decimal import Decimal

from tally.core.models import CorrectionKind, StockAdjustment
from tally.core.stock import revalue_stock

D = Decimal


class TestRevalueStock:
    """Stock after adjustment and its total cost."""

    def test_write_off(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand=40, adjusted_by=-5, unit_cost="12.50"))

        assert valuation.stock_after_adjustment == D("35")
        assert valuation.total_cost == D("437.50")
        assert valuation.corrections == ()

    def test_addition(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand="10", adjusted_by="15", unit_cost="0.333"))

        assert valuation.stock_after_adjustment == D("25")
        assert valuation.total_cost == D("8.33")

    def test_stock_cannot_go_negative(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand=3, adjusted_by=-10, unit_cost=2))

        assert valuation.stock_after_adjustment == 0
        assert valuation.total_cost == D("0.00")
        assert valuation.corrections[-1].field == "stock_after_adjustment"
        assert valuation.corrections[-1].kind == CorrectionKind.NEGATIVE_VALUE
        assert valuation.corrections[-1].original == D("-7")

    def test_non_numeric_entries_count_as_zero(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand="", adjusted_by="abc", unit_cost=None))

        assert valuation.stock_after_adjustment == 0
        assert valuation.total_cost == D("0.00")
        assert {c.field for c in valuation.corrections} == {
            "stock_in_hand",
            "adjusted_by",
            "unit_cost",
        }

    def test_negative_unit_cost_becomes_zero(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand=5, adjusted_by=0, unit_cost="-3"))

        assert valuation.unit_cost == 0
        assert valuation.corrections[0].kind == CorrectionKind.NEGATIVE_VALUE

    def test_value_too_large_marks_valuation_failed(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand="1e40", unit_cost="1"))

        assert valuation.failed
        assert valuation.stock_after_adjustment == 0
        assert valuation.total_cost == D("0.00")

    def test_overflowing_adjustment_marks_valuation_failed(self) -> None:
        valuation = revalue_stock(StockAdjustment(stock_in_hand="1e9999999", adjusted_by="1e9999999", unit_cost="1"))

        assert valuation.failed

    def test_normal_valuation_is_not_failed(self) -> None:
        assert not revalue_stock(StockAdjustment(stock_in_hand=1, unit_cost=1)).failed
