"""Core domain logic for the Tally pricing system.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .line_calculator import LineRecalculator, recalculate_line
from .models import (
    CatalogEntry,
    Correction,
    CorrectionKind,
    LineItem,
    Order,
    OrderTotals,
    Payment,
    PaymentStatus,
    PaymentSummary,
    PricedLine,
    PricedOrder,
    StockAdjustment,
    StockValuation,
)
from .order_aggregator import OrderAggregator, aggregate_order, price_order

__all__ = [
    "CatalogEntry",
    "Correction",
    "CorrectionKind",
    "LineItem",
    "LineRecalculator",
    "Order",
    "OrderAggregator",
    "OrderTotals",
    "Payment",
    "PaymentStatus",
    "PaymentSummary",
    "PricedLine",
    "PricedOrder",
    "StockAdjustment",
    "StockValuation",
    "aggregate_order",
    "price_order",
    "recalculate_line",
]
