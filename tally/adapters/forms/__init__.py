"""Screen form mappers.

Each screen keeps its own field names; these mappers translate between
them and the core's Order, PricedOrder and StockAdjustment values.
"""

from .quotation import order_from_quotation, quotation_payload
from .sale import order_from_sale_form, sale_payload
from .stock_adjustment import adjustment_from_form, stock_adjustment_payload

__all__ = [
    "adjustment_from_form",
    "order_from_quotation",
    "order_from_sale_form",
    "quotation_payload",
    "sale_payload",
    "stock_adjustment_payload",
]
