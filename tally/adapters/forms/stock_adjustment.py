"""Stock adjustment screen mapper."""

from collections.abc import Mapping
from typing import Any

from tally.core.models import StockAdjustment, StockValuation

from .fields import describe, pick, to_number

LABELS = {
    "stock_in_hand": "Stock in hand",
    "adjusted_by": "Stock adjusted",
    "unit_cost": "Unit cost",
    "stock_after_adjustment": "Stock after adjustment",
}


def adjustment_from_form(form: Mapping[str, Any]) -> StockAdjustment:
    """Read the stock adjustment form fields."""
    return StockAdjustment(
        stock_in_hand=pick(form, "stockInHand", default=0),
        adjusted_by=pick(form, "stockAdjusted", default=0),
        unit_cost=pick(form, "unitCost", default=0),
        product_name=str(form.get("productName") or ""),
        sku=str(form.get("sku") or ""),
    )


def stock_adjustment_payload(
    valuation: StockValuation, form: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Write the derived fields back onto the form."""
    warnings = [describe(c, LABELS) for c in valuation.corrections]
    if valuation.failed:
        warnings.append("Stock value could not be computed")

    payload = dict(form or {})
    payload.update(
        {
            "stockInHand": to_number(valuation.stock_in_hand),
            "stockAdjusted": to_number(valuation.adjusted_by),
            "unitCost": to_number(valuation.unit_cost),
            "stockAfterAdjustment": to_number(valuation.stock_after_adjustment),
            "totalCost": to_number(valuation.total_cost),
            "warnings": warnings,
        }
    )
    return payload
