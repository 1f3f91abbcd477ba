"""Stock adjustment valuation.

Given the stock on hand, the adjustment (positive to add, negative to
write off) and the unit cost, derive the stock level after the
adjustment and its total cost.
"""

import logging

from .models import ZERO, Correction, CorrectionKind, StockAdjustment, StockValuation
from .money import coerce_amount, round_money, to_decimal

logger = logging.getLogger(__name__)


def revalue_stock(adjustment: StockAdjustment) -> StockValuation:
    """Derive stock after adjustment and total cost.

    Non-numeric entries count as 0. Stock cannot go below zero, so a
    write-off larger than the stock on hand is clamped and recorded.

    Never raises. Values too large to total to the cent come back as a
    zero valuation with `failed=True`.
    """
    stock_in_hand, corrections = coerce_amount("stock_in_hand", adjustment.stock_in_hand)
    unit_cost, cost_notes = coerce_amount("unit_cost", adjustment.unit_cost)
    corrections.extend(cost_notes)

    adjusted_by = to_decimal(adjustment.adjusted_by)
    if adjusted_by is None:
        corrections.append(
            Correction(
                field="adjusted_by",
                kind=CorrectionKind.INVALID_NUMERIC,
                original=adjustment.adjusted_by,
                applied=ZERO,
            )
        )
        adjusted_by = ZERO

    try:
        stock_after = stock_in_hand + adjusted_by
        if stock_after < 0:
            corrections.append(
                Correction(
                    field="stock_after_adjustment",
                    kind=CorrectionKind.NEGATIVE_VALUE,
                    original=stock_after,
                    applied=ZERO,
                )
            )
            stock_after = ZERO
        total_cost = round_money(stock_after * unit_cost)
    except ArithmeticError as e:
        logger.warning(
            f"Stock adjustment for {adjustment.sku or adjustment.product_name or 'item'} could not be valued: {e}",
            extra={"sku": adjustment.sku},
        )
        return StockValuation(
            stock_in_hand=stock_in_hand,
            adjusted_by=adjusted_by,
            unit_cost=unit_cost,
            stock_after_adjustment=ZERO,
            total_cost=round_money(ZERO),
            corrections=tuple(corrections),
            failed=True,
        )

    return StockValuation(
        stock_in_hand=stock_in_hand,
        adjusted_by=adjusted_by,
        unit_cost=unit_cost,
        stock_after_adjustment=stock_after,
        total_cost=total_cost,
        corrections=tuple(corrections),
    )


__all__ = ["revalue_stock"]
