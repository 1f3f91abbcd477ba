"""Order aggregation: subtotal, order-level discount and tax, grand total.

    sub_total       = sum(unit_price * quantity)        gross of line adjustments
    discount_amount = sub_total * order_discount_percent / 100
    tax_amount      = (sub_total - discount_amount) * order_tax_percent / 100
    grand_total     = sub_total - discount_amount + tax_amount + shipping_fee

Lines are folded left to right with exact decimals; only the final
aggregate fields are rounded.
"""

import logging
from collections.abc import Iterable

from .line_calculator import LineRecalculator
from .models import (
    HUNDRED,
    ZERO,
    Correction,
    LineItem,
    Order,
    OrderTotals,
    PricedLine,
    PricedOrder,
    RawNumber,
)
from .money import coerce_amount, coerce_percent, round_money

logger = logging.getLogger(__name__)


class OrderAggregator:
    """Folds priced lines and order-level adjustments into OrderTotals.

    Pure decision logic with no side effects.
    """

    @staticmethod
    def aggregate(
        lines: Iterable[LineItem | PricedLine],
        order_discount_percent: RawNumber = ZERO,
        order_tax_percent: RawNumber = ZERO,
        shipping_fee: RawNumber = ZERO,
    ) -> OrderTotals:
        """Compute totals for a set of lines.

        Every line is re-derived from its inputs, so a PricedLine whose
        amounts were edited by hand cannot skew the result. Lines that
        cannot be priced are left out and reported in `excluded_lines`;
        the rest of the order still totals.

        Never raises.
        """
        discount_percent, discount_notes = coerce_percent(
            "order_discount_percent", order_discount_percent
        )
        tax_percent, tax_notes = coerce_percent("order_tax_percent", order_tax_percent)
        shipping, shipping_notes = coerce_amount("shipping_fee", shipping_fee)
        corrections = tuple(discount_notes + tax_notes + shipping_notes)

        sub_total = ZERO
        line_total_sum = ZERO
        line_count = 0
        excluded: list[int] = []

        for index, line in enumerate(lines):
            if not isinstance(line, (LineItem, PricedLine)):
                logger.warning(
                    f"Excluding line {index}: unsupported type {type(line).__name__}"
                )
                excluded.append(index)
                continue

            priced = LineRecalculator.recalculate(line)
            if priced.failed or not priced.is_finite:
                logger.warning(
                    f"Excluding line {index}: amounts could not be computed",
                    extra={"product_id": priced.item.product_id},
                )
                excluded.append(index)
                continue

            sub_total += priced.gross_amount
            line_total_sum += priced.line_total
            line_count += 1

        try:
            discount_amount = sub_total * discount_percent / HUNDRED
            tax_amount = (sub_total - discount_amount) * tax_percent / HUNDRED
            grand_total = sub_total - discount_amount + tax_amount + shipping
            totals = OrderTotals(
                sub_total=round_money(sub_total),
                order_discount_percent=discount_percent,
                order_discount_amount=round_money(discount_amount),
                order_tax_percent=tax_percent,
                order_tax_amount=round_money(tax_amount),
                shipping_fee=round_money(shipping),
                grand_total=round_money(grand_total),
                line_total_sum=round_money(line_total_sum),
                line_count=line_count,
                has_warnings=bool(excluded or corrections),
                excluded_lines=tuple(excluded),
                corrections=corrections,
            )
        except ArithmeticError as e:
            logger.error(
                f"Order totals overflowed, reporting zero totals: {e}",
                extra={"line_count": line_count},
            )
            return OrderAggregator.empty_totals(
                excluded=tuple(range(line_count + len(excluded))),
                corrections=corrections,
            )

        if totals.has_warnings:
            logger.info(
                "Order totals computed with warnings",
                extra={
                    "excluded_lines": totals.excluded_lines,
                    "corrections": len(corrections),
                },
            )
        return totals

    @staticmethod
    def empty_totals(
        excluded: tuple[int, ...] = (),
        corrections: tuple[Correction, ...] = (),
    ) -> OrderTotals:
        """Zero totals, flagged when anything had to be dropped."""
        zero = round_money(ZERO)
        return OrderTotals(
            sub_total=zero,
            order_discount_percent=ZERO,
            order_discount_amount=zero,
            order_tax_percent=ZERO,
            order_tax_amount=zero,
            shipping_fee=zero,
            grand_total=zero,
            line_total_sum=zero,
            line_count=0,
            has_warnings=bool(excluded or corrections),
            excluded_lines=excluded,
            corrections=corrections,
        )


def aggregate_order(
    lines: Iterable[LineItem | PricedLine],
    order_discount_percent: RawNumber = ZERO,
    order_tax_percent: RawNumber = ZERO,
    shipping_fee: RawNumber = ZERO,
) -> OrderTotals:
    """Module-level shortcut for OrderAggregator.aggregate."""
    return OrderAggregator.aggregate(
        lines, order_discount_percent, order_tax_percent, shipping_fee
    )


def price_order(order: Order) -> PricedOrder:
    """Recalculate every line of an order and aggregate it."""
    priced_lines = tuple(LineRecalculator.recalculate(line) for line in order.lines)
    totals = OrderAggregator.aggregate(
        priced_lines,
        order.order_discount_percent,
        order.order_tax_percent,
        order.shipping_fee,
    )
    return PricedOrder(order=order, lines=priced_lines, totals=totals)


__all__ = ["OrderAggregator", "aggregate_order", "price_order"]
