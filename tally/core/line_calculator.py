"""Line recalculation: derive taxable amount, tax and total for one line.

Calculation order, shared by every screen that prices lines:

    gross    = unit_price * quantity
    taxable  = gross * (1 - discount_percent / 100)
    tax      = taxable * tax_percent / 100
    total    = taxable + tax

Only `tax_amount` and `line_total` are rounded (2 places, half-up).
`taxable_amount` stays exact so that summing many lines does not
compound rounding error.
"""

import logging
from dataclasses import replace
from decimal import Decimal

from .models import HUNDRED, ZERO, LineItem, PricedLine
from .money import coerce_amount, coerce_percent, coerce_quantity, round_money

logger = logging.getLogger(__name__)


class LineRecalculator:
    """Produces a PricedLine from a LineItem.

    No external dependencies; a pure function over domain objects.
    All methods are static as the class carries no state.
    """

    @staticmethod
    def recalculate(line: LineItem | PricedLine) -> PricedLine:
        """Coerce the line's inputs and derive its amounts.

        A PricedLine is accepted too; only its inputs are read, so
        recalculating an already priced line changes nothing.

        Never raises. If the arithmetic itself fails (a value too large
        for the decimal context), the line comes back with zero amounts
        and `failed=True`, and the aggregator leaves it out.
        """
        item = line.item if isinstance(line, PricedLine) else line

        unit_price, price_notes = coerce_amount("unit_price", item.unit_price)
        quantity, quantity_notes = coerce_quantity("quantity", item.quantity)
        discount, discount_notes = coerce_percent(
            "discount_percent", item.discount_percent
        )
        tax_percent, tax_notes = coerce_percent("tax_percent", item.tax_percent)

        coerced = replace(
            item,
            unit_price=unit_price,
            quantity=quantity,
            discount_percent=discount,
            tax_percent=tax_percent,
        )
        corrections = tuple(price_notes + quantity_notes + discount_notes + tax_notes)

        try:
            gross, taxable, tax_amount, line_total = LineRecalculator.derive(
                unit_price, quantity, discount, tax_percent
            )
        except ArithmeticError as e:
            logger.warning(
                f"Line for {item.product_id or 'custom item'} could not be priced: {e}",
                extra={"product_id": item.product_id, "quantity": quantity},
            )
            return PricedLine(
                item=coerced,
                gross_amount=ZERO,
                taxable_amount=ZERO,
                tax_amount=ZERO,
                line_total=ZERO,
                corrections=corrections,
                failed=True,
            )

        return PricedLine(
            item=coerced,
            gross_amount=gross,
            taxable_amount=taxable,
            tax_amount=tax_amount,
            line_total=line_total,
            corrections=corrections,
        )

    @staticmethod
    def derive(
        unit_price: Decimal,
        quantity: int,
        discount_percent: Decimal,
        tax_percent: Decimal,
    ) -> tuple[Decimal, Decimal, Decimal, Decimal]:
        """Return (gross, taxable, tax_amount, line_total) for clean inputs."""
        gross = unit_price * quantity
        taxable = gross * (HUNDRED - discount_percent) / HUNDRED
        raw_tax = taxable * tax_percent / HUNDRED
        return gross, taxable, round_money(raw_tax), round_money(taxable + raw_tax)


def recalculate_line(line: LineItem | PricedLine) -> PricedLine:
    """Module-level shortcut for LineRecalculator.recalculate."""
    return LineRecalculator.recalculate(line)


__all__ = ["LineRecalculator", "recalculate_line"]
