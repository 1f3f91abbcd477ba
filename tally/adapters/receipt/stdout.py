"""Stdout receipt adapter.

Implements OrderSinkPort by printing submitted orders to the terminal
with human-readable formatting. Currency symbol and thousand separators
are applied here; the core only hands over plain rounded numbers.
"""

import asyncio
import logging
import uuid
from decimal import Decimal

from tally.core.models import PaymentSummary, PricedLine, PricedOrder
from tally.core.ports import OrderSinkPort

logger = logging.getLogger(__name__)

WIDTH = 64


def format_money(value: Decimal, currency_symbol: str = "₹") -> str:
    """Format an amount as e.g. ₹1,234.50."""
    return f"{currency_symbol}{value:,.2f}"


class StdoutReceiptSink(OrderSinkPort):
    """Prints a receipt for each submitted order."""

    def __init__(self, currency_symbol: str = "₹", reference_prefix: str = "S", verbose: bool = False):
        """Initialize stdout receipt sink.

        Args:
            currency_symbol: Symbol printed in front of amounts.
            reference_prefix: Prefix for generated order references.
            verbose: If True, list the corrections applied to inputs.
        """
        self.currency_symbol = currency_symbol
        self.reference_prefix = reference_prefix
        self.verbose = verbose

    async def submit(self, priced_order: PricedOrder, payments: PaymentSummary) -> str:
        """Print the receipt and return a generated reference."""
        reference = f"{self.reference_prefix}-{uuid.uuid4().hex[:6].upper()}"
        await asyncio.to_thread(print, self.render(reference, priced_order, payments))
        logger.debug(f"Printed receipt {reference}")
        return reference

    def render(self, reference: str, priced_order: PricedOrder, payments: PaymentSummary) -> str:
        """Build the full receipt text."""
        sections = [
            self._format_header(reference),
            self._format_lines(priced_order.lines),
            self._format_totals(priced_order),
            self._format_payments(payments),
        ]
        if self.verbose:
            sections.append(self._format_corrections(priced_order))
        sections.append("=" * WIDTH)
        return "\n".join(section for section in sections if section)

    @staticmethod
    def _format_header(reference: str) -> str:
        lines = [
            "=" * WIDTH,
            "RECEIPT",
            "=" * WIDTH,
            f"Reference: {reference}",
        ]
        return "\n".join(lines)

    def _format_lines(self, lines: tuple[PricedLine, ...]) -> str:
        rows = ["", "-" * WIDTH, f"{'Item':<28}{'Qty':>5}{'Tax':>13}{'Total':>18}", "-" * WIDTH]
        for line in lines:
            name = line.item.product_name or line.item.product_id or "Custom item"
            if line.failed:
                rows.append(f"{name[:28]:<28}{line.quantity:>5}{'(excluded)':>31}")
                continue
            rows.append(
                f"{name[:28]:<28}{line.quantity:>5}"
                f"{self._money(line.tax_amount):>13}{self._money(line.line_total):>18}"
            )
            if line.discount_percent:
                rows.append(f"  discount {line.discount_percent}%")
        return "\n".join(rows)

    def _format_totals(self, priced_order: PricedOrder) -> str:
        totals = priced_order.totals
        rows = [
            "-" * WIDTH,
            f"Subtotal:     {self._money(totals.sub_total):>20}",
            f"Order Tax:    {self._money(totals.order_tax_amount):>20}",
            f"Discount:     {self._money(totals.order_discount_amount):>20}",
            f"Shipping:     {self._money(totals.shipping_fee):>20}",
            f"Grand Total:  {self._money(totals.grand_total):>20}",
        ]
        if totals.has_warnings:
            rows.append("Warning: some inputs were adjusted or lines were excluded")
        return "\n".join(rows)

    def _format_payments(self, payments: PaymentSummary) -> str:
        rows = [
            "",
            f"Paid:         {self._money(payments.paid):>20}",
            f"Due:          {self._money(payments.due):>20}",
        ]
        if payments.change_due:
            rows.append(f"Change:       {self._money(payments.change_due):>20}")
        rows.append(f"Status: {payments.status.value}")
        return "\n".join(rows)

    @staticmethod
    def _format_corrections(priced_order: PricedOrder) -> str:
        rows = []
        for index, line in enumerate(priced_order.lines):
            for correction in line.corrections:
                rows.append(
                    f"  line {index} {correction.field}: "
                    f"{correction.original!r} -> {correction.applied} ({correction.kind.value})"
                )
        for correction in priced_order.totals.corrections:
            rows.append(
                f"  order {correction.field}: "
                f"{correction.original!r} -> {correction.applied} ({correction.kind.value})"
            )
        if not rows:
            return ""
        return "\n".join(["", "Corrections:", *rows])

    def _money(self, value: Decimal) -> str:
        return format_money(value, self.currency_symbol)
