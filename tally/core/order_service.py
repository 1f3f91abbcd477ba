"""Order draft service: implements OrderDraftPort for interactive editing.

This is a core service that holds the order a user is currently
editing. Lines are stored exactly as entered; every read prices the
draft from scratch, so no derived amount can go stale. It defaults new
lines from the catalog and hands finished orders to the order sink.
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

from .models import (
    ZERO,
    LineItem,
    Order,
    Payment,
    PaymentSummary,
    PricedOrder,
    RawNumber,
)
from .money import round_money, to_decimal
from .order_aggregator import price_order
from .payments import PaymentRejectedError, summarize_payments, validate_payment
from .ports import CatalogPort, OrderDraftPort, OrderSinkPort

logger = logging.getLogger(__name__)

EDITABLE_LINE_FIELDS = frozenset(
    {"unit_price", "quantity", "discount_percent", "tax_percent"}
)


class OrderDraftService(OrderDraftPort):
    """Core implementation of OrderDraftPort.

    Coordinates the catalog, the pricing functions and the order sink
    for one draft at a time.
    """

    def __init__(
        self,
        catalog: CatalogPort,
        sink: OrderSinkPort,
        default_tax_percent: Decimal = ZERO,
        max_lines: int = 200,
    ):
        """Initialize the draft service.

        Args:
            catalog: CatalogPort implementation for defaulting lines.
            sink: OrderSinkPort implementation that receives submitted orders.
            default_tax_percent: Tax applied to custom lines when none is given.
            max_lines: Maximum number of lines allowed on one order.
        """
        self.catalog = catalog
        self.sink = sink
        self.default_tax_percent = default_tax_percent
        self.max_lines = max_lines
        self._order = Order()
        self._payments: list[Payment] = []

    @property
    def order(self) -> Order:
        """The draft as entered, without derived amounts."""
        return self._order

    async def add_line(self, product_id: str, quantity: RawNumber = 1) -> PricedOrder:
        entry = await self.catalog.get_entry(product_id)
        if entry is None:
            raise ValueError(f"Product {product_id} not found in catalog")

        self._append(entry.to_line(quantity))
        logger.info(
            f"Added {entry.product_name} to draft",
            extra={"product_id": product_id, "line_count": len(self._order.lines)},
        )
        return await self.snapshot()

    async def add_custom_line(
        self,
        unit_price: RawNumber,
        quantity: RawNumber = 1,
        discount_percent: RawNumber = None,
        tax_percent: RawNumber = None,
        product_name: str | None = None,
    ) -> PricedOrder:
        line = LineItem(
            unit_price=unit_price,
            quantity=quantity,
            discount_percent=ZERO if discount_percent is None else discount_percent,
            tax_percent=self.default_tax_percent if tax_percent is None else tax_percent,
            product_name=product_name,
        )
        self._append(line)
        logger.info(
            "Added custom line to draft",
            extra={"product_name": product_name, "line_count": len(self._order.lines)},
        )
        return await self.snapshot()

    async def update_line(self, index: int, **changes: RawNumber) -> PricedOrder:
        unknown = set(changes) - EDITABLE_LINE_FIELDS
        if unknown:
            raise ValueError(
                f"Cannot edit line fields: {', '.join(sorted(unknown))}"
            )

        lines = list(self._order.lines)
        self._check_index(index)
        lines[index] = replace(lines[index], **changes)
        self._order = replace(self._order, lines=tuple(lines))

        logger.debug(
            f"Updated line {index}",
            extra={"fields": sorted(changes)},
        )
        return await self.snapshot()

    async def remove_line(self, index: int) -> PricedOrder:
        self._check_index(index)
        lines = list(self._order.lines)
        removed = lines.pop(index)
        self._order = replace(self._order, lines=tuple(lines))

        logger.info(
            f"Removed line {index} from draft",
            extra={"product_id": getattr(removed, "product_id", None)},
        )
        return await self.snapshot()

    async def set_adjustments(
        self,
        order_discount_percent: RawNumber | None = None,
        order_tax_percent: RawNumber | None = None,
        shipping_fee: RawNumber | None = None,
    ) -> PricedOrder:
        changes = {
            name: value
            for name, value in (
                ("order_discount_percent", order_discount_percent),
                ("order_tax_percent", order_tax_percent),
                ("shipping_fee", shipping_fee),
            )
            if value is not None
        }
        self._order = replace(self._order, **changes)
        logger.debug("Updated order adjustments", extra={"fields": sorted(changes)})
        return await self.snapshot()

    async def snapshot(self) -> PricedOrder:
        return price_order(self._order)

    async def payment_summary(self) -> PaymentSummary:
        priced = await self.snapshot()
        return summarize_payments(priced.totals.grand_total, self._payments)

    async def record_payment(
        self,
        amount: RawNumber,
        method: str = "Cash",
        received_amount: RawNumber = None,
        reference: str = "",
    ) -> PaymentSummary:
        current = await self.payment_summary()
        paying = validate_payment(amount, current.due)

        received: Decimal | None = None
        if received_amount is not None and received_amount != "":
            received = to_decimal(received_amount)
            if received is None:
                raise PaymentRejectedError(
                    f"Received amount must be a number, got {received_amount!r}"
                )
            try:
                round_money(received)
            except ArithmeticError as e:
                raise PaymentRejectedError(
                    f"Received amount {received_amount!r} is too large"
                ) from e
            if received < paying:
                raise PaymentRejectedError(
                    f"Received amount {received} is less than paying amount {paying}"
                )

        self._payments.append(
            Payment(
                amount=paying,
                method=method,
                received_amount=received,
                reference=reference,
                paid_on=date.today(),
            )
        )
        summary = await self.payment_summary()
        logger.info(
            f"Recorded {method} payment of {paying}",
            extra={"due": str(summary.due), "status": summary.status.value},
        )
        return summary

    async def reset(self) -> PricedOrder:
        self._order = Order()
        self._payments = []
        return await self.snapshot()

    async def submit(self) -> str:
        if not self._order.lines:
            raise ValueError("Cannot submit an order without lines")

        priced = await self.snapshot()
        payments = summarize_payments(priced.totals.grand_total, self._payments)
        if priced.has_warnings:
            logger.warning(
                "Submitting order with warnings",
                extra={"excluded_lines": priced.totals.excluded_lines},
            )

        reference = await self.sink.submit(priced, payments)
        logger.info(
            f"Order {reference} submitted",
            extra={
                "grand_total": str(priced.totals.grand_total),
                "status": payments.status.value,
            },
        )
        await self.reset()
        return reference

    def _append(self, line: LineItem) -> None:
        if len(self._order.lines) >= self.max_lines:
            raise ValueError(f"Order cannot have more than {self.max_lines} lines")
        self._order = replace(self._order, lines=self._order.lines + (line,))

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._order.lines):
            raise IndexError(
                f"No line at index {index}; draft has {len(self._order.lines)} lines"
            )
