"""CLI command implementations for Tally.

Provides draft-order editing through a command-line interface.

This adapter maps CLI commands (add, update, adjust, pay, ...) to
OrderDraftPort operations. It handles CLI-specific formatting and error
reporting; amounts are returned as strings so JSON output keeps every
decimal place.
"""

import logging
from typing import Any

from tally.adapters.receipt.stdout import format_money
from tally.core.models import (
    CatalogEntry,
    PaymentSummary,
    PricedLine,
    PricedOrder,
    StockAdjustment,
    StockValuation,
)
from tally.core.ports import CatalogPort, OrderDraftPort
from tally.core.stock import revalue_stock

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to OrderDraftPort.

    Every editing command returns the refreshed totals so the user sees
    the effect of each change immediately.
    """

    def __init__(self, draft: OrderDraftPort, catalog: CatalogPort, currency_symbol: str = "₹"):
        """Initialize the CLI command handler.

        Args:
            draft: OrderDraftPort implementation holding the current order.
            catalog: CatalogPort implementation for product listings.
            currency_symbol: Symbol used by text output.
        """
        self.draft = draft
        self.catalog = catalog
        self.currency_symbol = currency_symbol

    async def list_products(self, term: Any = "", limit: Any = 20) -> dict[str, Any]:
        """List catalog products matching a search term."""
        try:
            limit = _as_int(limit, "limit")
            if limit < 1:
                raise ValueError(f"limit must be at least 1, got {limit}")
        except ValueError as e:
            logger.error(f"Failed to list products: {e}")
            return self._error("products", e)

        entries = await self.catalog.search(str(term or ""), limit)
        return {
            "status": "success",
            "operation": "products",
            "data": [self._entry_to_dict(entry) for entry in entries],
        }

    async def add_line(self, product_id: str, quantity: Any = 1) -> dict[str, Any]:
        """Add a catalog product to the draft."""
        try:
            priced = await self.draft.add_line(product_id, quantity)
            return self._success("add", priced)
        except ValueError as e:
            logger.error(f"Failed to add line: {e}")
            return self._error("add", e)

    async def add_custom_line(
        self,
        unit_price: Any,
        quantity: Any = 1,
        discount_percent: Any = None,
        tax_percent: Any = None,
        product_name: str | None = None,
    ) -> dict[str, Any]:
        """Add a line that is not in the catalog."""
        try:
            priced = await self.draft.add_custom_line(
                unit_price,
                quantity,
                discount_percent=discount_percent,
                tax_percent=tax_percent,
                product_name=product_name,
            )
            return self._success("custom", priced)
        except ValueError as e:
            logger.error(f"Failed to add custom line: {e}")
            return self._error("custom", e)

    async def update_line(self, index: Any, changes: dict[str, Any]) -> dict[str, Any]:
        """Change pricing inputs on one line."""
        try:
            priced = await self.draft.update_line(_as_int(index, "index"), **changes)
            return self._success("update", priced)
        except (IndexError, ValueError) as e:
            logger.error(f"Failed to update line {index}: {e}")
            return self._error("update", e)

    async def remove_line(self, index: Any) -> dict[str, Any]:
        """Remove one line from the draft."""
        try:
            priced = await self.draft.remove_line(_as_int(index, "index"))
            return self._success("remove", priced)
        except (IndexError, ValueError) as e:
            logger.error(f"Failed to remove line {index}: {e}")
            return self._error("remove", e)

    async def set_adjustments(
        self,
        order_discount_percent: Any = None,
        order_tax_percent: Any = None,
        shipping_fee: Any = None,
    ) -> dict[str, Any]:
        """Set order-level discount, tax and shipping."""
        priced = await self.draft.set_adjustments(
            order_discount_percent=order_discount_percent,
            order_tax_percent=order_tax_percent,
            shipping_fee=shipping_fee,
        )
        return self._success("adjust", priced)

    async def show_totals(self, output_format: str = "json") -> dict[str, Any]:
        """Show the current draft and its totals.

        Args:
            output_format: Output format ('json', 'text'). Default 'json'.
        """
        priced = await self.draft.snapshot()
        payments = await self.draft.payment_summary()

        if output_format == "json":
            result = self._success("totals", priced)
            result["payments"] = self._payments_to_dict(payments)
            return result

        elif output_format == "text":
            return {
                "status": "success",
                "operation": "totals",
                "data": self._format_totals_as_text(priced, payments),
            }

        else:
            return {
                "status": "error",
                "operation": "totals",
                "message": f"Unsupported format: {output_format}",
            }

    async def record_payment(
        self,
        amount: Any,
        method: str = "Cash",
        received_amount: Any = None,
        reference: str = "",
    ) -> dict[str, Any]:
        """Apply a payment to the draft."""
        try:
            summary = await self.draft.record_payment(
                amount, method=method, received_amount=received_amount, reference=reference
            )
            return {
                "status": "success",
                "operation": "pay",
                "payments": self._payments_to_dict(summary),
            }
        except ValueError as e:
            logger.error(f"Payment rejected: {e}")
            return self._error("pay", e)

    async def submit(self) -> dict[str, Any]:
        """Submit the draft order."""
        try:
            reference = await self.draft.submit()
            return {
                "status": "success",
                "operation": "submit",
                "reference": reference,
                "message": f"Order {reference} submitted",
            }
        except ValueError as e:
            logger.error(f"Failed to submit order: {e}")
            return self._error("submit", e)

    async def reset(self) -> dict[str, Any]:
        """Discard the draft."""
        priced = await self.draft.reset()
        return self._success("reset", priced)

    async def value_stock(
        self, stock_in_hand: Any = 0, adjusted_by: Any = 0, unit_cost: Any = 0
    ) -> dict[str, Any]:
        """Value a stock adjustment."""
        valuation = revalue_stock(
            StockAdjustment(
                stock_in_hand=stock_in_hand,
                adjusted_by=adjusted_by,
                unit_cost=unit_cost,
            )
        )
        return {
            "status": "success",
            "operation": "stock",
            "data": self._valuation_to_dict(valuation),
        }

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------

    def _success(self, operation: str, priced: PricedOrder) -> dict[str, Any]:
        return {
            "status": "success",
            "operation": operation,
            "data": self._order_to_dict(priced),
        }

    @staticmethod
    def _error(operation: str, error: Exception) -> dict[str, Any]:
        return {
            "status": "error",
            "operation": operation,
            "message": str(error),
        }

    @classmethod
    def _order_to_dict(cls, priced: PricedOrder) -> dict[str, Any]:
        totals = priced.totals
        return {
            "lines": [cls._line_to_dict(index, line) for index, line in enumerate(priced.lines)],
            "totals": {
                "sub_total": str(totals.sub_total),
                "order_discount_percent": str(totals.order_discount_percent),
                "order_discount_amount": str(totals.order_discount_amount),
                "order_tax_percent": str(totals.order_tax_percent),
                "order_tax_amount": str(totals.order_tax_amount),
                "shipping_fee": str(totals.shipping_fee),
                "grand_total": str(totals.grand_total),
                "line_total_sum": str(totals.line_total_sum),
                "has_warnings": totals.has_warnings,
                "excluded_lines": list(totals.excluded_lines),
            },
        }

    @staticmethod
    def _line_to_dict(index: int, line: PricedLine) -> dict[str, Any]:
        return {
            "index": index,
            "product_id": line.item.product_id,
            "product_name": line.item.product_name,
            "unit_price": str(line.unit_price),
            "quantity": line.quantity,
            "discount_percent": str(line.discount_percent),
            "tax_percent": str(line.tax_percent),
            "taxable_amount": str(line.taxable_amount),
            "tax_amount": str(line.tax_amount),
            "line_total": str(line.line_total),
            "corrections": [
                {
                    "field": c.field,
                    "kind": c.kind.value,
                    "original": c.original,
                    "applied": str(c.applied),
                }
                for c in line.corrections
            ],
        }

    @staticmethod
    def _payments_to_dict(summary: PaymentSummary) -> dict[str, Any]:
        return {
            "grand_total": str(summary.grand_total),
            "paid": str(summary.paid),
            "due": str(summary.due),
            "change_due": str(summary.change_due),
            "status": summary.status.value,
        }

    @staticmethod
    def _entry_to_dict(entry: CatalogEntry) -> dict[str, Any]:
        return {
            "product_id": entry.product_id,
            "product_name": entry.product_name,
            "sku": entry.sku,
            "unit_price": str(entry.unit_price),
            "tax_percent": str(entry.tax_percent),
            "category": entry.category,
        }

    @staticmethod
    def _valuation_to_dict(valuation: StockValuation) -> dict[str, Any]:
        return {
            "stock_in_hand": str(valuation.stock_in_hand),
            "adjusted_by": str(valuation.adjusted_by),
            "unit_cost": str(valuation.unit_cost),
            "stock_after_adjustment": str(valuation.stock_after_adjustment),
            "total_cost": str(valuation.total_cost),
            "corrections": [c.field for c in valuation.corrections],
            "failed": valuation.failed,
        }

    def _format_totals_as_text(self, priced: PricedOrder, payments: PaymentSummary) -> str:
        """Format the draft as human-readable text."""
        money = self._money
        lines = []

        for index, line in enumerate(priced.lines):
            name = line.item.product_name or line.item.product_id or "Custom item"
            lines.append(
                f"[{index}] {name} x{line.quantity} @ {money(line.unit_price)}"
                f" (-{line.discount_percent}%, +{line.tax_percent}% tax) = {money(line.line_total)}"
            )
        if not priced.lines:
            lines.append("(no lines)")
        lines.append("")

        totals = priced.totals
        lines.append(f"Subtotal: {money(totals.sub_total)}")
        lines.append(f"Order Tax: {money(totals.order_tax_amount)}")
        lines.append(f"Discount: {money(totals.order_discount_amount)}")
        lines.append(f"Shipping: {money(totals.shipping_fee)}")
        lines.append(f"Grand Total: {money(totals.grand_total)}")
        lines.append(f"Paid: {money(payments.paid)} / Due: {money(payments.due)} ({payments.status.value})")
        if totals.has_warnings:
            lines.append("Warning: some inputs were adjusted or lines were excluded")

        return "\n".join(lines)

    def _money(self, value) -> str:
        return format_money(value, self.currency_symbol)


def _as_int(value: Any, name: str) -> int:
    """Read a whole-number argument that may arrive as JSON text."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a whole number, got {value!r}") from e


def _require(args: dict[str, Any], *names: str) -> None:
    missing = [name for name in names if name not in args]
    if missing:
        raise ValueError(f"Missing required parameter: {', '.join(missing)}")


async def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler wired to the draft and catalog.
        command: Command name.
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required argument is missing.
    """
    if command == "products":
        return await handler.list_products(args.get("term", ""), args.get("limit", 20))

    elif command == "add":
        _require(args, "product_id")
        return await handler.add_line(args["product_id"], args.get("quantity", 1))

    elif command == "custom":
        _require(args, "unit_price")
        return await handler.add_custom_line(
            args["unit_price"],
            args.get("quantity", 1),
            discount_percent=args.get("discount_percent"),
            tax_percent=args.get("tax_percent"),
            product_name=args.get("product_name"),
        )

    elif command == "update":
        _require(args, "index")
        changes = {key: value for key, value in args.items() if key != "index"}
        return await handler.update_line(args["index"], changes)

    elif command == "remove":
        _require(args, "index")
        return await handler.remove_line(args["index"])

    elif command == "adjust":
        return await handler.set_adjustments(
            order_discount_percent=args.get("discount"),
            order_tax_percent=args.get("tax"),
            shipping_fee=args.get("shipping"),
        )

    elif command == "totals":
        return await handler.show_totals(args.get("format", "json"))

    elif command == "pay":
        _require(args, "amount")
        return await handler.record_payment(
            args["amount"],
            method=args.get("method", "Cash"),
            received_amount=args.get("received"),
            reference=args.get("reference", ""),
        )

    elif command == "submit":
        return await handler.submit()

    elif command == "reset":
        return await handler.reset()

    elif command == "stock":
        return await handler.value_stock(
            args.get("stock_in_hand", 0),
            args.get("adjusted_by", 0),
            args.get("unit_cost", 0),
        )

    else:
        raise ValueError(f"Unknown command: {command}. Use 'help' for available commands.")
