"""Unit tests for the CLI command handler and dispatcher.

Tests verify that CLI commands:
- Delegate to the draft service and return refreshed totals
- Serialize amounts as strings
- Turn rejected edits into error results instead of raising
"""

from decimal import Decimal

import pytest

from tally.adapters.cli.commands import CLICommandHandler, run_command
from tally.core.order_service import OrderDraftService
from tally.tests.fakes import FakeCatalogPort, FakeOrderSinkPort

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def catalog() -> FakeCatalogPort:
    """Catalog with Widget (P-1) and Gadget (P-2)."""
    return FakeCatalogPort()


@pytest.fixture
def sink() -> FakeOrderSinkPort:
    """Sink that records submitted orders."""
    return FakeOrderSinkPort()


@pytest.fixture
def handler(catalog: FakeCatalogPort, sink: FakeOrderSinkPort) -> CLICommandHandler:
    """Handler wired to a real draft service over fakes."""
    draft = OrderDraftService(catalog=catalog, sink=sink)
    return CLICommandHandler(draft, catalog, currency_symbol="$")


# ============================================================================
# Editing commands
# ============================================================================


class TestEditingCommands:
    """add, custom, update, remove and adjust."""

    @pytest.mark.asyncio
    async def test_add_returns_priced_draft(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "add", {"product_id": "P-1", "quantity": 2})

        assert result["status"] == "success"
        assert result["operation"] == "add"
        line = result["data"]["lines"][0]
        assert line["index"] == 0
        assert line["product_name"] == "Widget"
        assert line["line_total"] == "210.00"
        assert result["data"]["totals"]["grand_total"] == "200.00"

    @pytest.mark.asyncio
    async def test_add_unknown_product_is_error(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "add", {"product_id": "nope"})

        assert result["status"] == "error"
        assert "not found" in result["message"]

    @pytest.mark.asyncio
    async def test_custom_line_reports_corrections(self, handler: CLICommandHandler) -> None:
        result = await run_command(
            handler, "custom", {"unit_price": "80", "quantity": "", "discount_percent": 150}
        )

        line = result["data"]["lines"][0]
        assert line["quantity"] == 1
        assert line["line_total"] == "0.00"
        assert [c["field"] for c in line["corrections"]] == ["quantity", "discount_percent"]
        assert line["corrections"][1]["applied"] == "100"

    @pytest.mark.asyncio
    async def test_update_and_remove(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        updated = await run_command(handler, "update", {"index": 0, "quantity": 3})
        removed = await run_command(handler, "remove", {"index": 0})

        assert updated["data"]["lines"][0]["line_total"] == "90.00"
        assert removed["data"]["lines"] == []

    @pytest.mark.asyncio
    async def test_update_bad_index_is_error(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "update", {"index": 5, "quantity": 3})

        assert result["status"] == "error"
        assert "No line at index 5" in result["message"]

    @pytest.mark.asyncio
    async def test_update_unknown_field_is_error(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        result = await run_command(handler, "update", {"index": 0, "sku": "X"})

        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_remove_bad_index_is_error(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "remove", {"index": 0})

        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_index_given_as_text(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        updated = await run_command(handler, "update", {"index": "0", "quantity": 3})
        removed = await run_command(handler, "remove", {"index": "0"})

        assert updated["status"] == "success"
        assert updated["data"]["lines"][0]["quantity"] == 3
        assert removed["data"]["lines"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", ["a", "1.5", 1.5, True, None])
    async def test_non_integer_index_is_error(self, handler: CLICommandHandler, index: object) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        updated = await run_command(handler, "update", {"index": index, "quantity": 3})
        removed = await run_command(handler, "remove", {"index": index})

        assert updated["status"] == "error"
        assert "index must be a whole number" in updated["message"]
        assert removed["status"] == "error"

    @pytest.mark.asyncio
    async def test_huge_quantity_is_clamped(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "custom", {"unit_price": "1", "quantity": "1e9999999"})

        line = result["data"]["lines"][0]
        assert line["quantity"] == 999999999
        assert line["line_total"] == "999999999.00"
        assert line["corrections"][0]["kind"] == "quantity_above_maximum"

    @pytest.mark.asyncio
    async def test_adjust(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "custom", {"unit_price": "50"})
        await run_command(handler, "custom", {"unit_price": "30", "quantity": 3})

        result = await run_command(handler, "adjust", {"discount": 10, "tax": 8})

        totals = result["data"]["totals"]
        assert totals["sub_total"] == "140.00"
        assert totals["order_discount_amount"] == "14.00"
        assert totals["order_tax_amount"] == "10.08"
        assert totals["grand_total"] == "136.08"
        assert totals["has_warnings"] is False


# ============================================================================
# Totals, payments and submit
# ============================================================================


class TestOrderCommands:
    """totals, pay, submit, reset, products and stock."""

    @pytest.mark.asyncio
    async def test_totals_json_includes_payments(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        result = await run_command(handler, "totals", {})

        assert result["data"]["totals"]["grand_total"] == "30.00"
        assert result["payments"] == {
            "grand_total": "30.00",
            "paid": "0.00",
            "due": "30.00",
            "change_due": "0.00",
            "status": "Unpaid",
        }

    @pytest.mark.asyncio
    async def test_totals_text(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-1", "quantity": 2})

        result = await run_command(handler, "totals", {"format": "text"})

        text = result["data"]
        assert "[0] Widget x2 @ $100.00" in text
        assert "= $210.00" in text
        assert "Grand Total: $200.00" in text
        assert "(Unpaid)" in text

    @pytest.mark.asyncio
    async def test_totals_text_empty_draft(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "totals", {"format": "text"})

        assert "(no lines)" in result["data"]

    @pytest.mark.asyncio
    async def test_totals_unknown_format(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "totals", {"format": "xml"})

        assert result["status"] == "error"
        assert "Unsupported format" in result["message"]

    @pytest.mark.asyncio
    async def test_pay(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        result = await run_command(handler, "pay", {"amount": "30", "received": "50"})

        assert result["payments"]["status"] == "Paid"
        assert result["payments"]["change_due"] == "20.00"

    @pytest.mark.asyncio
    async def test_pay_over_due_is_error(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        result = await run_command(handler, "pay", {"amount": "31"})

        assert result["status"] == "error"
        assert "exceeds remaining balance" in result["message"]

    @pytest.mark.asyncio
    async def test_pay_too_large_is_error(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-2"})

        result = await run_command(handler, "pay", {"amount": "1e40"})

        assert result["status"] == "error"
        assert "too large" in result["message"]

    @pytest.mark.asyncio
    async def test_submit(self, handler: CLICommandHandler, sink: FakeOrderSinkPort) -> None:
        await run_command(handler, "add", {"product_id": "P-1"})

        result = await run_command(handler, "submit", {})

        assert result["status"] == "success"
        assert result["reference"] == "TEST-0001"
        assert len(sink.submitted) == 1

    @pytest.mark.asyncio
    async def test_submit_empty_is_error(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "submit", {})

        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_reset(self, handler: CLICommandHandler) -> None:
        await run_command(handler, "add", {"product_id": "P-1"})

        result = await run_command(handler, "reset", {})

        assert result["data"]["lines"] == []
        assert result["data"]["totals"]["grand_total"] == "0.00"

    @pytest.mark.asyncio
    async def test_products(self, handler: CLICommandHandler, catalog: FakeCatalogPort) -> None:
        result = await run_command(handler, "products", {"term": "gad"})

        assert catalog.search_calls == [("gad", 20)]
        assert result["data"] == [
            {
                "product_id": "P-2",
                "product_name": "Gadget",
                "sku": "GD-2",
                "unit_price": "30",
                "tax_percent": "0",
                "category": "",
            }
        ]

    @pytest.mark.asyncio
    async def test_products_limit_given_as_text(
        self, handler: CLICommandHandler, catalog: FakeCatalogPort
    ) -> None:
        result = await run_command(handler, "products", {"limit": "1"})

        assert catalog.search_calls == [("", 1)]
        assert len(result["data"]) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", ["x", 0, -3, 2.5])
    async def test_products_bad_limit_is_error(
        self, handler: CLICommandHandler, catalog: FakeCatalogPort, limit: object
    ) -> None:
        result = await run_command(handler, "products", {"limit": limit})

        assert result["status"] == "error"
        assert catalog.search_calls == []

    @pytest.mark.asyncio
    async def test_stock(self, handler: CLICommandHandler) -> None:
        result = await run_command(
            handler, "stock", {"stock_in_hand": 40, "adjusted_by": -5, "unit_cost": "12.50"}
        )

        assert result["data"]["stock_after_adjustment"] == "35"
        assert result["data"]["total_cost"] == "437.50"
        assert result["data"]["corrections"] == []

    @pytest.mark.asyncio
    async def test_stock_too_large_is_flagged(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "stock", {"stock_in_hand": "1e40", "unit_cost": 1})

        assert result["status"] == "success"
        assert result["data"]["failed"] is True
        assert result["data"]["total_cost"] == "0.00"


# ============================================================================
# Dispatch errors
# ============================================================================


class TestDispatch:
    """Unknown commands and missing arguments."""

    @pytest.mark.asyncio
    async def test_unknown_command(self, handler: CLICommandHandler) -> None:
        with pytest.raises(ValueError, match="Unknown command"):
            await run_command(handler, "refund", {})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("command", ["add", "custom", "update", "remove", "pay"])
    async def test_missing_required_argument(
        self, handler: CLICommandHandler, command: str
    ) -> None:
        with pytest.raises(ValueError, match="Missing required parameter"):
            await run_command(handler, command, {})

    @pytest.mark.asyncio
    async def test_amounts_are_strings(self, handler: CLICommandHandler) -> None:
        result = await run_command(handler, "custom", {"unit_price": 0.1, "quantity": 3})

        totals = result["data"]["totals"]
        assert totals["sub_total"] == "0.30"
        assert Decimal(totals["grand_total"]) == Decimal("0.30")
