"""Port interfaces for the Tally pricing core.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - CatalogPort: Resolve a product into its default price and tax
   - OrderSinkPort: Hand a finished order to persistence or output

2. **Driving Ports** (adapters/external systems call into core)
   - OrderDraftPort: Edit a draft order and read its totals
"""

from abc import ABC, abstractmethod

from .models import (
    CatalogEntry,
    PaymentSummary,
    PricedOrder,
    RawNumber,
)


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class CatalogPort(ABC):
    """Port for looking up products to default new lines.

    The core only consumes the pre-resolved price and tax pair; whether
    the product exists is the catalog's concern.
    """

    @abstractmethod
    async def get_entry(self, product_id: str) -> CatalogEntry | None:
        """Look up a single product.

        Args:
            product_id: Catalog identifier of the product.

        Returns:
            The CatalogEntry, or None if the product is unknown.

        Raises:
            Exception: If the catalog backend is unavailable.
        """

    @abstractmethod
    async def search(self, term: str = "", limit: int = 20) -> list[CatalogEntry]:
        """Find products whose name or SKU contains the term.

        Args:
            term: Case-insensitive search text. Empty returns everything.
            limit: Maximum number of entries to return.

        Returns:
            Matching entries ordered by product name.
        """


class OrderSinkPort(ABC):
    """Port for handing over a finished order.

    Serializing and submitting the order (an API call, a receipt
    printer) is the adapter's responsibility.
    """

    @abstractmethod
    async def submit(
        self, priced_order: PricedOrder, payments: PaymentSummary
    ) -> str:
        """Submit a priced order with its payment state.

        Args:
            priced_order: Lines, order adjustments and totals snapshot.
            payments: Paid and due amounts for the order.

        Returns:
            A reference for the submitted order.

        Raises:
            Exception: If the order could not be submitted.
        """


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class OrderDraftPort(ABC):
    """Port for editing a draft order.

    Driving port: the CLI or a screen adapter calls these methods on
    every user edit. Each mutation returns a fresh PricedOrder snapshot.
    """

    @abstractmethod
    async def add_line(self, product_id: str, quantity: RawNumber = 1) -> PricedOrder:
        """Add a line defaulted from the catalog.

        Raises:
            ValueError: If the product is not in the catalog.
        """

    @abstractmethod
    async def add_custom_line(
        self,
        unit_price: RawNumber,
        quantity: RawNumber = 1,
        discount_percent: RawNumber = None,
        tax_percent: RawNumber = None,
        product_name: str | None = None,
    ) -> PricedOrder:
        """Add a line that is not backed by a catalog entry."""

    @abstractmethod
    async def update_line(self, index: int, **changes: RawNumber) -> PricedOrder:
        """Change pricing inputs of an existing line.

        Raises:
            IndexError: If there is no line at the index.
            ValueError: If a change names an unknown field.
        """

    @abstractmethod
    async def remove_line(self, index: int) -> PricedOrder:
        """Remove a line.

        Raises:
            IndexError: If there is no line at the index.
        """

    @abstractmethod
    async def set_adjustments(
        self,
        order_discount_percent: RawNumber | None = None,
        order_tax_percent: RawNumber | None = None,
        shipping_fee: RawNumber | None = None,
    ) -> PricedOrder:
        """Change order-level discount, tax or shipping. None leaves a field as is."""

    @abstractmethod
    async def snapshot(self) -> PricedOrder:
        """Return the current totals without changing anything."""

    @abstractmethod
    async def record_payment(
        self,
        amount: RawNumber,
        method: str = "Cash",
        received_amount: RawNumber = None,
        reference: str = "",
    ) -> PaymentSummary:
        """Apply a payment against the remaining balance.

        Raises:
            PaymentRejectedError: If the amount is invalid or too large.
        """

    @abstractmethod
    async def payment_summary(self) -> PaymentSummary:
        """Return paid and due amounts against the current grand total."""

    @abstractmethod
    async def reset(self) -> PricedOrder:
        """Discard the draft, its lines and its payments."""

    @abstractmethod
    async def submit(self) -> str:
        """Submit the draft and start a new one.

        Raises:
            ValueError: If the draft has no lines.
        """
