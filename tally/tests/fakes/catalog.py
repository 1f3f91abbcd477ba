"""Fake CatalogPort implementation for testing."""

from decimal import Decimal

from tally.core.models import CatalogEntry
from tally.core.ports import CatalogPort


class FakeCatalogPort(CatalogPort):
    """In-memory catalog for testing.

    Tracks lookups so tests can assert the service consulted it.
    """

    def __init__(self, entries: list[CatalogEntry] | None = None):
        """Initialize with the given entries or two default products."""
        if entries is None:
            entries = [
                CatalogEntry(
                    product_id="P-1",
                    product_name="Widget",
                    unit_price=Decimal("100"),
                    tax_percent=Decimal("5"),
                    sku="WG-1",
                ),
                CatalogEntry(
                    product_id="P-2",
                    product_name="Gadget",
                    unit_price=Decimal("30"),
                    tax_percent=Decimal("0"),
                    sku="GD-2",
                ),
            ]
        self.entries: dict[str, CatalogEntry] = {e.product_id: e for e in entries}
        self.get_entry_calls: list[str] = []
        self.search_calls: list[tuple[str, int]] = []

    async def get_entry(self, product_id: str) -> CatalogEntry | None:
        self.get_entry_calls.append(product_id)
        return self.entries.get(product_id)

    async def search(self, term: str = "", limit: int = 20) -> list[CatalogEntry]:
        self.search_calls.append((term, limit))
        matches = [
            entry
            for entry in self.entries.values()
            if term.lower() in entry.product_name.lower()
        ]
        return matches[:limit]

    def add_entry(self, entry: CatalogEntry) -> None:
        """Add a product for a test."""
        self.entries[entry.product_id] = entry
