"""In-memory catalog adapter.

Implements CatalogPort over a fixed set of products, either the
built-in sample catalog or entries loaded from a JSON file in the
shape the product screens use:

    [{"id": "P-1001", "productName": "...", "sku": "...",
      "price": 120.0, "taxPercent": 5, "category": "..."}]
"""

import json
import logging
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path
from typing import Any

from tally.core.models import CatalogEntry
from tally.core.money import to_decimal
from tally.core.ports import CatalogPort

logger = logging.getLogger(__name__)

SAMPLE_ENTRIES: tuple[CatalogEntry, ...] = (
    CatalogEntry("P-1001", "Wireless Mouse", Decimal("499.00"), Decimal("18"), "WM-001", "Accessories"),
    CatalogEntry("P-1002", "USB-C Charger 65W", Decimal("1299.00"), Decimal("18"), "CH-065", "Accessories"),
    CatalogEntry("P-1003", "Notebook A5 Ruled", Decimal("45.50"), Decimal("12"), "NB-A5R", "Stationery"),
    CatalogEntry("P-1004", "Ballpoint Pen Blue (10 pack)", Decimal("80.00"), Decimal("12"), "BP-B10", "Stationery"),
    CatalogEntry("P-1005", "Basmati Rice 5kg", Decimal("650.00"), Decimal("5"), "RC-BS5", "Grocery"),
    CatalogEntry("P-1006", "Green Tea 100 bags", Decimal("320.00"), Decimal("5"), "GT-100", "Grocery"),
    CatalogEntry("P-1007", "Office Chair Mesh", Decimal("7499.00"), Decimal("28"), "OC-MSH", "Furniture"),
    CatalogEntry("P-1008", "Printer Paper A4 500 sheets", Decimal("299.00"), Decimal("12"), "PP-A4-500", "Stationery"),
)


class InMemoryCatalogAdapter(CatalogPort):
    """Serves catalog entries from memory."""

    def __init__(self, entries: Iterable[CatalogEntry] | None = None):
        """Initialize the catalog.

        Args:
            entries: Entries to serve. Defaults to the sample catalog.
        """
        source = SAMPLE_ENTRIES if entries is None else entries
        self._entries: dict[str, CatalogEntry] = {
            entry.product_id: entry for entry in source
        }

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryCatalogAdapter":
        """Load catalog entries from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a list of product objects or
                an entry has an invalid price or tax.
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, list):
            raise ValueError(f"Catalog file {path} must contain a JSON list")

        entries = [cls._parse_entry(item) for item in raw]
        logger.info(f"Loaded {len(entries)} catalog entries from {path}")
        return cls(entries)

    @staticmethod
    def _parse_entry(item: dict[str, Any]) -> CatalogEntry:
        """Parse one product object into a CatalogEntry."""
        if not isinstance(item, dict):
            raise ValueError(f"Catalog entry must be an object, got {item!r}")

        price = to_decimal(item.get("price"))
        if price is None:
            raise ValueError(f"Catalog entry {item.get('id')!r} has no valid price")
        tax_percent = to_decimal(item.get("taxPercent", 0))
        if tax_percent is None:
            raise ValueError(f"Catalog entry {item.get('id')!r} has an invalid taxPercent")

        return CatalogEntry(
            product_id=str(item.get("id", "")),
            product_name=str(item.get("productName", "")),
            unit_price=price,
            tax_percent=tax_percent,
            sku=str(item.get("sku", "")),
            category=str(item.get("category", "")),
        )

    async def get_entry(self, product_id: str) -> CatalogEntry | None:
        return self._entries.get(product_id)

    async def search(self, term: str = "", limit: int = 20) -> list[CatalogEntry]:
        needle = term.strip().lower()
        matches = [
            entry
            for entry in self._entries.values()
            if not needle
            or needle in entry.product_name.lower()
            or needle in entry.sku.lower()
        ]
        matches.sort(key=lambda entry: entry.product_name.lower())
        return matches[:limit]
