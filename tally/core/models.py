"""Domain models for the Tally pricing core.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, TypeAlias

# Raw values as they arrive from a form field or a JSON payload.
RawNumber: TypeAlias = Decimal | int | float | str | None

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class CorrectionKind(Enum):
    """Why an input value was replaced before pricing."""

    INVALID_NUMERIC = "invalid_numeric"
    OUT_OF_RANGE_PERCENT = "out_of_range_percent"
    NEGATIVE_VALUE = "negative_value"
    QUANTITY_BELOW_MINIMUM = "quantity_below_minimum"
    FRACTIONAL_QUANTITY = "fractional_quantity"
    QUANTITY_ABOVE_MAXIMUM = "quantity_above_maximum"


@dataclass(frozen=True)
class Correction:
    """A raw input that was coerced or clamped.

    The host compares `original` with `applied` to decide what to show
    the user (e.g. "invalid quantity").
    """

    field: str
    kind: CorrectionKind
    original: Any
    applied: Decimal | int


@dataclass(frozen=True)
class LineItem:
    """One purchasable entry in an order or quotation.

    Only the four pricing inputs take part in the calculation. The
    product fields are display metadata and pass through untouched.
    Values may be raw (strings, floats) until recalculated.
    """

    unit_price: RawNumber = ZERO
    quantity: RawNumber = 1
    discount_percent: RawNumber = ZERO
    tax_percent: RawNumber = ZERO
    product_id: str | None = None
    product_name: str | None = None
    sku: str | None = None


@dataclass(frozen=True)
class PricedLine:
    """A LineItem with its derived amounts.

    `item` always holds the coerced inputs, so feeding a PricedLine back
    into the recalculator produces the same result.
    """

    item: LineItem
    gross_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    line_total: Decimal
    # Not part of equality: a re-priced line has nothing left to correct.
    corrections: tuple[Correction, ...] = field(default=(), compare=False)
    failed: bool = False

    @property
    def unit_price(self) -> Decimal:
        return self.item.unit_price  # type: ignore[return-value]

    @property
    def quantity(self) -> int:
        return self.item.quantity  # type: ignore[return-value]

    @property
    def discount_percent(self) -> Decimal:
        return self.item.discount_percent  # type: ignore[return-value]

    @property
    def tax_percent(self) -> Decimal:
        return self.item.tax_percent  # type: ignore[return-value]

    @property
    def is_finite(self) -> bool:
        """True when every derived amount is a finite number."""
        return all(
            isinstance(value, Decimal) and value.is_finite()
            for value in (
                self.gross_amount,
                self.taxable_amount,
                self.tax_amount,
                self.line_total,
            )
        )

    @property
    def was_corrected(self) -> bool:
        return bool(self.corrections)


@dataclass(frozen=True)
class Order:
    """The lines and order-level adjustments the host is editing."""

    lines: tuple[LineItem | PricedLine, ...] = ()
    order_discount_percent: RawNumber = ZERO
    order_tax_percent: RawNumber = ZERO
    shipping_fee: RawNumber = ZERO

    def __post_init__(self) -> None:
        """Freeze the line sequence."""
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))


@dataclass(frozen=True)
class OrderTotals:
    """Immutable totals snapshot for one order.

    `sub_total` is gross of per-line discount and tax. `line_total_sum`
    is the net figure shown under the line table.
    """

    sub_total: Decimal
    order_discount_percent: Decimal
    order_discount_amount: Decimal
    order_tax_percent: Decimal
    order_tax_amount: Decimal
    shipping_fee: Decimal
    grand_total: Decimal
    line_total_sum: Decimal
    line_count: int
    has_warnings: bool = False
    excluded_lines: tuple[int, ...] = ()
    corrections: tuple[Correction, ...] = ()


@dataclass(frozen=True)
class PricedOrder:
    """An order together with its priced lines and totals."""

    order: Order
    lines: tuple[PricedLine, ...]
    totals: OrderTotals

    @property
    def has_warnings(self) -> bool:
        return self.totals.has_warnings


@dataclass(frozen=True)
class CatalogEntry:
    """A pre-resolved product used to default a new line."""

    product_id: str
    product_name: str
    unit_price: Decimal
    tax_percent: Decimal = ZERO
    sku: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        """Validate catalog entry invariants on creation."""
        if not self.product_id or not self.product_id.strip():
            raise ValueError("product_id must be a non-empty string")
        if self.unit_price < 0:
            raise ValueError(
                f"unit_price must be non-negative, got {self.unit_price}"
            )
        if not ZERO <= self.tax_percent <= HUNDRED:
            raise ValueError(
                f"tax_percent must be between 0 and 100, got {self.tax_percent}"
            )

    def to_line(self, quantity: RawNumber = 1) -> LineItem:
        """Create a new line defaulted from this entry."""
        return LineItem(
            unit_price=self.unit_price,
            quantity=quantity,
            discount_percent=ZERO,
            tax_percent=self.tax_percent,
            product_id=self.product_id,
            product_name=self.product_name,
            sku=self.sku,
        )


class PaymentStatus(Enum):
    """Settlement state of an order."""

    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"


@dataclass(frozen=True)
class Payment:
    """A single payment against an order.

    `amount` is what is applied to the balance. `received_amount` is what
    the customer handed over; any excess is change.
    """

    amount: Decimal
    method: str = "Cash"
    received_amount: Decimal | None = None
    reference: str = ""
    paid_on: date | None = None

    def __post_init__(self) -> None:
        """Validate payment invariants on creation."""
        if self.amount <= 0:
            raise ValueError(f"amount must be positive, got {self.amount}")
        if self.received_amount is not None and self.received_amount < 0:
            raise ValueError(
                f"received_amount must be non-negative, got {self.received_amount}"
            )


@dataclass(frozen=True)
class PaymentSummary:
    """Paid and outstanding amounts for an order."""

    grand_total: Decimal
    paid: Decimal
    due: Decimal
    change_due: Decimal
    status: PaymentStatus
    payments: tuple[Payment, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StockAdjustment:
    """Raw stock adjustment entry as typed into the form."""

    stock_in_hand: RawNumber = ZERO
    adjusted_by: RawNumber = ZERO
    unit_cost: RawNumber = ZERO
    product_name: str = ""
    sku: str = ""


@dataclass(frozen=True)
class StockValuation:
    """Derived stock level and value after an adjustment."""

    stock_in_hand: Decimal
    adjusted_by: Decimal
    unit_cost: Decimal
    stock_after_adjustment: Decimal
    total_cost: Decimal
    corrections: tuple[Correction, ...] = ()
    failed: bool = False
