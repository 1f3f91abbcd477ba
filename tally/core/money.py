"""Numeric coercion and rounding shared by the pricing components.

Every helper here is total: it never raises on bad input. Values that
cannot be used are replaced by a safe default and the replacement is
reported as a Correction so the host can surface it.
"""

import logging
import math
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

from .models import HUNDRED, ZERO, Correction, CorrectionKind

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Largest quantity a single line accepts.
MAX_QUANTITY = 999_999_999


def to_decimal(value: object) -> Decimal | None:
    """Convert a raw value to a finite Decimal.

    Returns None for anything that is not a usable number: None, empty
    or non-numeric strings, booleans, NaN and infinities.

    Floats go through their shortest repr so 0.1 becomes Decimal("0.1")
    rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(repr(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    return None


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _note(field: str, kind: CorrectionKind, original: object, applied: Decimal | int) -> Correction:
    logger.debug(
        f"Coerced {field}: {original!r} -> {applied}",
        extra={"field": field, "kind": kind.value},
    )
    return Correction(field=field, kind=kind, original=original, applied=applied)


def coerce_amount(
    field: str, value: object, default: Decimal = ZERO
) -> tuple[Decimal, list[Correction]]:
    """Coerce a money amount (price, shipping, cost) to a value >= 0."""
    number = to_decimal(value)
    if number is None:
        return default, [_note(field, CorrectionKind.INVALID_NUMERIC, value, default)]
    if number < 0:
        return ZERO, [_note(field, CorrectionKind.NEGATIVE_VALUE, value, ZERO)]
    return number, []


def coerce_percent(field: str, value: object) -> tuple[Decimal, list[Correction]]:
    """Coerce a percentage into [0, 100], clamping rather than rejecting."""
    number = to_decimal(value)
    if number is None:
        return ZERO, [_note(field, CorrectionKind.INVALID_NUMERIC, value, ZERO)]
    if number < 0:
        return ZERO, [_note(field, CorrectionKind.OUT_OF_RANGE_PERCENT, value, ZERO)]
    if number > HUNDRED:
        return HUNDRED, [
            _note(field, CorrectionKind.OUT_OF_RANGE_PERCENT, value, HUNDRED)
        ]
    return number, []


def coerce_quantity(field: str, value: object) -> tuple[int, list[Correction]]:
    """Coerce a quantity to a whole number in [1, MAX_QUANTITY].

    Fractional quantities are truncated toward zero before the minimum
    is applied, so 0.5 ends up as 1 with two corrections recorded.
    Bounds are checked on the Decimal so that values like 1e9999999
    never become Python ints.
    """
    number = to_decimal(value)
    if number is None:
        return 1, [_note(field, CorrectionKind.INVALID_NUMERIC, value, 1)]
    if number > MAX_QUANTITY:
        return MAX_QUANTITY, [
            _note(field, CorrectionKind.QUANTITY_ABOVE_MAXIMUM, value, MAX_QUANTITY)
        ]

    whole = number.to_integral_value(rounding=ROUND_DOWN)
    if whole < 0:
        return 1, [_note(field, CorrectionKind.NEGATIVE_VALUE, value, 1)]

    corrections: list[Correction] = []
    quantity = int(whole)
    if whole != number:
        corrections.append(
            _note(field, CorrectionKind.FRACTIONAL_QUANTITY, value, quantity)
        )

    if quantity < 1:
        corrections.append(
            _note(field, CorrectionKind.QUANTITY_BELOW_MINIMUM, value, 1)
        )
        quantity = 1
    return quantity, corrections


__all__ = [
    "CENT",
    "MAX_QUANTITY",
    "coerce_amount",
    "coerce_percent",
    "coerce_quantity",
    "round_money",
    "to_decimal",
]
