"""Helpers shared by the screen form mappers."""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from tally.core.models import Correction, CorrectionKind

MISSING = object()

_MESSAGES = {
    CorrectionKind.INVALID_NUMERIC: "must be a number",
    CorrectionKind.OUT_OF_RANGE_PERCENT: "must be between 0 and 100",
    CorrectionKind.NEGATIVE_VALUE: "cannot be negative",
    CorrectionKind.QUANTITY_BELOW_MINIMUM: "must be >= 1",
    CorrectionKind.FRACTIONAL_QUANTITY: "must be a whole number",
    CorrectionKind.QUANTITY_ABOVE_MAXIMUM: "is too large",
}


def pick(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in the payload.

    Screens name the same field differently (price, purchasePrice,
    unitCost); the first one set wins.
    """
    for key in keys:
        value = payload.get(key, MISSING)
        if value is not MISSING and value is not None:
            return value
    return default


def to_number(value: Decimal | int) -> float | int:
    """Convert a core amount into a JSON number for the screens."""
    if isinstance(value, int):
        return value
    return float(value)


def describe(correction: Correction, labels: Mapping[str, str]) -> str:
    """Turn a correction into a message using the screen's field label."""
    label = labels.get(correction.field, correction.field)
    return f"{label} {_MESSAGES[correction.kind]}"


def text_or_none(value: Any) -> str | None:
    """Identifiers arrive as numbers or strings; keep them as strings."""
    return None if value is None else str(value)
