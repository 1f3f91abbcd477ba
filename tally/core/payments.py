"""Payment balance for a priced order.

Tracks how much of the grand total has been paid, what is still due,
and how much change is owed when the customer hands over more than
the paying amount.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from .models import ZERO, Payment, PaymentStatus, PaymentSummary, RawNumber
from .money import round_money, to_decimal

logger = logging.getLogger(__name__)


class PaymentRejectedError(ValueError):
    """A paying amount that cannot be applied to the order."""


def validate_payment(amount: RawNumber, remaining: Decimal) -> Decimal:
    """Check a paying amount against the remaining balance.

    Args:
        amount: Raw paying amount as entered.
        remaining: Balance still due on the order.

    Returns:
        The amount rounded to cents.

    Raises:
        PaymentRejectedError: If the amount is not a number, is too large to
            hold in cents, is zero or negative, or exceeds the remaining
            balance.
    """
    value = to_decimal(amount)
    if value is None:
        raise PaymentRejectedError(f"Paying amount must be a number, got {amount!r}")
    try:
        value = round_money(value)
    except ArithmeticError as e:
        raise PaymentRejectedError(f"Paying amount {amount!r} is too large") from e
    if value <= 0:
        raise PaymentRejectedError(f"Paying amount must be positive, got {value}")
    if value > remaining:
        raise PaymentRejectedError(
            f"Paying amount {value} exceeds remaining balance {remaining}"
        )
    return value


def summarize_payments(
    grand_total: Decimal, payments: Iterable[Payment] = ()
) -> PaymentSummary:
    """Total the payments made against an order.

    Status is PAID once nothing is due (an order totalling zero counts as
    paid), UNPAID while no money has been applied, PARTIAL otherwise.
    """
    recorded = tuple(payments)
    total = round_money(grand_total)

    paid = ZERO
    change_due = ZERO
    for payment in recorded:
        paid += payment.amount
        if payment.received_amount is not None and payment.received_amount > payment.amount:
            change_due += payment.received_amount - payment.amount

    paid = round_money(paid)
    due = round_money(max(total - paid, ZERO))

    if due == 0:
        status = PaymentStatus.PAID
    elif paid == 0:
        status = PaymentStatus.UNPAID
    else:
        status = PaymentStatus.PARTIAL

    if paid > total:
        logger.warning(
            f"Payments {paid} exceed grand total {total}",
            extra={"payment_count": len(recorded)},
        )

    return PaymentSummary(
        grand_total=total,
        paid=paid,
        due=due,
        change_due=round_money(change_due),
        status=status,
        payments=recorded,
    )


__all__ = ["PaymentRejectedError", "summarize_payments", "validate_payment"]
