"""Quotation screen mapper.

Maps the quotation form (items plus string-typed orderTax, discount and
shipping fields) into an Order, and a PricedOrder back into the stored
quotation shape with its `summary` block.
"""

from collections.abc import Mapping
from typing import Any

from tally.core.models import LineItem, Order, PricedOrder

from .fields import describe, pick, text_or_none, to_number

LABELS = {
    "unit_price": "Price",
    "quantity": "Quantity",
    "discount_percent": "Discount",
    "tax_percent": "Tax",
    "order_discount_percent": "Discount",
    "order_tax_percent": "Order tax",
    "shipping_fee": "Shipping",
}

PASSTHROUGH_FIELDS = (
    "reference",
    "date",
    "customerId",
    "customerName",
    "status",
    "description",
)


def order_from_quotation(payload: Mapping[str, Any]) -> Order:
    """Build an Order from a quotation form payload.

    Order-level fields are read from the top level first, then from a
    stored quotation's `summary` block.
    """
    summary = payload.get("summary") or {}
    lines = tuple(
        LineItem(
            unit_price=pick(item, "purchasePrice", "price", default=0),
            quantity=pick(item, "quantity", default=1),
            discount_percent=pick(item, "discount", default=0),
            tax_percent=pick(item, "taxPercent", default=0),
            product_id=text_or_none(item.get("productId")),
            product_name=item.get("productName"),
            sku=item.get("sku"),
        )
        for item in payload.get("items", ())
    )
    return Order(
        lines=lines,
        order_discount_percent=pick(payload, "discount", default=pick(summary, "discount", default=0)),
        order_tax_percent=pick(payload, "orderTax", default=pick(summary, "orderTax", default=0)),
        shipping_fee=pick(payload, "shipping", default=pick(summary, "shipping", default=0)),
    )


def quotation_payload(
    priced: PricedOrder, form: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Render a priced order as a stored quotation."""
    form = form or {}
    totals = priced.totals

    items = []
    errors: dict[str, list[str]] = {}
    for index, line in enumerate(priced.lines):
        items.append(
            {
                "productId": line.item.product_id or "",
                "productName": line.item.product_name or "",
                "sku": line.item.sku or "",
                "quantity": line.quantity,
                "purchasePrice": to_number(line.unit_price),
                "discount": to_number(line.discount_percent),
                "taxPercent": to_number(line.tax_percent),
                "taxAmount": to_number(line.tax_amount),
                "totalCost": to_number(line.line_total),
            }
        )
        if line.corrections:
            errors[f"items.{index}"] = [describe(c, LABELS) for c in line.corrections]
    if totals.corrections:
        errors["summary"] = [describe(c, LABELS) for c in totals.corrections]

    payload: dict[str, Any] = {
        key: form[key] for key in PASSTHROUGH_FIELDS if key in form
    }
    payload.update(
        {
            "total": to_number(totals.grand_total),
            "items": items,
            "summary": {
                "orderTax": to_number(totals.order_tax_percent),
                "discount": to_number(totals.order_discount_percent),
                "shipping": to_number(totals.shipping_fee),
                "grandTotal": to_number(totals.grand_total),
            },
            "hasWarnings": totals.has_warnings,
            "errors": errors,
        }
    )
    return payload
