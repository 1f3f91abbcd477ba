"""Sale entry screen mapper.

Maps the add/edit sale modal (its product table rows plus the orderTax,
discount and shipping inputs) into an Order, and a PricedOrder back into
the sale payload with its `totals` block. The same shape is used for
purchases, so rows may carry `unitCost` or `purchasePrice` instead of
`price`, and `tax` instead of `taxPercent`.
"""

from collections.abc import Mapping
from typing import Any

from tally.core.models import LineItem, Order, PricedOrder

from .fields import describe, pick, text_or_none, to_number
from .quotation import LABELS

PASSTHROUGH_FIELDS = (
    "reference",
    "date",
    "customerId",
    "customerName",
    "supplierId",
    "supplierName",
    "orderType",
    "status",
)


def order_from_sale_form(form: Mapping[str, Any]) -> Order:
    """Build an Order from the sale modal's form state."""
    lines = tuple(
        LineItem(
            unit_price=pick(row, "price", "unitCost", "purchasePrice", default=0),
            quantity=pick(row, "quantity", default=1),
            discount_percent=pick(row, "discount", default=0),
            tax_percent=pick(row, "taxPercent", "tax", default=0),
            product_id=text_or_none(row.get("productId")),
            product_name=row.get("productName"),
            sku=row.get("sku"),
        )
        for row in form.get("items", ())
    )
    return Order(
        lines=lines,
        order_discount_percent=pick(form, "discount", default=0),
        order_tax_percent=pick(form, "orderTax", default=0),
        shipping_fee=pick(form, "shipping", default=0),
    )


def sale_payload(priced: PricedOrder, form: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Render a priced order as the payload the sale modal saves."""
    form = form or {}
    totals = priced.totals

    items = [
        {
            "productId": line.item.product_id or "",
            "productName": line.item.product_name or "",
            "sku": line.item.sku or "",
            "quantity": line.quantity,
            "price": to_number(line.unit_price),
            "discount": to_number(line.discount_percent),
            "tax": to_number(line.tax_percent),
            "taxAmount": to_number(line.tax_amount),
            "total": to_number(line.line_total),
        }
        for line in priced.lines
    ]

    warnings = [
        f"Row {index + 1}: {describe(correction, LABELS)}"
        for index, line in enumerate(priced.lines)
        for correction in line.corrections
    ]
    warnings.extend(describe(correction, LABELS) for correction in totals.corrections)
    warnings.extend(
        f"Row {index + 1} was left out of the totals" for index in totals.excluded_lines
    )

    payload: dict[str, Any] = {
        key: form[key] for key in PASSTHROUGH_FIELDS if key in form
    }
    payload.update(
        {
            "orderTax": to_number(totals.order_tax_percent),
            "discount": to_number(totals.order_discount_percent),
            "shipping": to_number(totals.shipping_fee),
            "items": items,
            "totals": {
                "subTotal": to_number(totals.sub_total),
                "orderTaxAmt": to_number(totals.order_tax_amount),
                "discountAmt": to_number(totals.order_discount_amount),
                "shipping": to_number(totals.shipping_fee),
                "grandTotal": to_number(totals.grand_total),
            },
            "warnings": warnings,
        }
    )
    return payload
