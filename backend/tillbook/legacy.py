# Overview: Wire-compatibility adapter for transaction line items.

"""
Line items are stored once (unit_price_cents, quantity). Two generations of
clients disagree on the field names:

- till clients send and read ``price`` / ``quantity``
- reporting screens read ``salePriceIncTax`` / ``qty``

Incoming payloads may use any of the names; outgoing payloads carry all of
them. Nothing outside this module should know the aliases exist.
"""

from __future__ import annotations

from typing import Any

from .errors import ValidationError
from .validation import coerce_int, coerce_money

PRICE_KEYS = ("unit_price_cents", "salePriceIncTax", "price")
QUANTITY_KEYS = ("quantity", "qty")


def _first_present(raw: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def item_from_wire(raw: Any, index: int) -> dict:
    """Normalize one incoming line item to canonical keys."""
    if not isinstance(raw, dict):
        raise ValidationError(f"items[{index}] must be an object")

    price = _first_present(raw, PRICE_KEYS)
    if price is None:
        raise ValidationError(f"items[{index}] is missing a price")
    quantity = _first_present(raw, QUANTITY_KEYS)
    if quantity is None:
        raise ValidationError(f"items[{index}] is missing a quantity")

    qty = coerce_int(f"items[{index}].quantity", quantity)
    if qty <= 0:
        raise ValidationError(f"items[{index}].quantity must be > 0")

    product_id = raw.get("product_id", raw.get("productId"))
    return {
        "product_id": coerce_int(f"items[{index}].product_id", product_id) if product_id is not None else None,
        "name": str(raw.get("name") or "").strip() or "Unnamed item",
        "unit_price_cents": coerce_money(f"items[{index}].price", price),
        "quantity": qty,
    }


def items_from_wire(raw_items: Any) -> list[dict]:
    if raw_items is None:
        return []
    if not isinstance(raw_items, list):
        raise ValidationError("items must be a list")
    return [item_from_wire(raw, i) for i, raw in enumerate(raw_items)]


def item_to_wire(item: dict) -> dict:
    """Add the legacy aliases to a canonical item dict."""
    wire = dict(item)
    wire["price"] = item["unit_price_cents"]
    wire["salePriceIncTax"] = item["unit_price_cents"]
    wire["qty"] = item["quantity"]
    return wire


def transaction_to_wire(transaction) -> dict:
    data = transaction.to_dict()
    data["items"] = [item_to_wire(item) for item in data["items"]]
    return data
