import pytest

from tillbook.errors import ValidationError
from tillbook.legacy import item_from_wire, item_to_wire, items_from_wire


def test_item_accepts_legacy_price_and_qty():
    item = item_from_wire({"name": "Lip gloss", "price": 1000, "qty": 2}, 0)
    assert item["unit_price_cents"] == 1000
    assert item["quantity"] == 2


def test_item_accepts_sale_price_inc_tax():
    item = item_from_wire({"name": "Serum", "salePriceIncTax": 7500, "quantity": 1}, 0)
    assert item["unit_price_cents"] == 7500


def test_item_without_name_is_recorded_as_unnamed():
    item = item_from_wire({"price": 1000, "qty": 2}, 0)
    assert item["name"] == "Unnamed item"


@pytest.mark.parametrize("raw", [
    {"name": "x", "qty": 1},
    {"name": "x", "price": -1, "qty": 1},
    {"name": "x", "price": 100, "qty": 0},
    {"name": "x", "price": 100, "qty": -3},
    "not an object",
])
def test_bad_items_are_rejected(raw):
    with pytest.raises(ValidationError):
        item_from_wire(raw, 0)


def test_items_from_wire_requires_list():
    assert items_from_wire(None) == []
    with pytest.raises(ValidationError):
        items_from_wire({"price": 1})


def test_item_to_wire_carries_both_aliases():
    wire = item_to_wire({"name": "Serum", "unit_price_cents": 7500, "quantity": 1, "product_id": None})
    assert wire["price"] == 7500
    assert wire["salePriceIncTax"] == 7500
    assert wire["quantity"] == 1
    assert wire["qty"] == 1
