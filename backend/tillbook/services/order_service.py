# Overview: Service-layer operations for online orders.

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..models import Customer, Order, OrderItem, Transaction
from ..models.orders import (
    ORDER_DELIVERED,
    ORDER_SHIPPED,
    ORDER_STATUSES,
    PAYMENT_FAILED,
    PAYMENT_PAID,
    PAYMENT_STATUSES,
)
from ..validation import coerce_int, coerce_money, require_text
from .reconciliation_service import reconcile_order

SHIPPING_FIELDS = ("name", "email", "phone", "address", "city")


def _clean_shipping(details) -> dict:
    if not isinstance(details, dict):
        raise ValidationError("shipping_details is required")
    missing = [f for f in SHIPPING_FIELDS if not str(details.get(f) or "").strip()]
    if missing:
        raise ValidationError(f"Missing shipping details: {', '.join(missing)}")
    return {f"shipping_{f}": str(details[f]).strip() for f in SHIPPING_FIELDS}


def _clean_line(raw, index: int) -> dict:
    if not isinstance(raw, dict):
        raise ValidationError(f"items[{index}] must be an object")

    product_id = raw.get("product_id", raw.get("productId"))
    if product_id is None:
        raise ValidationError(f"items[{index}].product_id is required")

    price = raw.get("price_cents", raw.get("price"))
    if price is None:
        raise ValidationError(f"items[{index}].price_cents is required")

    quantity = coerce_int(f"items[{index}].quantity", raw.get("quantity"))
    if quantity <= 0:
        raise ValidationError(f"items[{index}].quantity must be > 0")

    images = raw.get("images") or []
    if not isinstance(images, list):
        raise ValidationError(f"items[{index}].images must be a list")

    return {
        "product_id": coerce_int(f"items[{index}].product_id", product_id),
        "name": require_text(f"items[{index}].name", raw.get("name")),
        "price_cents": coerce_money(f"items[{index}].price_cents", price),
        "quantity": quantity,
        "category": (raw.get("category") or None),
        "description": (raw.get("description") or None),
        "images_text": "\n".join(str(url).strip() for url in images if str(url).strip()) or None,
    }


def create_order(
    customer_id: int,
    shipping_details: dict,
    items: list,
    shipping_cost_cents: int | None = 0,
    payment_reference: str | None = None,
) -> Order:
    """
    Create an online order at checkout.

    subtotal is the sum of line totals; total = subtotal + shipping cost.
    """
    if customer_id is None:
        raise ValidationError("customer_id is required")
    customer = db.session.get(Customer, coerce_int("customer_id", customer_id))
    if not customer:
        raise NotFoundError(f"Customer {customer_id} not found")

    shipping = _clean_shipping(shipping_details)

    if not isinstance(items, list) or not items:
        raise ValidationError("items must be a non-empty list")
    lines = [_clean_line(raw, i) for i, raw in enumerate(items)]

    shipping_cost = coerce_money("shipping_cost_cents", shipping_cost_cents or 0)
    subtotal = sum(line["price_cents"] * line["quantity"] for line in lines)

    order = Order(
        customer_id=customer.id,
        subtotal_cents=subtotal,
        shipping_cost_cents=shipping_cost,
        total_cents=subtotal + shipping_cost,
        payment_reference=(payment_reference or "").strip() or None,
        **shipping,
    )
    order.items = [OrderItem(position=i, **line) for i, line in enumerate(lines)]

    db.session.add(order)
    db.session.commit()

    current_app.logger.info("Order %s created for customer %s (%s)", order.id, customer.id, order.total_cents)
    return order


def get_order(order_id: int) -> Order:
    order = db.session.get(Order, coerce_int("order_id", order_id))
    if not order:
        raise NotFoundError("Order not found")
    return order


def list_orders(search: str | None = None, page: int = 1, per_page: int = 10) -> dict:
    """Paginated orders, newest first, optionally searched by id or shipping name/email/phone."""
    page = max(page, 1)
    per_page = min(max(per_page, 1), 100)

    query = db.session.query(Order)
    if search:
        term = search.strip()
        if term.isdigit():
            query = query.filter(Order.id == int(term))
        else:
            like = f"%{term}%"
            query = query.filter(db.or_(
                Order.shipping_name.ilike(like),
                Order.shipping_email.ilike(like),
                Order.shipping_phone.ilike(like),
            ))

    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )

    return {
        "items": [o.to_dict() for o in orders],
        "count": total,
        "page": page,
        "per_page": per_page,
        "pages": (total + per_page - 1) // per_page,
    }


def update_order_status(
    order_id: int,
    status: str,
    delivery_person: str | None = None,
) -> tuple[Order, Transaction | None]:
    """
    Move an order through fulfillment.

    Delivered orders are reconciled into the ledger (idempotently).
    Returns (order, ledger transaction or None).
    """
    if not status:
        raise ValidationError("Status is required")
    if status not in ORDER_STATUSES:
        raise ValidationError(f"Invalid status: {status}")

    order = get_order(order_id)

    if order.status == ORDER_DELIVERED and status == ORDER_DELIVERED:
        raise InvalidStateError("Order already marked as Delivered")
    if status == ORDER_DELIVERED and order.payment_status == PAYMENT_FAILED:
        raise InvalidStateError("Cannot deliver an order whose payment failed")

    order.status = status
    if delivery_person and status in (ORDER_SHIPPED, ORDER_DELIVERED):
        order.delivery_person = delivery_person.strip()
    db.session.commit()

    current_app.logger.info("Order %s status -> %s", order.id, status)

    transaction = None
    if status == ORDER_DELIVERED:
        transaction, _ = reconcile_order(order.id)
    return order, transaction


def update_payment_status(
    order_id: int,
    payment_status: str,
    payment_reference: str | None = None,
) -> Order:
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid payment status: {payment_status}")

    order = get_order(order_id)
    order.payment_status = payment_status
    order.paid = payment_status == PAYMENT_PAID
    if payment_reference:
        order.payment_reference = payment_reference.strip()
    db.session.commit()

    current_app.logger.info("Order %s payment -> %s", order.id, payment_status)
    return order
