# Overview: Projects online orders into the unified transaction ledger.

"""
Order -> Transaction reconciliation.

Reporting reads one ledger. Online orders are not rung up at a till,
so each one is copied into the ledger as a completed "online" transaction.

IDEMPOTENT: transactions.source_order_id is unique. Reconciling the same
order again returns the transaction created the first time.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..models import Order, Transaction, TransactionItem
from ..models.orders import ORDER_CANCELLED, PAYMENT_FAILED
from ..models.transactions import CHANNEL_ONLINE, TXN_COMPLETED
from ..validation import coerce_int
from tillbook.time_utils import utcnow

ONLINE_TENDER = "online"
ONLINE_LOCATION = "online"
ONLINE_DEVICE = "WEB"
ONLINE_TABLE = "OrderCheckout"
DEFAULT_CUSTOMER_NAME = "Online Customer"


def find_reconciled(order_id: int) -> Transaction | None:
    return db.session.query(Transaction).filter_by(source_order_id=order_id).first()


def _customer_name(order: Order) -> str:
    if order.shipping_name:
        return order.shipping_name
    if order.customer and order.customer.name:
        return order.customer.name
    return DEFAULT_CUSTOMER_NAME


def reconcile_order(order_id: int) -> tuple[Transaction, bool]:
    """
    Copy an order into the ledger.

    Returns (transaction, created). created is False when the order had
    already been reconciled.

    Raises:
        ValidationError: order_id missing
        NotFoundError: unknown order
        InvalidStateError: order cancelled or its payment failed
    """
    if order_id is None or (isinstance(order_id, str) and not order_id.strip()):
        raise ValidationError("order_id is required")
    order_id = coerce_int("order_id", order_id)

    order = db.session.get(Order, order_id)
    if not order:
        raise NotFoundError(f"Order {order_id} not found")

    existing = find_reconciled(order.id)
    if existing:
        return existing, False

    if order.status == ORDER_CANCELLED or order.payment_status == PAYMENT_FAILED:
        raise InvalidStateError(
            f"Order {order.id} cannot be reconciled (status {order.status}, payment {order.payment_status})",
            details={"status": order.status, "payment_status": order.payment_status},
        )

    now = utcnow()
    transaction = Transaction(
        channel=CHANNEL_ONLINE,
        tender_type=ONLINE_TENDER,
        amount_paid_cents=order.total_cents,
        total_cents=order.total_cents,
        change_cents=0,
        discount_cents=0,
        discount_reason=None,
        staff_id=None,
        staff_name=None,
        till_id=None,
        location=ONLINE_LOCATION,
        device=ONLINE_DEVICE,
        table_name=ONLINE_TABLE,
        customer_name=_customer_name(order),
        status=TXN_COMPLETED,
        source_order_id=order.id,
        created_at=now,
        completed_at=now,
    )
    transaction.items = [
        TransactionItem(
            position=i,
            product_id=line.product_id,
            name=line.name,
            unit_price_cents=line.price_cents,
            quantity=line.quantity,
        )
        for i, line in enumerate(order.items)
    ]

    db.session.add(transaction)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost the race to a concurrent reconcile of the same order
        db.session.rollback()
        existing = find_reconciled(order_id)
        if existing is None:
            raise
        return existing, False

    current_app.logger.info("Order %s reconciled into transaction %s", order_id, transaction.id)
    return transaction, True
