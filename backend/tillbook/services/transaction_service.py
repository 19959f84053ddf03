# Overview: Service-layer operations for the transaction ledger; encapsulates business logic and database work.

"""
Transaction Ledger

Records point-of-sale sales against an OPEN till and moves them through
their status lifecycle:

    held -> completed -> refunded

Transitions only go forward. Status changes are conditional UPDATEs, so two
cashiers refunding the same sale cannot both succeed.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..extensions import db
from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..models import Staff, Till, Transaction, TransactionItem
from ..models.tills import TILL_OPEN
from ..models.transactions import (
    CHANNEL_POS,
    CHANNELS,
    TXN_COMPLETED,
    TXN_HELD,
    TXN_REFUNDED,
    TXN_STATUSES,
)
from ..validation import coerce_int, coerce_money, optional_text, require_text
from ..legacy import items_from_wire
from tillbook.time_utils import utcnow
from .concurrency import compare_and_set
from .tender_service import is_cash_tender


@dataclass(frozen=True)
class TillContext:
    """Which till a sale is rung up on, and who is ringing it up."""
    till_id: int
    staff_id: int


# =============================================================================
# RECORDING SALES
# =============================================================================

def record_sale(
    till_context: TillContext,
    items,
    tender_type: str,
    amount_paid_cents: int | None,
    total_cents: int,
    discount_cents: int | None = 0,
    discount_reason: str | None = None,
    customer_name: str | None = None,
    table_name: str | None = None,
    held: bool = False,
) -> Transaction:
    """
    Record a POS sale on an open till.

    Items may use either the canonical (unit_price_cents/quantity) or the
    legacy (price/salePriceIncTax, quantity/qty) field names.

    Change is amount_paid - total for cash-like tenders, 0 otherwise.
    When amount_paid is omitted it defaults to the total.

    Raises:
        ValidationError: empty items, total <= 0, bad line, under-tendered completed sale
        NotFoundError: unknown till
        InvalidStateError: till is not OPEN
    """
    lines = items_from_wire(items)
    if not lines:
        raise ValidationError("items must not be empty")

    if total_cents is None:
        raise ValidationError("total_cents is required")
    total = coerce_int("total_cents", total_cents)
    if total <= 0:
        raise ValidationError("total_cents must be > 0")

    tender_type = require_text("tender_type", tender_type, max_length=64)
    discount = coerce_money("discount_cents", discount_cents or 0)

    if amount_paid_cents is None:
        amount_paid = 0 if held else total
    else:
        amount_paid = coerce_money("amount_paid_cents", amount_paid_cents)

    if not held and amount_paid < total:
        raise ValidationError(
            "amount_paid_cents is less than total_cents",
            details={"amount_paid_cents": amount_paid, "total_cents": total},
        )

    till = db.session.get(Till, coerce_int("till_id", till_context.till_id))
    if not till:
        raise NotFoundError(f"Till {till_context.till_id} not found")
    if till.status != TILL_OPEN:
        raise InvalidStateError(
            f"Till {till.id} is {till.status}; sales can only be recorded on an OPEN till",
            details={"status": till.status},
        )

    staff = db.session.get(Staff, coerce_int("staff_id", till_context.staff_id))
    if not staff:
        raise ValidationError(f"Staff {till_context.staff_id} not found")

    change = 0
    if not held and is_cash_tender(tender_type):
        change = amount_paid - total

    now = utcnow()
    transaction = Transaction(
        channel=CHANNEL_POS,
        tender_type=tender_type,
        amount_paid_cents=amount_paid,
        total_cents=total,
        change_cents=change,
        discount_cents=discount,
        discount_reason=optional_text("discount_reason", discount_reason, max_length=255) or None,
        staff_id=staff.id,
        staff_name=staff.name,
        till_id=till.id,
        location=till.location_name or "",
        device=till.device,
        table_name=optional_text("table_name", table_name, max_length=64) or None,
        customer_name=optional_text("customer_name", customer_name, max_length=128) or None,
        status=TXN_HELD if held else TXN_COMPLETED,
        created_at=now,
        completed_at=None if held else now,
    )
    transaction.items = [
        TransactionItem(position=i, **line) for i, line in enumerate(lines)
    ]

    db.session.add(transaction)
    db.session.commit()

    current_app.logger.info(
        "Transaction %s recorded on till %s (%s, %s %s)",
        transaction.id, till.id, transaction.status, tender_type, total,
    )
    return transaction


def hold_sale(till_context: TillContext, items, tender_type: str, amount_paid_cents, total_cents, **kwargs) -> Transaction:
    """Park a sale for later; same as record_sale with status held."""
    kwargs["held"] = True
    return record_sale(till_context, items, tender_type, amount_paid_cents, total_cents, **kwargs)


# =============================================================================
# STATUS CHANGES
# =============================================================================

def _raise_transition_failure(transaction_id: int, target: str):
    db.session.rollback()
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise NotFoundError(f"Transaction {transaction_id} not found")
    raise InvalidStateError(
        f"Cannot move transaction {transaction_id} from {transaction.status} to {target}",
        details={"status": transaction.status, "target": target},
    )


def refund(transaction_id: int, reason: str, staff_id: int) -> Transaction:
    """
    Refund a completed sale.

    Raises:
        ValidationError: blank reason or missing acting staff
        NotFoundError: unknown transaction
        InvalidStateError: transaction is not completed
    """
    transaction_id = coerce_int("transaction_id", transaction_id)
    if reason is None or not str(reason).strip():
        raise ValidationError("A refund reason is required")
    if staff_id is None:
        raise ValidationError("staff_id is required")

    values = {
        "status": TXN_REFUNDED,
        "refund_reason": str(reason).strip(),
        "refunded_by_staff_id": coerce_int("staff_id", staff_id),
        "refunded_at": utcnow(),
    }
    if not compare_and_set(Transaction, transaction_id, (TXN_COMPLETED,), values):
        _raise_transition_failure(transaction_id, TXN_REFUNDED)

    db.session.commit()
    current_app.logger.info("Transaction %s refunded by staff %s", transaction_id, staff_id)
    return db.session.get(Transaction, transaction_id)


def _complete_held(transaction_id: int, amount_paid_cents, tender_type) -> Transaction:
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise NotFoundError(f"Transaction {transaction_id} not found")
    if transaction.status != TXN_HELD:
        _raise_transition_failure(transaction_id, TXN_COMPLETED)

    if transaction.till_id is not None:
        till = db.session.get(Till, transaction.till_id)
        if not till or till.status != TILL_OPEN:
            raise InvalidStateError(
                f"Till {transaction.till_id} is not OPEN; held sales can only be completed on an OPEN till",
                details={"status": till.status if till else None},
            )

    tender = transaction.tender_type if tender_type is None else require_text("tender_type", tender_type, max_length=64)
    total = transaction.total_cents
    if amount_paid_cents is None:
        amount_paid = total
    else:
        amount_paid = coerce_money("amount_paid_cents", amount_paid_cents)
    if amount_paid < total:
        raise ValidationError(
            "amount_paid_cents is less than total_cents",
            details={"amount_paid_cents": amount_paid, "total_cents": total},
        )

    values = {
        "status": TXN_COMPLETED,
        "completed_at": utcnow(),
        "tender_type": tender,
        "amount_paid_cents": amount_paid,
        "change_cents": amount_paid - total if is_cash_tender(tender) else 0,
    }
    criteria = ()
    if transaction.till_id is not None:
        open_tills = db.select(Till.id).where(Till.status == TILL_OPEN)
        criteria = (Transaction.till_id.in_(open_tills),)

    if not compare_and_set(Transaction, transaction_id, (TXN_HELD,), values, *criteria):
        db.session.rollback()
        db.session.refresh(transaction)
        if transaction.status == TXN_HELD:
            raise InvalidStateError(f"Till {transaction.till_id} closed before the sale was completed")
        _raise_transition_failure(transaction_id, TXN_COMPLETED)

    db.session.commit()
    db.session.refresh(transaction)
    current_app.logger.info("Held transaction %s completed (%s %s)", transaction_id, tender, amount_paid)
    return transaction


def update_status(
    transaction_id: int,
    new_status: str,
    staff_id: int | None = None,
    reason: str | None = None,
    amount_paid_cents: int | None = None,
    tender_type: str | None = None,
) -> Transaction:
    """
    Set a transaction's status.

    Only forward moves are allowed: held -> completed, completed -> refunded
    (refunds go through refund(), so they need a reason).

    Completing a held sale takes the payment the same way record_sale does:
    amount_paid defaults to the total, must cover it, and change is given
    for cash-like tenders. tender_type replaces the one chosen at hold time.
    The sale's till must still be OPEN.

    Raises:
        ValidationError: status not one of held/completed/refunded, under-tendered completion
        NotFoundError: unknown transaction
        InvalidStateError: any other transition, or completing on a till that is not OPEN
    """
    if new_status not in TXN_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(TXN_STATUSES)}")

    if new_status == TXN_REFUNDED:
        return refund(transaction_id, reason, staff_id)

    transaction_id = coerce_int("transaction_id", transaction_id)

    if new_status == TXN_COMPLETED:
        return _complete_held(transaction_id, amount_paid_cents, tender_type)

    # Nothing moves back to held
    _raise_transition_failure(transaction_id, new_status)


# =============================================================================
# QUERIES
# =============================================================================

def get_transaction(transaction_id: int) -> Transaction:
    transaction = db.session.get(Transaction, coerce_int("transaction_id", transaction_id))
    if not transaction:
        raise NotFoundError("Transaction not found")
    return transaction


def _filtered_query(
    status: str | None = None,
    channel: str | None = None,
    till_id: int | None = None,
    location: str | None = None,
):
    query = db.session.query(Transaction)

    if status is not None:
        if status not in TXN_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(TXN_STATUSES)}")
        query = query.filter(Transaction.status == status)
    if channel is not None:
        if channel not in CHANNELS:
            raise ValidationError(f"Invalid channel. Must be one of: {', '.join(CHANNELS)}")
        query = query.filter(Transaction.channel == channel)
    if till_id is not None:
        query = query.filter(Transaction.till_id == till_id)
    if location is not None:
        query = query.filter(Transaction.location == location)
    return query


def list_transactions(
    status: str | None = None,
    channel: str | None = None,
    till_id: int | None = None,
    location: str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[Transaction]:
    return (
        _filtered_query(status, channel, till_id, location)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .offset(max(offset, 0))
        .limit(min(max(limit, 1), 500))
        .all()
    )


def completed_transactions(
    channel: str | None = None,
    till_id: int | None = None,
    location: str | None = None,
) -> list[Transaction]:
    """Every completed transaction matching the filters, unpaginated, for reporting."""
    return (
        _filtered_query(TXN_COMPLETED, channel, till_id, location)
        .order_by(Transaction.id)
        .all()
    )


def sales_summary(transactions: list[Transaction], top: int = 10) -> dict:
    """
    KPIs over a set of transactions: totals, average, top products, and
    totals by staff and by location. Refunded and held sales are excluded.
    """
    completed = [t for t in transactions if t.status == TXN_COMPLETED]

    total_sales = sum(t.total_cents for t in completed)
    count = len(completed)

    products: dict[str, dict] = {}
    by_staff: dict[str, int] = {}
    by_location: dict[str, int] = {}

    for t in completed:
        for item in t.items:
            entry = products.setdefault(item.name, {"name": item.name, "qty": 0, "total_cents": 0})
            entry["qty"] += item.quantity
            entry["total_cents"] += item.line_total_cents

        staff = t.staff_name or ("Online" if t.channel != CHANNEL_POS else "Unknown")
        by_staff[staff] = by_staff.get(staff, 0) + t.total_cents

        loc = t.location or "Unknown"
        by_location[loc] = by_location.get(loc, 0) + t.total_cents

    top_products = sorted(products.values(), key=lambda p: (-p["qty"], p["name"]))[:top]

    return {
        "total_sales_cents": total_sales,
        "total_transactions": count,
        "average_transaction_cents": total_sales // count if count else 0,
        "top_products": top_products,
        "by_staff": [{"staff": k, "total_cents": v} for k, v in sorted(by_staff.items())],
        "by_location": [{"location": k, "total_cents": v} for k, v in sorted(by_location.items())],
    }
