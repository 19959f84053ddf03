# Overview: Service-layer operations for tills; encapsulates business logic and database work.

"""
Till (cash-drawer session) lifecycle.

DESIGN PRINCIPLES:
- A till is opened with a counted opening balance by a staff member at a location
- OPEN <-> SUSPENDED while trading, then CLOSED exactly once
- Closed tills are immutable
- Every transition is one conditional UPDATE (see concurrency.compare_and_set)
- One live till per (location, staff) when TILL_SINGLE_OPEN_POLICY is "enforce"
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, InvalidStateError, NotFoundError, ValidationError
from ..models import Location, Staff, Till, Transaction
from ..models.tills import TILL_CLOSED, TILL_OPEN, TILL_STATUSES, TILL_SUSPENDED
from ..models.transactions import TXN_COMPLETED
from ..validation import coerce_int, coerce_money, optional_text
from tillbook.time_utils import utcnow
from .concurrency import compare_and_set
from .tender_service import is_cash_tender


def _single_open_enforced() -> bool:
    return current_app.config.get("TILL_SINGLE_OPEN_POLICY", "enforce") != "allow"


def _open_slot(location_id: int, staff_id: int) -> str:
    return f"{location_id}:{staff_id}"


def _require_ref(key: str, value) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    return coerce_int(key, value)


# =============================================================================
# LIFECYCLE
# =============================================================================

def open_till(
    location_id: int,
    staff_id: int,
    opening_balance_cents: int,
    device: str | None = None,
    notes: str | None = None,
) -> Till:
    """
    Open a till for a staff member at a location.

    Args:
        location_id: Location the drawer belongs to
        staff_id: Staff member responsible for the drawer
        opening_balance_cents: Counted float at open (>= 0, minor units)
        device: Terminal label (defaults to "POS Terminal")
        notes: Free text

    Raises:
        ValidationError: missing/unknown staff or location, negative balance, non-text device or notes
        ConflictError: staff already has a live till at this location (enforced policy only)
    """
    location_id = _require_ref("location_id", location_id)
    staff_id = _require_ref("staff_id", staff_id)
    if opening_balance_cents is None:
        raise ValidationError("opening_balance_cents is required")
    opening = coerce_money("opening_balance_cents", opening_balance_cents)
    device = optional_text("device", device, max_length=Till.__table__.c.device.type.length)
    notes = optional_text("notes", notes)

    location = db.session.get(Location, location_id)
    if not location:
        raise ValidationError(f"Location {location_id} not found")

    staff = db.session.get(Staff, staff_id)
    if not staff or not staff.is_active:
        raise ValidationError(f"Staff {staff_id} not found")

    till = Till(
        store_id=location.store_id,
        location_id=location.id,
        staff_id=staff.id,
        staff_name=staff.name,
        status=TILL_OPEN,
        opening_balance_cents=opening,
        opened_at=utcnow(),
        closed_at=None,
        device=device or "POS Terminal",
        notes=notes or "",
        open_slot=_open_slot(location.id, staff.id) if _single_open_enforced() else None,
    )

    db.session.add(till)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(
            f"{staff.name} already has an open till at {location.name}",
            details={"location_id": location_id, "staff_id": staff_id},
        )

    current_app.logger.info(
        "Till %s opened by staff %s at location %s with %s",
        till.id, staff.id, location.id, opening,
    )
    return till


def _transition(till_id: int, expected: tuple[str, ...], values: dict, action: str) -> Till:
    till_id = coerce_int("till_id", till_id)

    if not compare_and_set(Till, till_id, expected, values):
        db.session.rollback()
        till = db.session.get(Till, till_id)
        if not till:
            raise NotFoundError(f"Till {till_id} not found")
        raise InvalidStateError(
            f"Cannot {action} till {till_id} while it is {till.status}",
            details={"status": till.status, "expected": list(expected)},
        )

    db.session.commit()
    till = db.session.get(Till, till_id)
    current_app.logger.info("Till %s -> %s", till_id, till.status)
    return till


def suspend_till(till_id: int) -> Till:
    """OPEN -> SUSPENDED."""
    return _transition(till_id, (TILL_OPEN,), {"status": TILL_SUSPENDED}, "suspend")


def resume_till(till_id: int) -> Till:
    """SUSPENDED -> OPEN."""
    return _transition(till_id, (TILL_SUSPENDED,), {"status": TILL_OPEN}, "resume")


def close_till(till_id: int, closing_balance_cents: int, notes: str | None = None) -> Till:
    """
    Close a till with its counted closing balance.

    OPEN or SUSPENDED -> CLOSED. Frees the open slot so the staff member can
    open a new till at the same location.

    Raises:
        ValidationError: closing balance missing or negative, non-text notes
        NotFoundError: unknown till
        InvalidStateError: till already CLOSED
    """
    if closing_balance_cents is None:
        raise ValidationError("closing_balance_cents is required")
    closing = coerce_money("closing_balance_cents", closing_balance_cents)
    notes = optional_text("notes", notes)

    values = {
        "status": TILL_CLOSED,
        "closing_balance_cents": closing,
        "closed_at": utcnow(),
        "open_slot": None,
    }
    if notes is not None:
        values["notes"] = notes

    return _transition(till_id, (TILL_OPEN, TILL_SUSPENDED), values, "close")


# =============================================================================
# QUERIES
# =============================================================================

def get_till(till_id: int) -> Till:
    till = db.session.get(Till, coerce_int("till_id", till_id))
    if not till:
        raise NotFoundError(f"Till {till_id} not found")
    return till


def list_tills(
    store_id: int | None = None,
    location_id: int | None = None,
    staff_id: int | None = None,
    status: str | None = None,
    limit: int = 100,
) -> list[Till]:
    query = db.session.query(Till)

    if store_id is not None:
        query = query.filter(Till.store_id == store_id)
    if location_id is not None:
        query = query.filter(Till.location_id == location_id)
    if staff_id is not None:
        query = query.filter(Till.staff_id == staff_id)
    if status is not None:
        status = status.upper()
        if status not in TILL_STATUSES:
            raise ValidationError(f"Invalid till status: {status}")
        query = query.filter(Till.status == status)

    return query.order_by(Till.opened_at.desc(), Till.id.desc()).limit(limit).all()


def get_open_tills_for_staff(staff_id: int) -> list[Till]:
    """Live (OPEN or SUSPENDED) tills for a staff member; normally 0 or 1."""
    return db.session.query(Till).filter(
        Till.staff_id == staff_id,
        Till.status.in_((TILL_OPEN, TILL_SUSPENDED)),
    ).order_by(Till.opened_at).all()


def get_till_summary(till_id: int) -> dict:
    """
    End-of-day style summary for one till.

    Returns:
        - till details
        - completed sale count and total
        - totals per tender
        - expected cash in drawer (opening + cash takings)
        - variance (closing - expected), once closed
    """
    till = get_till(till_id)

    sales = db.session.query(Transaction).filter(
        Transaction.till_id == till.id,
        Transaction.status == TXN_COMPLETED,
    ).all()

    by_tender: dict[str, int] = {}
    cash_takings = 0
    for sale in sales:
        by_tender[sale.tender_type] = by_tender.get(sale.tender_type, 0) + sale.total_cents
        if is_cash_tender(sale.tender_type):
            cash_takings += sale.total_cents

    expected_cash = till.opening_balance_cents + cash_takings
    variance = None
    if till.status == TILL_CLOSED and till.closing_balance_cents is not None:
        variance = till.closing_balance_cents - expected_cash

    return {
        "till": till.to_dict(),
        "sales_count": len(sales),
        "sales_total_cents": sum(s.total_cents for s in sales),
        "tender_totals": by_tender,
        "expected_cash_cents": expected_cash,
        "variance_cents": variance,
        "is_closed": till.status == TILL_CLOSED,
    }
