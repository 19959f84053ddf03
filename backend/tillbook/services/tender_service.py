# Overview: Service-layer operations for tenders; encapsulates business logic and database work.

"""
Tender registry and per-device tender button layout.

The registry is read-mostly: admins create tenders once during setup and
till devices read them in till_order to lay out their payment buttons.
Device assignments are stored rows, so a restart never loses a layout.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import DeviceTenderAssignment, Tender
from ..models.tenders import DEFAULT_BUTTON_COLOR, TENDER_CLASSIFICATIONS
from ..validation import coerce_int, optional_text, require_text


DEFAULT_TENDERS = [
    {
        "name": "ACCESS ONLINE TRANSFER",
        "description": "Online bank transfer via ACCESS Bank",
        "button_color": "#FF69B4",
        "till_order": 1,
        "classification": "Other",
    },
    {
        "name": "ACCESS POS",
        "description": "Debit, Credit, and POS cards",
        "button_color": "#22C55E",
        "till_order": 2,
        "classification": "Card",
    },
    {
        "name": "CASH",
        "description": "Cash payment",
        "button_color": "#E5E7EB",
        "till_order": 3,
        "classification": "Cash",
    },
    {
        "name": "HYDROGEN POS",
        "description": "Hydrogen POS payment",
        "button_color": "#A3E635",
        "till_order": 4,
        "classification": "Other",
    },
    {
        "name": "ZENITH POS",
        "description": "Zenith Bank POS and cards",
        "button_color": "#EF4444",
        "till_order": 5,
        "classification": "Card",
    },
]


def _length(model, column: str) -> int:
    return model.__table__.c[column].type.length


def _clean_fields(
    description: str | None,
    button_color: str | None,
    till_order,
    classification: str | None,
) -> dict:
    order = 1 if till_order is None else coerce_int("till_order", till_order)
    if order < 1:
        raise ValidationError("till_order must be >= 1")

    classification = optional_text("classification", classification) or "Other"
    if classification not in TENDER_CLASSIFICATIONS:
        raise ValidationError(
            f"Invalid classification: {classification}. Must be one of {list(TENDER_CLASSIFICATIONS)}"
        )

    description = optional_text("description", description, max_length=_length(Tender, "description"))
    button_color = optional_text("button_color", button_color, max_length=_length(Tender, "button_color"))

    return {
        "description": description or "",
        "button_color": button_color or DEFAULT_BUTTON_COLOR,
        "till_order": order,
        "classification": classification,
    }


# =============================================================================
# REGISTRY
# =============================================================================

def create_tender(
    name: str,
    description: str | None = None,
    button_color: str | None = None,
    till_order: int | None = None,
    classification: str | None = None,
) -> Tender:
    """
    Register a new payment method.

    Raises:
        ValidationError: blank or over-long name, till_order < 1, unknown classification
        ConflictError: a tender with this name already exists
    """
    name = require_text("name", name, max_length=_length(Tender, "name"))
    fields = _clean_fields(description, button_color, till_order, classification)

    if db.session.query(Tender).filter_by(name=name).first():
        raise ConflictError(f"A tender named '{name}' already exists")

    tender = Tender(name=name, **fields)
    db.session.add(tender)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"A tender named '{name}' already exists")

    current_app.logger.info("Tender %s created (%s)", tender.name, tender.classification)
    return tender


def list_tenders() -> list[Tender]:
    """All tenders in till button order."""
    return db.session.query(Tender).order_by(
        Tender.till_order.asc(), Tender.name.asc(), Tender.id.asc()
    ).all()


def get_tender(tender_id: int) -> Tender:
    tender = db.session.get(Tender, coerce_int("tender_id", tender_id))
    if not tender:
        raise NotFoundError("Tender not found")
    return tender


def update_tender(
    tender_id: int,
    name: str,
    description: str | None = None,
    button_color: str | None = None,
    till_order: int | None = None,
    classification: str | None = None,
) -> Tender:
    """Full replace of a tender's fields (name required, uniqueness re-checked)."""
    tender = get_tender(tender_id)
    name = require_text("name", name, max_length=_length(Tender, "name"))
    fields = _clean_fields(description, button_color, till_order, classification)

    clash = db.session.query(Tender).filter(Tender.name == name, Tender.id != tender.id).first()
    if clash:
        raise ConflictError(f"A tender named '{name}' already exists")

    tender.name = name
    for key, value in fields.items():
        setattr(tender, key, value)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"A tender named '{name}' already exists")
    return tender


def delete_tender(tender_id: int) -> None:
    tender = get_tender(tender_id)
    db.session.delete(tender)
    db.session.commit()
    current_app.logger.info("Tender %s deleted", tender_id)


def seed_default_tenders() -> tuple[list[Tender], bool]:
    """
    Create the default tenders when the registry is empty.

    Returns (tenders in till order, created flag).
    """
    if db.session.query(Tender).count() > 0:
        return list_tenders(), False

    for fields in DEFAULT_TENDERS:
        db.session.add(Tender(**fields))
    try:
        db.session.commit()
    except IntegrityError:
        # Another worker seeded first
        db.session.rollback()
        return list_tenders(), False

    current_app.logger.info("Seeded %d default tenders", len(DEFAULT_TENDERS))
    return list_tenders(), True


def is_cash_tender(tender_type: str | None) -> bool:
    """
    True when change should be given for this tender.

    Registered tenders decide by classification; unregistered names fall back
    to CASH_TENDER_NAMES from config.
    """
    if not tender_type:
        return False
    tender = db.session.query(Tender).filter_by(name=tender_type).first()
    if tender:
        return tender.is_cash
    fallback = current_app.config.get("CASH_TENDER_NAMES", ("CASH",))
    return tender_type.strip().upper() in fallback


# =============================================================================
# DEVICE ASSIGNMENTS
# =============================================================================

def _clean_ranks(ranks) -> list[int]:
    if not isinstance(ranks, (list, tuple)):
        raise ValidationError("tender_ranks must be a list")
    cleaned = []
    for i, raw in enumerate(ranks):
        rank = coerce_int(f"tender_ranks[{i}]", raw)
        if rank < 1:
            raise ValidationError(f"tender_ranks[{i}] must be >= 1")
        if rank in cleaned:
            raise ValidationError(f"tender_ranks contains duplicate rank {rank}")
        cleaned.append(rank)
    return cleaned


def _clean_device_id(device_id) -> str:
    return require_text("device_id", device_id, max_length=_length(DeviceTenderAssignment, "device_id"))


def _write_device_rows(device_id: str, ranks: list[int]) -> None:
    db.session.query(DeviceTenderAssignment).filter_by(device_id=device_id).delete(
        synchronize_session=False
    )
    for position, rank in enumerate(ranks):
        db.session.add(DeviceTenderAssignment(device_id=device_id, position=position, tender_rank=rank))


def get_device_assignments(device_id: str) -> list[int]:
    """Tender ranks shown on a device, in button order. Empty when unassigned."""
    device_id = _clean_device_id(device_id)
    rows = db.session.query(DeviceTenderAssignment).filter_by(device_id=device_id).order_by(
        DeviceTenderAssignment.position
    ).all()
    return [row.tender_rank for row in rows]


def set_device_assignments(device_id: str, ranks) -> list[int]:
    """Replace one device's tender layout."""
    device_id = _clean_device_id(device_id)
    cleaned = _clean_ranks(ranks)

    _write_device_rows(device_id, cleaned)
    db.session.commit()

    current_app.logger.info("Tender layout for device %s set to %s", device_id, cleaned)
    return get_device_assignments(device_id)


def get_all_device_assignments() -> dict[str, list[int]]:
    rows = db.session.query(DeviceTenderAssignment).order_by(
        DeviceTenderAssignment.device_id, DeviceTenderAssignment.position
    ).all()
    mapping: dict[str, list[int]] = {}
    for row in rows:
        mapping.setdefault(row.device_id, []).append(row.tender_rank)
    return mapping


def replace_all_device_assignments(mapping) -> dict[str, list[int]]:
    """
    Replace the whole device -> ranks map in one commit.

    Devices missing from the mapping lose their layout.
    """
    if not isinstance(mapping, dict):
        raise ValidationError("device_tenders must be an object of device_id -> tender ranks")

    cleaned = {
        _clean_device_id(device_id): _clean_ranks(ranks)
        for device_id, ranks in mapping.items()
    }

    db.session.query(DeviceTenderAssignment).delete(synchronize_session=False)
    for device_id, ranks in cleaned.items():
        _write_device_rows(device_id, ranks)
    db.session.commit()

    return get_all_device_assignments()
