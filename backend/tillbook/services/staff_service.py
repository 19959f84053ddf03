# Overview: Staff record store.

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Location, Staff
from ..models.staff import STAFF_ROLES
from ..validation import ModelValidationPolicy, apply_patch, validate_payload
from .auth_service import PasswordValidationError, hash_password

STAFF_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "username", "role", "location_id",
        "account_name", "account_number", "bank_name", "salary_cents", "is_active",
    },
    required_on_create={"name"},
    money_fields={"salary_cents"},
)


def _apply_rules(patch: dict) -> None:
    if "role" in patch and patch["role"] not in STAFF_ROLES:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(STAFF_ROLES)}")

    if patch.get("location_id") is not None:
        location = db.session.get(Location, patch["location_id"])
        if not location:
            raise ValidationError(f"Location {patch['location_id']} not found")
        patch["location_name"] = location.name
    elif "location_id" in patch:
        patch["location_name"] = None


def _commit_or_conflict(username: str | None) -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Username '{username}' is already taken")


def create_staff(payload: dict, password: str) -> Staff:
    """Create a staff member; password is strength-checked and bcrypt-hashed."""
    patch = validate_payload(model=Staff, payload=payload, policy=STAFF_POLICY, partial=False)
    _apply_rules(patch)

    try:
        password_hash = hash_password(password or "")
    except PasswordValidationError as e:
        raise ValidationError(str(e))

    staff = Staff(password_hash=password_hash)
    apply_patch(staff, patch, STAFF_POLICY.writable_fields | {"location_name"})
    db.session.add(staff)
    _commit_or_conflict(patch.get("username"))
    return staff


def get_staff(staff_id: int) -> Staff:
    staff = db.session.get(Staff, staff_id)
    if not staff:
        raise NotFoundError("Staff not found")
    return staff


def list_staff(include_inactive: bool = False) -> list[Staff]:
    query = db.session.query(Staff)
    if not include_inactive:
        query = query.filter(Staff.is_active.is_(True))
    return query.order_by(Staff.name.asc(), Staff.id.asc()).all()


def update_staff(staff_id: int, payload: dict, password: str | None = None) -> Staff:
    staff = get_staff(staff_id)
    patch = validate_payload(model=Staff, payload=payload, policy=STAFF_POLICY, partial=True)
    _apply_rules(patch)

    if password:
        try:
            staff.password_hash = hash_password(password)
        except PasswordValidationError as e:
            raise ValidationError(str(e))

    apply_patch(staff, patch, STAFF_POLICY.writable_fields | {"location_name"})
    _commit_or_conflict(patch.get("username"))
    return staff
