# Overview: Customer record store.

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError
from ..models import Customer
from ..validation import ModelValidationPolicy, apply_patch, validate_payload

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phone", "address", "city", "notes"},
    required_on_create={"name"},
)


def _normalize_email(patch: dict) -> None:
    if "email" in patch:
        patch["email"] = patch["email"].lower() if patch["email"] else None


def _commit_or_conflict(email: str | None) -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"A customer with email '{email}' already exists")


def create_customer(payload: dict) -> Customer:
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    _normalize_email(patch)

    customer = Customer()
    apply_patch(customer, patch, CUSTOMER_POLICY.writable_fields)
    db.session.add(customer)
    _commit_or_conflict(patch.get("email"))
    return customer


def get_customer(customer_id: int) -> Customer:
    customer = db.session.get(Customer, customer_id)
    if not customer:
        raise NotFoundError("Customer not found")
    return customer


def list_customers(search: str | None = None) -> list[Customer]:
    query = db.session.query(Customer)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(db.or_(
            Customer.name.ilike(like),
            Customer.email.ilike(like),
            Customer.phone.ilike(like),
        ))
    return query.order_by(Customer.name.asc(), Customer.id.asc()).all()


def update_customer(customer_id: int, payload: dict) -> Customer:
    customer = get_customer(customer_id)
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=True)
    _normalize_email(patch)
    apply_patch(customer, patch, CUSTOMER_POLICY.writable_fields)
    _commit_or_conflict(patch.get("email"))
    return customer


def delete_customer(customer_id: int) -> None:
    customer = get_customer(customer_id)
    db.session.delete(customer)
    db.session.commit()
