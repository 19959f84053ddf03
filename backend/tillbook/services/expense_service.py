# Overview: Expense record store.

from __future__ import annotations

from ..extensions import db
from ..errors import NotFoundError
from ..models import Expense
from ..validation import ModelValidationPolicy, apply_patch, validate_payload
from tillbook.time_utils import utcnow

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"title", "amount_cents", "category_name", "location_name", "expense_date", "description"},
    required_on_create={"title", "amount_cents", "category_name"},
    money_fields={"amount_cents"},
)


def create_expense(payload: dict, staff_id: int | None = None) -> Expense:
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)

    expense = Expense(created_by_staff_id=staff_id)
    apply_patch(expense, patch, EXPENSE_POLICY.writable_fields)
    if expense.expense_date is None:
        expense.expense_date = utcnow()

    db.session.add(expense)
    db.session.commit()
    return expense


def get_expense(expense_id: int) -> Expense:
    expense = db.session.get(Expense, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


def list_expenses(category_name: str | None = None, location_name: str | None = None) -> list[Expense]:
    query = db.session.query(Expense)
    if category_name:
        query = query.filter(Expense.category_name == category_name)
    if location_name:
        query = query.filter(Expense.location_name == location_name)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()


def update_expense(expense_id: int, payload: dict) -> Expense:
    expense = get_expense(expense_id)
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=True)
    apply_patch(expense, patch, EXPENSE_POLICY.writable_fields)
    db.session.commit()
    return expense


def delete_expense(expense_id: int) -> None:
    expense = get_expense(expense_id)
    db.session.delete(expense)
    db.session.commit()


def expense_totals_by_category(expenses: list[Expense]) -> dict:
    """Grand total plus per-category totals, in minor units."""
    by_category: dict[str, int] = {}
    for expense in expenses:
        by_category[expense.category_name] = by_category.get(expense.category_name, 0) + expense.amount_cents
    return {
        "total_cents": sum(by_category.values()),
        "by_category": by_category,
    }
