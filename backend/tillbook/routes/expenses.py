# Overview: Flask API routes for expense records.

from flask import Blueprint, g, request

from ..decorators import require_auth
from ..errors import TillbookError
from ..responses import error_response, internal_error, success
from ..services import expense_service


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
def list_expenses_route():
    """List expenses (newest first) with grand and per-category totals."""
    try:
        expenses = expense_service.list_expenses(
            category_name=request.args.get("category") or None,
            location_name=request.args.get("location") or None,
        )
        return success({
            "items": [e.to_dict() for e in expenses],
            "totals": expense_service.expense_totals_by_category(expenses),
        })
    except Exception as e:
        return internal_error("Failed to list expenses", e)


@expenses_bp.post("")
@require_auth
def create_expense_route():
    """
    Record an expense.

    Request body:
    {
        "title": "Generator fuel",
        "amount_cents": 1500000,
        "category_name": "Utilities",
        "location_name": "Lekki",           (optional)
        "expense_date": "2026-10-18",       (optional, defaults to now)
        "description": "..."                (optional)
    }
    """
    try:
        expense = expense_service.create_expense(request.get_json(silent=True), staff_id=g.current_staff.id)
        return success(expense.to_dict(), 201, "Expense recorded")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to record expense", e)


@expenses_bp.get("/<int:expense_id>")
@require_auth
def get_expense_route(expense_id: int):
    try:
        return success(expense_service.get_expense(expense_id).to_dict())
    except TillbookError as e:
        return error_response(e)


@expenses_bp.put("/<int:expense_id>")
@require_auth
def update_expense_route(expense_id: int):
    try:
        expense = expense_service.update_expense(expense_id, request.get_json(silent=True))
        return success(expense.to_dict(), message="Expense updated")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update expense", e)


@expenses_bp.delete("/<int:expense_id>")
@require_auth
def delete_expense_route(expense_id: int):
    try:
        expense_service.delete_expense(expense_id)
        return success(message="Expense deleted")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to delete expense", e)
