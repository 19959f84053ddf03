"""
Customer, expense and staff record stores.
"""

import pytest

from tillbook.errors import ConflictError, NotFoundError, ValidationError
from tillbook.services import customer_service, expense_service, staff_service
from tillbook.services.auth_service import verify_password


# =============================================================================
# CUSTOMERS
# =============================================================================

def test_customer_crud(db_session):
    customer = customer_service.create_customer({"name": "Ngozi", "email": "Ngozi@Example.com", "city": "Abuja"})
    assert customer.email == "ngozi@example.com"

    updated = customer_service.update_customer(customer.id, {"phone": "0809"})
    assert updated.phone == "0809"
    assert updated.name == "Ngozi"

    assert [c.id for c in customer_service.list_customers(search="ngo")] == [customer.id]

    customer_service.delete_customer(customer.id)
    with pytest.raises(NotFoundError):
        customer_service.get_customer(customer.id)


def test_customer_validation(db_session):
    with pytest.raises(ValidationError):
        customer_service.create_customer({"email": "x@example.com"})
    with pytest.raises(ValidationError):
        customer_service.create_customer({"name": "   "})
    with pytest.raises(ValidationError):
        customer_service.create_customer({"name": "A", "loyalty_points": 5})


def test_customer_email_unique(db_session):
    customer_service.create_customer({"name": "A", "email": "same@example.com"})
    with pytest.raises(ConflictError):
        customer_service.create_customer({"name": "B", "email": "SAME@example.com"})


# =============================================================================
# EXPENSES
# =============================================================================

def test_expense_crud_and_totals(db_session, manager):
    fuel = expense_service.create_expense(
        {"title": "Diesel", "amount_cents": 1500000, "category_name": "Utilities"}, staff_id=manager.id
    )
    expense_service.create_expense(
        {"title": "Rent", "amount_cents": 5000000, "category_name": "Premises", "expense_date": "2026-10-01"}
    )
    assert fuel.expense_date is not None
    assert fuel.created_by_staff_id == manager.id

    expense_service.update_expense(fuel.id, {"amount_cents": 1600000})

    totals = expense_service.expense_totals_by_category(expense_service.list_expenses())
    assert totals == {"total_cents": 6600000, "by_category": {"Utilities": 1600000, "Premises": 5000000}}

    assert len(expense_service.list_expenses(category_name="Premises")) == 1

    expense_service.delete_expense(fuel.id)
    with pytest.raises(NotFoundError):
        expense_service.get_expense(fuel.id)


@pytest.mark.parametrize("payload", [
    {"title": "Diesel", "category_name": "Utilities"},
    {"title": "Diesel", "amount_cents": -1, "category_name": "Utilities"},
    {"title": "Diesel", "amount_cents": "12.50", "category_name": "Utilities"},
    {"title": "Diesel", "amount_cents": 100, "category_name": "Utilities", "expense_date": "yesterday"},
])
def test_expense_validation(db_session, payload):
    with pytest.raises(ValidationError):
        expense_service.create_expense(payload)


# =============================================================================
# STAFF
# =============================================================================

def test_create_staff_hashes_password(db_session, location):
    staff = staff_service.create_staff(
        {"name": "Kemi", "username": "kemi", "role": "manager", "location_id": location.id, "salary_cents": 15000000},
        "Password123!",
    )
    assert staff.location_name == "Lekki"
    assert staff.password_hash != "Password123!"
    assert verify_password("Password123!", staff.password_hash)
    assert staff.is_manager


def test_staff_validation(db_session, location):
    with pytest.raises(ValidationError):
        staff_service.create_staff({"name": "Weak"}, "password")
    with pytest.raises(ValidationError):
        staff_service.create_staff({"name": "Boss", "role": "owner"}, "Password123!")
    with pytest.raises(ValidationError):
        staff_service.create_staff({"name": "Lost", "location_id": 999}, "Password123!")


def test_staff_username_unique(db_session, cashier):
    with pytest.raises(ConflictError):
        staff_service.create_staff({"name": "Other", "username": cashier.username}, "Password123!")


def test_update_and_deactivate_staff(db_session, cashier):
    staff_service.update_staff(cashier.id, {"role": "manager"}, password="NewPassword1!")
    assert cashier.role == "manager"
    assert verify_password("NewPassword1!", cashier.password_hash)

    staff_service.update_staff(cashier.id, {"is_active": False})
    assert cashier.id not in [s.id for s in staff_service.list_staff()]
    assert cashier.id in [s.id for s in staff_service.list_staff(include_inactive=True)]
