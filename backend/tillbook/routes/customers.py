# Overview: Flask API routes for customer records.

from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import TillbookError
from ..responses import error_response, internal_error, success
from ..services import customer_service


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("")
@require_auth
def list_customers_route():
    try:
        customers = customer_service.list_customers(search=request.args.get("search") or None)
        return success([c.to_dict() for c in customers])
    except Exception as e:
        return internal_error("Failed to list customers", e)


@customers_bp.post("")
@require_auth
def create_customer_route():
    try:
        customer = customer_service.create_customer(request.get_json(silent=True))
        return success(customer.to_dict(), 201, "Customer created")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to create customer", e)


@customers_bp.get("/<int:customer_id>")
@require_auth
def get_customer_route(customer_id: int):
    try:
        return success(customer_service.get_customer(customer_id).to_dict())
    except TillbookError as e:
        return error_response(e)


@customers_bp.put("/<int:customer_id>")
@require_auth
def update_customer_route(customer_id: int):
    try:
        customer = customer_service.update_customer(customer_id, request.get_json(silent=True))
        return success(customer.to_dict(), message="Customer updated")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update customer", e)


@customers_bp.delete("/<int:customer_id>")
@require_auth
def delete_customer_route(customer_id: int):
    try:
        customer_service.delete_customer(customer_id)
        return success(message="Customer deleted")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to delete customer", e)
