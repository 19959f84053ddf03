# Overview: Flask API routes for online orders; parses input and returns JSON responses.

from flask import Blueprint, request

from ..decorators import require_auth
from ..errors import TillbookError
from ..legacy import transaction_to_wire
from ..responses import error_response, internal_error, success
from ..services import order_service


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.post("")
@require_auth
def create_order_route():
    """
    Create an online order.

    Request body:
    {
        "customer_id": 1,
        "shipping_details": {"name": "...", "email": "...", "phone": "...", "address": "...", "city": "..."},
        "items": [{"product_id": 7, "name": "Serum", "price": 7500, "quantity": 1}],
        "shipping_cost_cents": 0,        (optional)
        "payment_reference": "..."       (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        order = order_service.create_order(
            customer_id=data.get("customer_id"),
            shipping_details=data.get("shipping_details"),
            items=data.get("items"),
            shipping_cost_cents=data.get("shipping_cost_cents"),
            payment_reference=data.get("payment_reference"),
        )
        return success(order.to_dict(), 201, "Order created")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to create order", e)


@orders_bp.get("")
@require_auth
def list_orders_route():
    try:
        page = order_service.list_orders(
            search=request.args.get("search") or None,
            page=request.args.get("page", 1, type=int),
            per_page=request.args.get("per_page", 10, type=int),
        )
        return success(page)
    except Exception as e:
        return internal_error("Failed to list orders", e)


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    try:
        return success(order_service.get_order(order_id).to_dict())
    except TillbookError as e:
        return error_response(e)


@orders_bp.patch("/<int:order_id>/status")
@require_auth
def update_order_status_route(order_id: int):
    """
    Move an order through fulfillment. Delivered orders are recorded in the
    transaction ledger; the resulting transaction is returned alongside.

    Request body:
    {
        "status": "Delivered",
        "delivery_person": "..."  (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        order, transaction = order_service.update_order_status(
            order_id,
            data.get("status"),
            delivery_person=data.get("delivery_person"),
        )
        return success({
            "order": order.to_dict(),
            "transaction": transaction_to_wire(transaction) if transaction else None,
        }, message=f"Order status updated to {order.status}")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update order status", e)


@orders_bp.patch("/<int:order_id>/payment")
@require_auth
def update_payment_status_route(order_id: int):
    try:
        data = request.get_json(silent=True) or {}
        order = order_service.update_payment_status(
            order_id,
            data.get("payment_status"),
            payment_reference=data.get("payment_reference"),
        )
        return success(order.to_dict(), message=f"Payment status updated to {order.payment_status}")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update payment status", e)
