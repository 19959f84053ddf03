# Overview: Flask API routes for the transaction ledger; parses input and returns JSON responses.

"""
Transaction API Routes

POS sales are recorded against an OPEN till; online orders enter the ledger
through /from-order. Item payloads accept both the canonical
(unit_price_cents, quantity) and the legacy (price/salePriceIncTax, qty)
field names, and responses carry both.

SECURITY:
- Any signed-in staff member can record, hold and complete sales
- Refunds require manager or admin
"""

from flask import Blueprint, g, request

from ..decorators import require_auth, require_role
from ..errors import TillbookError
from ..legacy import transaction_to_wire
from ..models.transactions import TXN_HELD, TXN_REFUNDED
from ..responses import error_response, failure, internal_error, success
from ..services import reconciliation_service, transaction_service
from ..services.transaction_service import TillContext


transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.post("")
@require_auth
def record_sale_route():
    """
    Record a sale on an open till.

    Request body:
    {
        "till_id": 1,
        "items": [{"name": "Lipstick", "price": 1000, "qty": 2}],
        "tender_type": "CASH",
        "amount_paid_cents": 2500,
        "total_cents": 2000,
        "discount_cents": 0,          (optional)
        "discount_reason": "...",     (optional)
        "customer_name": "...",       (optional)
        "table_name": "...",          (optional)
        "status": "held"              (optional; parks the sale)
    }
    """
    try:
        data = request.get_json(silent=True) or {}

        context = TillContext(till_id=data.get("till_id"), staff_id=g.current_staff.id)
        transaction = transaction_service.record_sale(
            context,
            items=data.get("items"),
            tender_type=data.get("tender_type"),
            amount_paid_cents=data.get("amount_paid_cents"),
            total_cents=data.get("total_cents"),
            discount_cents=data.get("discount_cents"),
            discount_reason=data.get("discount_reason"),
            customer_name=data.get("customer_name"),
            table_name=data.get("table_name"),
            held=data.get("status") == TXN_HELD,
        )
        message = "Sale held" if transaction.status == TXN_HELD else "Sale recorded"
        return success(transaction_to_wire(transaction), 201, message)

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to record sale", e)


@transactions_bp.get("")
@require_auth
def list_transactions_route():
    try:
        transactions = transaction_service.list_transactions(
            status=request.args.get("status") or None,
            channel=request.args.get("channel") or None,
            till_id=request.args.get("till_id", type=int),
            location=request.args.get("location") or None,
            limit=request.args.get("limit", 100, type=int),
            offset=request.args.get("offset", 0, type=int),
        )
        return success([transaction_to_wire(t) for t in transactions])

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to list transactions", e)


@transactions_bp.get("/summary")
@require_auth
def sales_summary_route():
    """Sales KPIs over completed transactions, optionally filtered by channel, till or location."""
    try:
        transactions = transaction_service.completed_transactions(
            channel=request.args.get("channel") or None,
            till_id=request.args.get("till_id", type=int),
            location=request.args.get("location") or None,
        )
        top = request.args.get("top", 10, type=int)
        return success(transaction_service.sales_summary(transactions, top=top))

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to build sales summary", e)


@transactions_bp.get("/<int:transaction_id>")
@require_auth
def get_transaction_route(transaction_id: int):
    try:
        transaction = transaction_service.get_transaction(transaction_id)
        return success(transaction_to_wire(transaction))
    except TillbookError as e:
        return error_response(e)


@transactions_bp.patch("/<int:transaction_id>")
@require_auth
def update_status_route(transaction_id: int):
    """
    Change a transaction's status.

    Request body:
    {
        "status": "completed" | "refunded",
        "reason": "...",              (required for refunded)
        "amount_paid_cents": 2000,    (completing a held sale; defaults to the total)
        "tender_type": "CASH"         (completing a held sale; optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        new_status = data.get("status")

        if new_status == TXN_REFUNDED and not g.current_staff.is_manager:
            return failure("Permission denied", 403, "forbidden", {"required_roles": ["manager", "admin"]})

        transaction = transaction_service.update_status(
            transaction_id,
            new_status,
            staff_id=g.current_staff.id,
            reason=data.get("reason"),
            amount_paid_cents=data.get("amount_paid_cents"),
            tender_type=data.get("tender_type"),
        )
        return success(transaction_to_wire(transaction), message=f"Transaction {transaction.status}")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update transaction status", e)


@transactions_bp.post("/<int:transaction_id>/refund")
@require_auth
@require_role("manager", "admin")
def refund_route(transaction_id: int):
    """
    Refund a completed sale.

    Request body:
    {
        "reason": "Damaged item"
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        transaction = transaction_service.refund(
            transaction_id,
            reason=data.get("reason"),
            staff_id=g.current_staff.id,
        )
        return success(transaction_to_wire(transaction), message="Transaction refunded")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to refund transaction", e)


@transactions_bp.post("/from-order")
@require_auth
def from_order_route():
    """
    Copy an online order into the ledger.

    Returns 201 when a transaction was created, 200 when the order had
    already been reconciled.
    """
    try:
        data = request.get_json(silent=True) or {}
        transaction, created = reconciliation_service.reconcile_order(data.get("order_id"))

        if created:
            return success(transaction_to_wire(transaction), 201, "Order recorded as transaction")
        return success(transaction_to_wire(transaction), 200, "Order already recorded")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to record order as transaction", e)
