# Overview: Flask API routes for till (cash drawer) lifecycle; parses input and returns JSON responses.

"""
Till API Routes

Lifecycle: open -> (suspend <-> resume) -> close. CLOSED is terminal.
Any signed-in staff member may open and operate a till.
"""

from flask import Blueprint, g, request

from ..decorators import require_auth
from ..errors import TillbookError
from ..responses import error_response, internal_error, success
from ..services import till_service


tills_bp = Blueprint("tills", __name__, url_prefix="/api/tills")


@tills_bp.post("")
@require_auth
def open_till_route():
    """
    Open a till for the signed-in staff member.

    Request body:
    {
        "location_id": 1,
        "opening_balance_cents": 5000,
        "device": "Front Counter",  (optional)
        "notes": "..."              (optional)
    }

    "staff_id" may be given by managers opening a till on someone's behalf.
    """
    try:
        data = request.get_json(silent=True) or {}

        staff_id = g.current_staff.id
        if data.get("staff_id") is not None and g.current_staff.is_manager:
            staff_id = data["staff_id"]

        till = till_service.open_till(
            location_id=data.get("location_id"),
            staff_id=staff_id,
            opening_balance_cents=data.get("opening_balance_cents"),
            device=data.get("device"),
            notes=data.get("notes"),
        )
        return success(till.to_dict(), 201, "Till opened")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to open till", e)


@tills_bp.get("")
@require_auth
def list_tills_route():
    try:
        tills = till_service.list_tills(
            store_id=request.args.get("store_id", type=int),
            location_id=request.args.get("location_id", type=int),
            staff_id=request.args.get("staff_id", type=int),
            status=request.args.get("status") or None,
            limit=request.args.get("limit", 100, type=int),
        )
        return success([t.to_dict() for t in tills])

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to list tills", e)


@tills_bp.get("/<int:till_id>")
@require_auth
def get_till_route(till_id: int):
    try:
        return success(till_service.get_till(till_id).to_dict())
    except TillbookError as e:
        return error_response(e)


@tills_bp.get("/<int:till_id>/summary")
@require_auth
def till_summary_route(till_id: int):
    try:
        return success(till_service.get_till_summary(till_id))
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to build till summary", e)


@tills_bp.patch("/<int:till_id>/close")
@require_auth
def close_till_route(till_id: int):
    """
    Close a till and record the counted drawer.

    Request body:
    {
        "closing_balance_cents": 12000,
        "notes": "..."  (optional)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        till = till_service.close_till(
            till_id,
            closing_balance_cents=data.get("closing_balance_cents"),
            notes=data.get("notes"),
        )
        return success(till.to_dict(), message="Till closed")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to close till", e)


@tills_bp.patch("/<int:till_id>/suspend")
@require_auth
def suspend_till_route(till_id: int):
    try:
        till = till_service.suspend_till(till_id)
        return success(till.to_dict(), message="Till suspended")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to suspend till", e)


@tills_bp.patch("/<int:till_id>/resume")
@require_auth
def resume_till_route(till_id: int):
    try:
        till = till_service.resume_till(till_id)
        return success(till.to_dict(), message="Till resumed")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to resume till", e)
