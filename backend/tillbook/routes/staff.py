# Overview: Flask API routes for staff administration (manager/admin only).

from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..errors import TillbookError
from ..responses import error_response, internal_error, success
from ..services import staff_service


staff_bp = Blueprint("staff", __name__, url_prefix="/api/staff")


def _split_password(data) -> tuple[dict, str | None]:
    data = dict(data or {})
    password = data.pop("password", None)
    return data, password


@staff_bp.get("")
@require_auth
@require_role("manager", "admin")
def list_staff_route():
    try:
        include_inactive = request.args.get("include_inactive", "false").lower() == "true"
        return success([s.to_dict() for s in staff_service.list_staff(include_inactive=include_inactive)])
    except Exception as e:
        return internal_error("Failed to list staff", e)


@staff_bp.post("")
@require_auth
@require_role("manager", "admin")
def create_staff_route():
    """
    Create a staff member.

    Request body:
    {
        "name": "Ada Obi",
        "username": "ada",
        "password": "Password123!",
        "role": "staff",              (staff | manager | admin)
        "location_id": 1,             (optional)
        "salary_cents": 15000000      (optional)
    }
    """
    try:
        payload, password = _split_password(request.get_json(silent=True))
        staff = staff_service.create_staff(payload, password)
        return success(staff.to_dict(), 201, "Staff created")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to create staff", e)


@staff_bp.get("/<int:staff_id>")
@require_auth
@require_role("manager", "admin")
def get_staff_route(staff_id: int):
    try:
        return success(staff_service.get_staff(staff_id).to_dict())
    except TillbookError as e:
        return error_response(e)


@staff_bp.put("/<int:staff_id>")
@require_auth
@require_role("manager", "admin")
def update_staff_route(staff_id: int):
    try:
        payload, password = _split_password(request.get_json(silent=True))
        staff = staff_service.update_staff(staff_id, payload, password=password)
        return success(staff.to_dict(), message="Staff updated")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update staff", e)
