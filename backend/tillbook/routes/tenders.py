# Overview: Flask API routes for the tender registry and device tender layouts.

"""
Tender API Routes

Tills read the registry to lay out payment buttons. Setup (create, edit,
delete, seed, device layouts) is restricted to managers and admins.
"""

from flask import Blueprint, request

from ..decorators import require_auth, require_role
from ..errors import TillbookError
from ..responses import error_response, internal_error, success
from ..services import tender_service


tenders_bp = Blueprint("tenders", __name__, url_prefix="/api/tenders")


def _tender_fields(data: dict) -> dict:
    return {
        "name": data.get("name"),
        "description": data.get("description"),
        "button_color": data.get("button_color"),
        "till_order": data.get("till_order"),
        "classification": data.get("classification"),
    }


@tenders_bp.get("")
@require_auth
def list_tenders_route():
    try:
        return success([t.to_dict() for t in tender_service.list_tenders()])
    except Exception as e:
        return internal_error("Failed to list tenders", e)


@tenders_bp.post("")
@require_auth
@require_role("manager", "admin")
def create_tender_route():
    """
    Register a payment method.

    Request body:
    {
        "name": "CASH",
        "description": "Cash payment",    (optional)
        "button_color": "#E5E7EB",        (optional)
        "till_order": 3,                  (optional, >= 1)
        "classification": "Cash"          (Cash | Card | Other)
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        tender = tender_service.create_tender(**_tender_fields(data))
        return success(tender.to_dict(), 201, "Tender created")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to create tender", e)


@tenders_bp.post("/seed")
@require_auth
@require_role("manager", "admin")
def seed_tenders_route():
    try:
        tenders, created = tender_service.seed_default_tenders()
        message = "Default tenders created" if created else "Tenders already exist"
        return success([t.to_dict() for t in tenders], 201 if created else 200, message)
    except Exception as e:
        return internal_error("Failed to seed tenders", e)


@tenders_bp.get("/<int:tender_id>")
@require_auth
def get_tender_route(tender_id: int):
    try:
        return success(tender_service.get_tender(tender_id).to_dict())
    except TillbookError as e:
        return error_response(e)


@tenders_bp.put("/<int:tender_id>")
@require_auth
@require_role("manager", "admin")
def update_tender_route(tender_id: int):
    try:
        data = request.get_json(silent=True) or {}
        tender = tender_service.update_tender(tender_id, **_tender_fields(data))
        return success(tender.to_dict(), message="Tender updated")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to update tender", e)


@tenders_bp.delete("/<int:tender_id>")
@require_auth
@require_role("manager", "admin")
def delete_tender_route(tender_id: int):
    try:
        tender_service.delete_tender(tender_id)
        return success(message="Tender deleted")
    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to delete tender", e)


# =============================================================================
# DEVICE LAYOUTS
# =============================================================================

@tenders_bp.get("/assignments")
@require_auth
def list_assignments_route():
    try:
        return success(tender_service.get_all_device_assignments())
    except Exception as e:
        return internal_error("Failed to load tender assignments", e)


@tenders_bp.get("/assignments/<device_id>")
@require_auth
def get_assignments_route(device_id: str):
    try:
        ranks = tender_service.get_device_assignments(device_id)
        return success({"device_id": device_id, "tender_ranks": ranks})
    except TillbookError as e:
        return error_response(e)


@tenders_bp.put("/assignments/<device_id>")
@require_auth
@require_role("manager", "admin")
def set_assignments_route(device_id: str):
    """
    Replace a device's tender buttons.

    Request body:
    {
        "tender_ranks": [3, 1, 2]
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        ranks = tender_service.set_device_assignments(device_id, data.get("tender_ranks"))
        return success({"device_id": device_id, "tender_ranks": ranks}, message="Tender layout saved")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to save tender layout", e)


@tenders_bp.put("/assignments")
@require_auth
@require_role("manager", "admin")
def replace_assignments_route():
    """
    Replace every device layout at once.

    Request body:
    {
        "device_tenders": {"TILL-1": [1, 2], "TILL-2": [3]}
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        mapping = tender_service.replace_all_device_assignments(data.get("device_tenders"))
        return success(mapping, message="Tender layouts saved")

    except TillbookError as e:
        return error_response(e)
    except Exception as e:
        return internal_error("Failed to save tender layouts", e)
