# Overview: Flask API routes for staff sign-in and sessions.

from flask import Blueprint, current_app, g, request

from ..decorators import require_auth
from ..responses import failure, internal_error, success
from ..services import auth_service, session_service
from tillbook.time_utils import to_utc_z


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate staff and create a session token.

    Request body:
    {
        "username": "ada",
        "password": "..."
    }
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not all([username, password]):
            return failure("username and password required", 400, "validation_error")

        staff = auth_service.authenticate(username, password)
        if not staff:
            current_app.logger.warning("Failed login for %s", username)
            return failure("Invalid credentials", 401, "unauthorized")

        session, token = session_service.create_session(staff.id)

        return success({
            "staff": staff.to_dict(),
            "token": token,
            "expires_at": to_utc_z(session.expires_at),
        }, message="Logged in")

    except Exception as e:
        return internal_error("Failed to log in", e)


@auth_bp.post("/logout")
@require_auth
def logout_route():
    session_service.revoke_session(g.session_token)
    return success(message="Logged out")


@auth_bp.get("/me")
@require_auth
def me_route():
    return success({"staff": g.current_staff.to_dict()})
