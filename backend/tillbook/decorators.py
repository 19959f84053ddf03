# Overview: Request decorators for authenticated and role-restricted API routes.

from functools import wraps

from flask import g, request

from .responses import failure
from .services import session_service


def require_auth(f):
    """
    Require a valid bearer token.

    Sets g.current_staff to the authenticated Staff and g.session_token to
    the plaintext token (used by logout). Returns 401 if the header is
    missing or the token is invalid, expired or revoked.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return failure("Authentication required", 401, "unauthorized")

        token = auth_header.split(" ", 1)[1].strip()
        staff = session_service.validate_session(token)

        if not staff:
            return failure("Invalid or expired token", 401, "unauthorized")

        g.current_staff = staff
        g.session_token = token

        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """Restrict a route to staff holding one of the given roles. Use after @require_auth."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            staff = getattr(g, "current_staff", None)
            if staff is None:
                return failure("Authentication required", 401, "unauthorized")

            if staff.role not in roles:
                return failure(
                    "Permission denied",
                    403,
                    "forbidden",
                    {"required_roles": list(roles)},
                )

            return f(*args, **kwargs)

        return decorated_function

    return decorator
