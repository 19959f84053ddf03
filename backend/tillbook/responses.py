# Overview: JSON envelope helpers shared by every blueprint.

"""
Every API response has the same shape:

    {"success": true, "message": "...", "data": ...}
    {"success": false, "message": "...", "error": "<kind>", "details": {...}}
"""

from flask import current_app, jsonify

from .errors import TillbookError


def success(data=None, status: int = 200, message: str | None = None):
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def failure(message: str, status: int, kind: str, details: dict | None = None):
    body = {"success": False, "message": message, "error": kind}
    if details:
        body["details"] = details
    return jsonify(body), status


def error_response(exc: TillbookError):
    return failure(exc.message, exc.status_code, exc.kind, exc.details)


def internal_error(log_message: str, exc: Exception | None = None):
    """Log the active exception and return a 500 envelope."""
    current_app.logger.exception(log_message)
    message = "Internal server error"
    if exc is not None and current_app.config.get("EXPOSE_INTERNAL_ERRORS"):
        message = f"{log_message}: {exc}"
    return failure(message, 500, "internal_error")
