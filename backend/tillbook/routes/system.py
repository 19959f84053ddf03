# Overview: Health endpoint for deployment checks.

import time

from flask import Blueprint, current_app

from ..extensions import db
from ..models import Staff, Till
from ..responses import failure, success
from tillbook.time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """Check database connectivity with a couple of cheap counts."""
    start_time = time.time()
    try:
        staff_count = db.session.query(Staff).count()
        till_count = db.session.query(Till).count()
        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "staff": staff_count,
                "tills": till_count,
            },
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    body = {
        "status": database["status"],
        "timestamp": to_utc_z(utcnow()),
        "database": database,
    }
    if database["status"] != "healthy":
        return failure("Database unavailable", 503, "unhealthy", body)
    return success(body)
