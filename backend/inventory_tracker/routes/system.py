# backend/inventory_tracker/routes/system.py
"""
System health endpoint and static frontend serving.
"""

import os
import time
from flask import Blueprint, current_app, abort, send_from_directory
from ..extensions import db
from ..models import Item, User

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        user_count = db.session.query(User).filter_by(is_active=True).count()
        item_count = db.session.query(Item).filter_by(deleted=False).count()

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "active_users": user_count,
                "items": item_count,
            }
        }
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    healthy = database["status"] == "healthy"
    return {
        "status": "healthy" if healthy else "unhealthy",
        "checks": {
            "database": database,
            "email_configured": bool(current_app.config.get("EMAIL_SMTP_SERV")),
            "barcode_lookup_configured": bool(current_app.config.get("UPC_URL")),
        },
    }, (200 if healthy else 503)


@system_bp.get("/")
@system_bp.get("/<path:filename>")
def frontend(filename: str = "index.html"):
    """Serve the static frontend from FRONTEND_PATH, if one is configured."""
    frontend_path = current_app.config.get("FRONTEND_PATH")
    if not frontend_path or not os.path.isdir(frontend_path):
        abort(404)
    return send_from_directory(os.path.abspath(frontend_path), filename)
