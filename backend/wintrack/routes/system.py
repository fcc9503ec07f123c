# backend/wintrack/routes/system.py
"""
System health endpoint.
"""

import time
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from ..extensions import db, get_feed_client
from wintrack.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    feeds = get_feed_client()
    status = "healthy" if database["status"] == "healthy" else "unhealthy"
    return jsonify({
        "status": status,
        "timestamp": to_utc_z(utcnow()),
        "checks": {
            "database": database,
            "external_feeds": {"configured": len(feeds.endpoints)},
        },
    }), 200 if status == "healthy" else 503
