# Overview: Flask API route for the dashboard summary.

from flask import Blueprint, jsonify, g, current_app

from ..extensions import get_feed_client
from ..permissions import Permission
from ..services import reporting_service
from ..decorators import require_auth, require_permission


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("")
@require_auth
@require_permission(Permission.VIEW_UNCLAIMED)
def dashboard_route():
    try:
        summary = reporting_service.dashboard_summary(
            feed_client=get_feed_client(),
            user=g.current_user,
        )
    except Exception:
        current_app.logger.exception("Failed to build dashboard summary")
        return jsonify({"error": "Internal server error"}), 500
    return jsonify(summary), 200
