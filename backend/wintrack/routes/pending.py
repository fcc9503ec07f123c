# Overview: Flask API routes for the merged pending view and the external feed writes.

"""
Pending records.

GET merges the primary store with every configured spreadsheet feed; a feed
that fails is reported under "warnings" and the rest is still returned.
Writes go to the first configured feed only.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import get_feed_client
from ..permissions import Permission
from ..services import pending_service
from ..services.feed_service import FeedError, FeedConfigurationError
from ..decorators import require_auth, require_permission


pending_bp = Blueprint("pending", __name__, url_prefix="/api/pending")


def _feed_error_response(exc: Exception):
    if isinstance(exc, FeedConfigurationError):
        return jsonify({"error": str(exc)}), 503
    return jsonify({"error": str(exc)}), 502


@pending_bp.get("")
@require_auth
@require_permission(Permission.VIEW_UNCLAIMED)
def list_pending_route():
    """Query params: collector (every source), franchise_name (primary store only)."""
    filters = {
        "franchise_name": request.args.get("franchise_name"),
        "collector": request.args.get("collector"),
    }
    try:
        aggregate = pending_service.fetch_pending_from_all_sources(
            filters,
            feed_client=get_feed_client(),
            user=g.current_user,
        )
    except Exception:
        current_app.logger.exception("Failed to load pending records")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(aggregate.to_dict()), 200


@pending_bp.post("/external")
@require_auth
@require_permission(Permission.CREATE_UNCLAIMED)
def add_external_pending_route():
    """
    Append a row to the first feed.

    Request body: teller_name, trans_id, draw_date, bet_number, bet_code,
    bet_amount, win_amount, collector, status, notification.
    """
    data = request.get_json(silent=True) or {}
    if not data.get("trans_id"):
        return jsonify({"error": "trans_id required"}), 400

    try:
        result = get_feed_client().add_pending(data)
    except (FeedConfigurationError, FeedError) as e:
        current_app.logger.warning("External pending write failed: %s", e)
        return _feed_error_response(e)

    return jsonify({"success": True, "result": result}), 201


@pending_bp.delete("/external/<trans_code>")
@require_auth
@require_permission(Permission.DELETE_UNCLAIMED)
def delete_external_pending_route(trans_code: str):
    try:
        result = get_feed_client().delete_pending(trans_code)
    except (FeedConfigurationError, FeedError) as e:
        current_app.logger.warning("External pending delete of %s failed: %s", trans_code, e)
        return _feed_error_response(e)

    return jsonify({"success": True, "result": result}), 200
