# Overview: Flask API routes for unclaimed records; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..permissions import Permission
from ..services import unclaimed_service, permission_service
from ..services.unclaimed_service import UnclaimedError
from ..services.permission_service import PermissionDeniedError
from ..services.authorization_service import is_scoped_to_own_records
from ..decorators import require_auth, require_permission, permission_denied_response


unclaimed_bp = Blueprint("unclaimed", __name__, url_prefix="/api/unclaimed")

LIST_FILTERS = ("status", "franchise_name", "area", "collector", "mode")


def _load_visible(record_id: int):
    """Record by id, or None when missing or outside the caller's scope."""
    record = unclaimed_service.get_record(record_id)
    if record is None:
        return None
    if is_scoped_to_own_records(g.current_user) and record.collector != g.current_user.fullname:
        return None
    return record


@unclaimed_bp.get("")
@require_auth
@require_permission(Permission.VIEW_UNCLAIMED)
def list_unclaimed_route():
    """Query params: status, franchise_name, area, collector, mode."""
    filters = {key: request.args.get(key) for key in LIST_FILTERS}
    if is_scoped_to_own_records(g.current_user):
        filters["collector"] = g.current_user.fullname

    records = unclaimed_service.list_unclaimed(filters)
    return jsonify({"items": [r.to_dict() for r in records], "count": len(records)}), 200


@unclaimed_bp.get("/<int:record_id>")
@require_auth
@require_permission(Permission.VIEW_UNCLAIMED)
def get_unclaimed_route(record_id: int):
    record = _load_visible(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404
    return jsonify({"item": record.to_dict()}), 200


@unclaimed_bp.post("")
@require_auth
@require_permission(Permission.CREATE_UNCLAIMED)
def create_unclaimed_route():
    """
    Record an unclaimed win.

    Request body: teller_name (required), trans_id, bet_number, bet_code,
    draw_date, bet_amount, win_amount, charge_amount, mode, collector, area,
    franchise_name, notification.
    """
    data = request.get_json(silent=True) or {}
    try:
        record = unclaimed_service.create_unclaimed(data, g.current_user)
    except UnclaimedError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create unclaimed record")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"item": record.to_dict()}), 201


@unclaimed_bp.patch("/<int:record_id>")
@require_auth
@require_permission(Permission.UPDATE_UNCLAIMED)
def update_unclaimed_route(record_id: int):
    record = unclaimed_service.get_record(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404

    # Ownership check needs the loaded record
    try:
        permission_service.require_permission(
            g.current_user,
            Permission.UPDATE_UNCLAIMED,
            item=record,
            resource=request.path,
            ip_address=request.remote_addr,
            user_agent=request.headers.get("User-Agent"),
        )
    except PermissionDeniedError as e:
        return permission_denied_response(Permission.UPDATE_UNCLAIMED, e)

    data = request.get_json(silent=True) or {}
    try:
        unclaimed_service.update_unclaimed(record, data, g.current_user)
    except UnclaimedError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400

    return jsonify({"item": record.to_dict()}), 200


@unclaimed_bp.post("/<int:record_id>/collect")
@require_auth
@require_permission(Permission.MARK_AS_COLLECTED)
def collect_unclaimed_route(record_id: int):
    record = _load_visible(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404

    try:
        unclaimed_service.mark_as_collected(record, g.current_user)
    except UnclaimedError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 409
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to mark record %s collected", record_id)
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"item": record.to_dict()}), 200


@unclaimed_bp.delete("/<int:record_id>")
@require_auth
@require_permission(Permission.DELETE_UNCLAIMED)
def delete_unclaimed_route(record_id: int):
    record = unclaimed_service.get_record(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404

    unclaimed_service.delete_unclaimed(record)
    return jsonify({"success": True}), 200
