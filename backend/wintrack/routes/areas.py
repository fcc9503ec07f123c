# Overview: Flask API routes for service areas.

from flask import Blueprint, request, jsonify

from ..extensions import db
from ..models import Area
from ..permissions import Permission
from ..services import area_service
from ..decorators import require_auth, require_permission


areas_bp = Blueprint("areas", __name__, url_prefix="/api/areas")


@areas_bp.get("")
@require_auth
def list_areas_route():
    """Any signed-in user; areas feed the record forms. Query param: status."""
    areas = area_service.list_areas({"status": request.args.get("status")})
    return jsonify({"items": [a.to_dict() for a in areas]}), 200


@areas_bp.post("")
@require_auth
@require_permission(Permission.MANAGE_AREAS)
def create_area_route():
    data = request.get_json(silent=True) or {}
    try:
        area = area_service.create_area(data)
    except ValueError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400
    return jsonify({"item": area.to_dict()}), 201


@areas_bp.patch("/<int:area_id>")
@require_auth
@require_permission(Permission.MANAGE_AREAS)
def update_area_route(area_id: int):
    area = db.session.get(Area, area_id)
    if area is None:
        return jsonify({"error": "Area not found"}), 404

    data = request.get_json(silent=True) or {}
    try:
        area_service.update_area(area, data)
    except ValueError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400
    return jsonify({"item": area.to_dict()}), 200


@areas_bp.delete("/<int:area_id>")
@require_auth
@require_permission(Permission.MANAGE_AREAS)
def delete_area_route(area_id: int):
    area = db.session.get(Area, area_id)
    if area is None:
        return jsonify({"error": "Area not found"}), 404

    area_service.delete_area(area)
    return jsonify({"success": True}), 200
