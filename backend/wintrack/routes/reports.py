# Overview: Flask API routes for collections, distribution reports and the CSV export.

from flask import Blueprint, request, jsonify, Response

from ..permissions import Permission
from ..services import reporting_service
from ..decorators import require_auth, require_permission


reports_bp = Blueprint("reports", __name__, url_prefix="/api")


@reports_bp.get("/collections")
@require_auth
@require_permission(Permission.VIEW_REPORTS)
def list_collections_route():
    """Query params: franchise_name, collector."""
    collections = reporting_service.list_collections({
        "franchise_name": request.args.get("franchise_name"),
        "collector": request.args.get("collector"),
    })
    return jsonify({"items": [c.to_dict() for c in collections], "count": len(collections)}), 200


@reports_bp.get("/reports")
@require_auth
@require_permission(Permission.VIEW_REPORTS)
def list_reports_route():
    """Query params: collector, area."""
    reports = reporting_service.list_reports({
        "collector": request.args.get("collector"),
        "area": request.args.get("area"),
    })
    return jsonify({
        "items": [r.to_dict() for r in reports],
        "count": len(reports),
        "total_amount": round(sum(float(r.amount or 0) for r in reports), 2),
    }), 200


@reports_bp.get("/reports/export")
@require_auth
@require_permission(Permission.EXPORT_REPORTS)
def export_reports_route():
    body = reporting_service.export_reports_csv({
        "collector": request.args.get("collector"),
        "area": request.args.get("area"),
    })
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=distribution_reports.csv"},
    )
