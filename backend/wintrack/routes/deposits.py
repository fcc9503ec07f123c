# Overview: Flask API routes for cash deposits and deposit verification.

from flask import Blueprint, request, jsonify, g

from ..extensions import db
from ..models import UnclaimedRecord
from ..permissions import Permission
from ..services import deposit_service, unclaimed_service
from ..services.deposit_service import DepositError
from ..decorators import require_auth, require_permission


deposits_bp = Blueprint("deposits", __name__, url_prefix="/api/deposits")

DEPOSIT_FIELDS = ("deposit_amount", "bank_name", "deposit_reference", "deposit_receipt")


def _deposit_payload(data: dict) -> dict:
    return {key: data.get(key) for key in DEPOSIT_FIELDS}


@deposits_bp.get("")
@require_auth
@require_permission(Permission.VIEW_UNCLAIMED)
def list_deposits_route():
    """Query params: franchise_name, area."""
    result = deposit_service.list_cash_deposits({
        "franchise_name": request.args.get("franchise_name"),
        "area": request.args.get("area"),
    })
    return jsonify(result), 200


@deposits_bp.post("/<int:record_id>")
@require_auth
@require_permission(Permission.MARK_AS_COLLECTED)
def deposit_route(record_id: int):
    """
    Request body: deposit_amount (required), bank_name, deposit_reference,
    deposit_receipt (URL of the uploaded receipt).
    """
    record = unclaimed_service.get_record(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404

    data = request.get_json(silent=True) or {}
    try:
        deposit_service.deposit_cash(record, _deposit_payload(data), g.current_user.fullname)
    except DepositError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400

    return jsonify({"item": record.to_dict()}), 200


@deposits_bp.post("/batch")
@require_auth
@require_permission(Permission.MARK_AS_COLLECTED)
def deposit_batch_route():
    """
    Request body: record_ids (list[int], required), total_charges, plus the
    single-deposit fields.
    """
    data = request.get_json(silent=True) or {}
    record_ids = data.get("record_ids")
    if not isinstance(record_ids, list) or not record_ids:
        return jsonify({"error": "record_ids required"}), 400

    records = db.session.query(UnclaimedRecord).filter(UnclaimedRecord.id.in_(record_ids)).all()
    if len(records) != len(set(record_ids)):
        return jsonify({"error": "Some records were not found"}), 404

    try:
        deposited = deposit_service.deposit_batch(
            records,
            _deposit_payload(data),
            g.current_user.fullname,
            total_charges=data.get("total_charges") or 0,
        )
    except DepositError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 400

    return jsonify({"items": [r.to_dict() for r in deposited], "count": len(deposited)}), 200


@deposits_bp.post("/<int:record_id>/verify")
@require_auth
@require_permission(Permission.VERIFY_DEPOSIT)
def verify_deposit_route(record_id: int):
    record = unclaimed_service.get_record(record_id)
    if record is None:
        return jsonify({"error": "Record not found"}), 404

    try:
        deposit_service.verify_deposit(record, g.current_user.fullname)
    except DepositError as e:
        db.session.rollback()
        return jsonify({"error": str(e)}), 409

    return jsonify({"item": record.to_dict()}), 200
