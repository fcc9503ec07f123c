# Overview: Service-layer operations for unclaimed records; create, edit, collect, delete.

from __future__ import annotations

import math
from datetime import datetime

from ..extensions import db
from ..models import UnclaimedRecord, CollectionRecord, ReportRecord
from ..permissions import Role
from .authorization_service import collected_status_for, field_of, resolve_role
from wintrack.time_utils import parse_draw_time, utcnow


EDITABLE_FIELDS = (
    "teller_name", "trans_id", "bet_number", "bet_code", "draw_date",
    "bet_amount", "win_amount", "charge_amount", "mode", "collector",
    "area", "franchise_name", "notification", "return_date",
)
AMOUNT_FIELDS = ("bet_amount", "win_amount", "charge_amount")
DATE_FIELDS = ("draw_date", "return_date")


class UnclaimedError(Exception):
    """Raised when an unclaimed record operation is invalid."""
    pass


def _to_amount(value, field: str) -> float:
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise UnclaimedError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise UnclaimedError(f"{field} must be a number")
    if not math.isfinite(number):
        raise UnclaimedError(f"{field} must be a finite number")
    return number


def _to_datetime(value, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    parsed = parse_draw_time(value)
    if parsed is None:
        raise UnclaimedError(f"{field} is not a valid date/time")
    return parsed


def _clean(data: dict) -> dict:
    cleaned = {}
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if key in AMOUNT_FIELDS:
            value = _to_amount(value, key)
        elif key in DATE_FIELDS:
            value = _to_datetime(value, key)
        cleaned[key] = value
    return cleaned


def get_record(record_id: int) -> UnclaimedRecord | None:
    return db.session.get(UnclaimedRecord, record_id)


def list_unclaimed(filters: dict | None = None) -> list[UnclaimedRecord]:
    """Newest first. Filters: status, franchise_name, area, collector, mode."""
    filters = filters or {}
    query = db.session.query(UnclaimedRecord)
    for key in ("status", "franchise_name", "area", "collector", "mode"):
        if filters.get(key):
            query = query.filter(getattr(UnclaimedRecord, key) == filters[key])
    return query.order_by(UnclaimedRecord.id.desc()).all()


def create_unclaimed(data: dict, user) -> UnclaimedRecord:
    """
    Record a new unclaimed win.

    net = win - charge; status starts at Unclaimed. Collectors always own
    what they record.
    """
    values = _clean(data)
    if not values.get("teller_name"):
        raise UnclaimedError("teller_name is required")

    if resolve_role(user) is Role.COLLECTOR:
        values["collector"] = field_of(user, "fullname")

    record = UnclaimedRecord(**values)
    record.status = "Unclaimed"
    record.net = (record.win_amount or 0) - (record.charge_amount or 0)

    db.session.add(record)
    db.session.commit()
    return record


def update_unclaimed(record: UnclaimedRecord, data: dict, user) -> UnclaimedRecord:
    """Partial update; net follows win/charge. Collectors cannot reassign."""
    values = _clean(data)
    if "teller_name" in values and not values["teller_name"]:
        raise UnclaimedError("teller_name is required")

    if resolve_role(user) is Role.COLLECTOR:
        values.pop("collector", None)

    # Status only moves through mark_as_collected and deposit verification;
    # echoing the current status back is allowed
    if "status" in data and data["status"] != record.status:
        raise UnclaimedError("Status can only change by collecting the record or verifying its deposit")

    for key, value in values.items():
        setattr(record, key, value)

    if "win_amount" in values or "charge_amount" in values:
        record.net = (record.win_amount or 0) - (record.charge_amount or 0)

    db.session.commit()
    return record


def mark_as_collected(record: UnclaimedRecord, user, now: datetime | None = None) -> UnclaimedRecord:
    """
    Close an Unclaimed record as returned by the agent.

    The terminal status depends on the acting role (cashiers leave it
    Uncollected until the deposit is verified). The already-assigned
    collector is kept. Writes the collection and report rows.
    """
    if record.status != "Unclaimed":
        raise UnclaimedError(f"Record is already {record.status}")

    now = now or utcnow()
    record.status = collected_status_for(user)
    record.return_date = now
    record.collector = record.collector or field_of(user, "fullname") or "System"

    db.session.add(CollectionRecord(
        unclaimed_id=record.id,
        teller_name=record.teller_name,
        bet_number=record.bet_number,
        collector=record.collector,
        area=record.area,
        franchise_name=record.franchise_name,
        mode=record.mode,
        win_amount=record.win_amount or 0,
        charge_amount=record.charge_amount or 0,
        net=record.effective_net,
        collected_at=now,
    ))
    db.session.add(ReportRecord(
        unclaimed_id=record.id,
        teller_name=record.teller_name,
        collector=record.collector,
        area=record.area,
        franchise_name=record.franchise_name,
        amount=record.effective_net,
        created_at=now,
    ))

    db.session.commit()
    return record


def delete_unclaimed(record: UnclaimedRecord) -> None:
    """Delete the record together with its collection and report rows."""
    db.session.query(CollectionRecord).filter_by(unclaimed_id=record.id).delete()
    db.session.query(ReportRecord).filter_by(unclaimed_id=record.id).delete()
    db.session.delete(record)
    db.session.commit()
