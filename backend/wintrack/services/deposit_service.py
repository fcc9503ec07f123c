# Overview: Service-layer operations for cash deposits of collected winnings.

"""
Cash deposits.

Cash-mode records that have been collected (Collected or Uncollected) wait
for the collector's bank deposit. A deposit stamps the bank details on the
record; a batch deposit spreads the total bank charges evenly over every
record it covers. Verifying a deposit closes an Uncollected record as
Collected.

Amounts follow the net-or-win rule: net when set, otherwise win_amount.
"""

from __future__ import annotations

import math
from datetime import datetime

from ..extensions import db
from ..models import UnclaimedRecord, CollectionRecord, ReportRecord
from wintrack.time_utils import utcnow


CASH_MODE = "Cash"
DEPOSITABLE_STATUSES = ("Collected", "Uncollected")


class DepositError(Exception):
    """Raised when a deposit cannot be recorded or verified."""
    pass


def _amount(value, field: str) -> float:
    if value is None or value == "" or isinstance(value, bool):
        raise DepositError(f"{field} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise DepositError(f"{field} must be a number")
    if not math.isfinite(number):
        raise DepositError(f"{field} must be a finite number")
    if number < 0:
        raise DepositError(f"{field} cannot be negative")
    return number


def list_cash_deposits(filters: dict | None = None) -> dict:
    """
    Cash records awaiting or past deposit, newest first.

    Filters: franchise_name, area.
    """
    filters = filters or {}
    query = db.session.query(UnclaimedRecord).filter(
        UnclaimedRecord.mode == CASH_MODE,
        UnclaimedRecord.status.in_(DEPOSITABLE_STATUSES),
    )
    if filters.get("franchise_name"):
        query = query.filter(UnclaimedRecord.franchise_name == filters["franchise_name"])
    if filters.get("area"):
        query = query.filter(UnclaimedRecord.area == filters["area"])

    records = query.order_by(UnclaimedRecord.id.desc()).all()
    pending = [r for r in records if not r.cash_deposited]
    deposited = [r for r in records if r.cash_deposited]

    return {
        "items": [r.to_dict() for r in records],
        "pending_count": len(pending),
        "deposited_count": len(deposited),
        "total_pending_amount": round(sum(r.effective_net for r in pending), 2),
        "total_deposited_amount": round(sum(r.effective_net for r in deposited), 2),
    }


def _check_depositable(record: UnclaimedRecord) -> None:
    if record.mode != CASH_MODE:
        raise DepositError("Only cash collections can be deposited")
    if record.status not in DEPOSITABLE_STATUSES:
        raise DepositError(f"Record is {record.status}, not collected")
    if record.cash_deposited:
        raise DepositError("Record is already deposited")


def _apply_deposit(record: UnclaimedRecord, deposit: dict, deposited_by: str, now: datetime) -> None:
    amount = _amount(deposit.get("deposit_amount"), "deposit_amount")
    record.cash_deposited = True
    record.deposit_amount = amount
    record.bank_name = deposit.get("bank_name")
    record.deposit_reference = deposit.get("deposit_reference")
    record.deposit_receipt = deposit.get("deposit_receipt")
    record.deposit_date = now
    record.deposited_by = deposited_by


def sync_distribution(record: UnclaimedRecord) -> None:
    """Carry the record's charge/net onto its collection and report rows."""
    db.session.query(CollectionRecord).filter_by(unclaimed_id=record.id).update(
        {"charge_amount": record.charge_amount or 0, "net": record.effective_net},
        synchronize_session="fetch",
    )
    db.session.query(ReportRecord).filter_by(unclaimed_id=record.id).update(
        {"amount": record.effective_net},
        synchronize_session="fetch",
    )


def deposit_cash(
    record: UnclaimedRecord,
    deposit: dict,
    deposited_by: str,
    now: datetime | None = None,
) -> UnclaimedRecord:
    _check_depositable(record)
    _apply_deposit(record, deposit, deposited_by, now or utcnow())
    db.session.commit()
    return record


def deposit_batch(
    records: list[UnclaimedRecord],
    deposit: dict,
    deposited_by: str,
    total_charges=0,
    now: datetime | None = None,
) -> list[UnclaimedRecord]:
    """
    Deposit every not-yet-deposited cash record in one bank transaction.

    Records already deposited are skipped. The total charges are split
    evenly and net is recomputed per record. All or nothing.
    """
    now = now or utcnow()
    charges = _amount(total_charges or 0, "total_charges")
    _amount(deposit.get("deposit_amount"), "deposit_amount")

    to_deposit = [r for r in records if not r.cash_deposited]
    if not to_deposit:
        raise DepositError("No pending deposits")
    for record in to_deposit:
        _check_depositable(record)

    charge_per_record = charges / len(to_deposit)
    for record in to_deposit:
        record.charge_amount = charge_per_record
        record.net = (record.win_amount or 0) - charge_per_record
        _apply_deposit(record, deposit, deposited_by, now)
        sync_distribution(record)

    db.session.commit()
    return to_deposit


def verify_deposit(record: UnclaimedRecord, verified_by: str, now: datetime | None = None) -> UnclaimedRecord:
    """Close an Uncollected record after checking its deposit."""
    if record.status != "Uncollected":
        raise DepositError(f"Only Uncollected records can be verified (record is {record.status})")

    record.status = "Collected"
    record.verified_by = verified_by
    record.verification_date = now or utcnow()
    db.session.commit()
    return record
