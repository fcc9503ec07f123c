from __future__ import annotations

from ..extensions import db
from wintrack.time_utils import to_utc_z


UNCLAIMED_STATUSES = ("Unclaimed", "Uncollected", "Collected", "Cancelled")

# Money columns come back as floats so JSON payloads match the feed rows
_Money = db.Numeric(12, 2, asdecimal=False)


class UnclaimedRecord(db.Model):
    """
    An unclaimed win recorded by a cashier or collector.

    Lifecycle: Unclaimed -> (Uncollected | Collected) when marked collected,
    Uncollected -> Collected once the cash deposit is verified.
    """
    __tablename__ = "Unclaimed"
    __table_args__ = (
        db.Index("ix_unclaimed_status_draw", "status", "draw_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    teller_name = db.Column(db.String(128), nullable=False)
    trans_id = db.Column(db.String(64), nullable=True, index=True)
    bet_number = db.Column(db.String(64), nullable=True)
    bet_code = db.Column(db.String(64), nullable=True)
    draw_date = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    bet_amount = db.Column(_Money, nullable=False, default=0)
    win_amount = db.Column(_Money, nullable=False, default=0)
    charge_amount = db.Column(_Money, nullable=False, default=0)
    net = db.Column(_Money, nullable=True)

    mode = db.Column(db.String(32), nullable=True)  # Cash, GCash, Bank...
    collector = db.Column(db.String(128), nullable=True, index=True)
    area = db.Column(db.String(128), nullable=True, index=True)
    franchise_name = db.Column(db.String(128), nullable=True, index=True)
    notification = db.Column(db.String(255), nullable=True)

    status = db.Column(db.String(16), nullable=False, default="Unclaimed", index=True)
    return_date = db.Column(db.DateTime(timezone=True), nullable=True)

    # Cash deposit
    cash_deposited = db.Column(db.Boolean, nullable=False, default=False)
    deposit_amount = db.Column(_Money, nullable=True)
    bank_name = db.Column(db.String(64), nullable=True)
    deposit_reference = db.Column(db.String(128), nullable=True)
    deposit_receipt = db.Column(db.String(512), nullable=True)  # public URL of the uploaded receipt
    deposit_date = db.Column(db.DateTime(timezone=True), nullable=True)
    deposited_by = db.Column(db.String(128), nullable=True)

    # Deposit verification
    verified_by = db.Column(db.String(128), nullable=True)
    verification_date = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def effective_net(self) -> float:
        """net when set, otherwise the win amount."""
        return float(self.net or self.win_amount or 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "teller_name": self.teller_name,
            "trans_id": self.trans_id,
            "bet_number": self.bet_number,
            "bet_code": self.bet_code,
            "draw_date": to_utc_z(self.draw_date),
            "bet_amount": self.bet_amount,
            "win_amount": self.win_amount,
            "charge_amount": self.charge_amount,
            "net": self.net,
            "mode": self.mode,
            "collector": self.collector,
            "area": self.area,
            "franchise_name": self.franchise_name,
            "notification": self.notification,
            "status": self.status,
            "return_date": to_utc_z(self.return_date),
            "cash_deposited": self.cash_deposited,
            "deposit_amount": self.deposit_amount,
            "bank_name": self.bank_name,
            "deposit_reference": self.deposit_reference,
            "deposit_receipt": self.deposit_receipt,
            "deposit_date": to_utc_z(self.deposit_date),
            "deposited_by": self.deposited_by,
            "verified_by": self.verified_by,
            "verification_date": to_utc_z(self.verification_date),
            "created_at": to_utc_z(self.created_at),
        }


class CollectionRecord(db.Model):
    """One row per record marked collected (OverAllCollections)."""
    __tablename__ = "OverAllCollections"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    unclaimed_id = db.Column(db.Integer, db.ForeignKey("Unclaimed.id"), nullable=True, index=True)

    teller_name = db.Column(db.String(128), nullable=True)
    bet_number = db.Column(db.String(64), nullable=True)
    collector = db.Column(db.String(128), nullable=True, index=True)
    area = db.Column(db.String(128), nullable=True)
    franchise_name = db.Column(db.String(128), nullable=True, index=True)
    mode = db.Column(db.String(32), nullable=True)

    win_amount = db.Column(_Money, nullable=False, default=0)
    charge_amount = db.Column(_Money, nullable=False, default=0)
    net = db.Column(_Money, nullable=False, default=0)

    collected_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "unclaimed_id": self.unclaimed_id,
            "teller_name": self.teller_name,
            "bet_number": self.bet_number,
            "collector": self.collector,
            "area": self.area,
            "franchise_name": self.franchise_name,
            "mode": self.mode,
            "win_amount": self.win_amount,
            "charge_amount": self.charge_amount,
            "net": self.net,
            "collected_at": to_utc_z(self.collected_at),
        }


class ReportRecord(db.Model):
    """Distribution report line per collected record (Reports)."""
    __tablename__ = "Reports"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    unclaimed_id = db.Column(db.Integer, db.ForeignKey("Unclaimed.id"), nullable=True, index=True)

    teller_name = db.Column(db.String(128), nullable=True)
    collector = db.Column(db.String(128), nullable=True, index=True)
    area = db.Column(db.String(128), nullable=True, index=True)
    franchise_name = db.Column(db.String(128), nullable=True)
    amount = db.Column(_Money, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "unclaimed_id": self.unclaimed_id,
            "teller_name": self.teller_name,
            "collector": self.collector,
            "area": self.area,
            "franchise_name": self.franchise_name,
            "amount": self.amount,
            "created_at": to_utc_z(self.created_at),
        }


class Area(db.Model):
    """Service area a collector covers."""
    __tablename__ = "Areas"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_areas_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(16), nullable=False, default="active")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "created_at": to_utc_z(self.created_at),
        }
