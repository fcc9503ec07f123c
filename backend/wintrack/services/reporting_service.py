# Overview: Service-layer operations for collections, distribution reports and the dashboard.

from __future__ import annotations

import csv
import io
from datetime import datetime

from sqlalchemy import func

from wintrack.extensions import db
from wintrack.models import UnclaimedRecord, CollectionRecord, ReportRecord
from wintrack.services.feed_service import ExternalFeedClient
from wintrack.services.pending_service import fetch_pending_from_all_sources, most_overdue
from wintrack.time_utils import utcnow, to_utc_z


REPORT_EXPORT_COLUMNS = ("id", "unclaimed_id", "teller_name", "collector", "area", "franchise_name", "amount", "created_at")
DASHBOARD_TOP_N = 5


def list_collections(filters: dict | None = None) -> list[CollectionRecord]:
    """Newest first. Filters: franchise_name, collector."""
    filters = filters or {}
    query = db.session.query(CollectionRecord)
    if filters.get("franchise_name"):
        query = query.filter(CollectionRecord.franchise_name == filters["franchise_name"])
    if filters.get("collector"):
        query = query.filter(CollectionRecord.collector == filters["collector"])
    return query.order_by(CollectionRecord.id.desc()).all()


def list_reports(filters: dict | None = None) -> list[ReportRecord]:
    """Newest first. Filters: collector, area."""
    filters = filters or {}
    query = db.session.query(ReportRecord)
    if filters.get("collector"):
        query = query.filter(ReportRecord.collector == filters["collector"])
    if filters.get("area"):
        query = query.filter(ReportRecord.area == filters["area"])
    return query.order_by(ReportRecord.id.desc()).all()


def export_reports_csv(filters: dict | None = None) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=REPORT_EXPORT_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for report in list_reports(filters):
        writer.writerow(report.to_dict())
    return buffer.getvalue()


def dashboard_summary(
    *,
    feed_client: ExternalFeedClient,
    user=None,
    now: datetime | None = None,
) -> dict:
    """
    Headline numbers plus the most overdue pending rows across all sources.

    A failing feed shrinks the pending numbers and adds a warning; a failing
    database query propagates.
    """
    now = now or utcnow()
    aggregate = fetch_pending_from_all_sources({}, feed_client=feed_client, user=user, now=now)

    total_unclaimed = db.session.query(UnclaimedRecord).filter(
        UnclaimedRecord.status == "Unclaimed"
    ).count()
    total_collections = db.session.query(CollectionRecord).count()
    total_revenue = db.session.query(func.coalesce(func.sum(CollectionRecord.net), 0)).scalar()
    total_reports = db.session.query(func.coalesce(func.sum(ReportRecord.amount), 0)).scalar()

    recent = (
        db.session.query(UnclaimedRecord)
        .filter(UnclaimedRecord.status == "Unclaimed")
        .order_by(UnclaimedRecord.id.desc())
        .limit(DASHBOARD_TOP_N)
        .all()
    )

    return {
        "total_unclaimed": total_unclaimed,
        "total_pending": len(aggregate.records),
        "total_collections": total_collections,
        "total_revenue": round(float(total_revenue or 0), 2),
        "total_reports": round(float(total_reports or 0), 2),
        "most_overdue": most_overdue(aggregate.records, DASHBOARD_TOP_N),
        "recent_unclaimed": [r.to_dict() for r in recent],
        "warnings": aggregate.warnings,
        "generated_at": to_utc_z(now),
    }
