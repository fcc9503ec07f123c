# Overview: Service-layer operations for pending records; merges the primary store with the external feeds.

"""
Pending record aggregation.

Pending = an Unclaimed record whose draw is more than OVERDUE_GRACE_DAYS days
old. Rows come from two sources that are merged, never reconciled:

- the primary store (Unclaimed table), tagged source="primary"
- the spreadsheet feeds (feed_service), tagged source="external_feed"

A failing feed only drops its own rows (reported in PendingAggregate.failures);
a failing primary query propagates.
"""

from __future__ import annotations

import json
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable

from ..extensions import db
from ..models import UnclaimedRecord
from ..permissions import Role
from .authorization_service import field_of, resolve_role
from .feed_service import ExternalFeedClient, FeedOutcome
from wintrack.time_utils import parse_draw_time, utcnow


logger = logging.getLogger(__name__)

SOURCE_PRIMARY = "primary"
SOURCE_EXTERNAL_FEED = "external_feed"

OVERDUE_GRACE_DAYS = 3
SECONDS_PER_DAY = 86400


def days_overdue(draw_date, now: datetime | None = None) -> int:
    """
    Whole days past the grace period since the draw, never negative.

    Unparsable or empty draw dates count as not overdue.
    """
    draw = parse_draw_time(draw_date)
    if draw is None:
        return 0
    now = now or utcnow()
    elapsed_days = math.floor((now - draw).total_seconds() / SECONDS_PER_DAY)
    return max(0, elapsed_days - OVERDUE_GRACE_DAYS)


def parse_amount(value) -> float:
    """Lenient float parse; anything unparsable or non-finite becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).replace(",", "").strip())
        except ValueError:
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def transform_feed_row(raw: dict, now: datetime | None = None) -> dict:
    """Map a raw feed row onto the pending record shape."""
    return {
        "id": raw.get("transCode"),
        "trans_id": raw.get("transCode"),
        "teller_name": raw.get("tellerName"),
        "draw_date": raw.get("drawTime"),
        "bet_number": raw.get("betNumber"),
        "bet_code": raw.get("betCode"),
        "bet_amount": parse_amount(raw.get("betAmount")),
        "win_amount": parse_amount(raw.get("winAmount")),
        "collector": raw.get("collector"),
        "status": raw.get("status"),
        "notification": raw.get("notification"),
        "days_overdue": days_overdue(raw.get("drawTime"), now),
        "source": SOURCE_EXTERNAL_FEED,
    }


def pending_to_dict(record: UnclaimedRecord, now: datetime | None = None) -> dict:
    data = record.to_dict()
    data["days_overdue"] = days_overdue(record.draw_date, now)
    data["source"] = SOURCE_PRIMARY
    return data


def get_pending(filters: dict | None = None, now: datetime | None = None) -> list[dict]:
    """
    Primary-store pending view, most overdue first.

    Filters: franchise_name, collector (equality).
    """
    filters = filters or {}
    now = now or utcnow()
    # days_overdue >= 1 once a full day past the grace period has elapsed
    cutoff = now - timedelta(days=OVERDUE_GRACE_DAYS + 1)

    query = db.session.query(UnclaimedRecord).filter(
        UnclaimedRecord.status == "Unclaimed",
        UnclaimedRecord.draw_date.isnot(None),
        UnclaimedRecord.draw_date <= cutoff,
    )
    if filters.get("franchise_name"):
        query = query.filter(UnclaimedRecord.franchise_name == filters["franchise_name"])
    if filters.get("collector"):
        query = query.filter(UnclaimedRecord.collector == filters["collector"])

    records = query.order_by(UnclaimedRecord.draw_date.asc(), UnclaimedRecord.id.asc()).all()
    return [pending_to_dict(r, now) for r in records]


def count_pending(now: datetime | None = None) -> int:
    now = now or utcnow()
    cutoff = now - timedelta(days=OVERDUE_GRACE_DAYS + 1)
    return db.session.query(UnclaimedRecord).filter(
        UnclaimedRecord.status == "Unclaimed",
        UnclaimedRecord.draw_date.isnot(None),
        UnclaimedRecord.draw_date <= cutoff,
    ).count()


def assigned_collectors_of(user) -> list[str]:
    """Cashier's assigned collectors; tolerates a JSON-encoded string."""
    value = field_of(user, "assigned_collectors")
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    if not isinstance(value, list):
        return []
    return [name for name in value if isinstance(name, str)]


def scope_to_user(records: Iterable[dict], user) -> list[dict]:
    """
    Restrict merged rows to what the user may see.

    Collectors see their own rows; cashiers see rows of their assigned
    collectors (none when unassigned). Other roles see everything.
    """
    records = list(records)
    role = resolve_role(user)
    if role is Role.COLLECTOR:
        fullname = field_of(user, "fullname")
        return [r for r in records if r.get("collector") == fullname]
    if role is Role.CASHIER:
        assigned = set(assigned_collectors_of(user))
        return [r for r in records if r.get("collector") in assigned]
    return records


@dataclass
class PendingAggregate:
    records: list[dict] = field(default_factory=list)
    failures: list[FeedOutcome] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [f"Feed source {f.source} unavailable: {f.error}" for f in self.failures]

    def to_dict(self) -> dict:
        return {
            "items": self.records,
            "count": len(self.records),
            "warnings": self.warnings,
        }


def fetch_pending_from_all_sources(
    primary_filters: dict | None = None,
    *,
    feed_client: ExternalFeedClient,
    user=None,
    now: datetime | None = None,
    primary_query: Callable[[dict, datetime], list[dict]] | None = None,
) -> PendingAggregate:
    """
    Merge primary pending rows with every feed's rows.

    The feeds are read on a worker thread while the primary query runs on
    the calling thread (it needs the request's database session). Rows are
    concatenated, primary first, with no cross-source deduplication. The
    collector filter narrows every source; franchise_name only the primary.
    """
    now = now or utcnow()
    primary_query = primary_query or get_pending
    filters = dict(primary_filters or {})
    if resolve_role(user) is Role.COLLECTOR:
        filters["collector"] = field_of(user, "fullname")

    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pending-feeds")
    try:
        feeds_future = pool.submit(feed_client.fetch_all)
        primary_rows = primary_query(filters, now)
        outcomes = feeds_future.result()
    finally:
        # A failed primary query must not wait on slow feeds
        pool.shutdown(wait=False, cancel_futures=True)

    feed_rows = [
        transform_feed_row(raw, now)
        for outcome in outcomes
        if outcome.ok
        for raw in outcome.rows
    ]
    # Feed rows carry no franchise; the collector filter applies to them too
    if filters.get("collector"):
        feed_rows = [r for r in feed_rows if r.get("collector") == filters["collector"]]
    failures = [outcome for outcome in outcomes if not outcome.ok]
    if failures:
        logger.warning(
            "Pending view built without %d of %d feed source(s)", len(failures), len(outcomes)
        )

    records = list(primary_rows) + feed_rows
    if user is not None:
        records = scope_to_user(records, user)
    return PendingAggregate(records=records, failures=failures)


def most_overdue(records: Iterable[dict], limit: int = 5) -> list[dict]:
    """Top `limit` records by days_overdue, descending (stable for ties)."""
    ordered = sorted(records, key=lambda r: r.get("days_overdue") or 0, reverse=True)
    return ordered[:max(limit, 0)]
