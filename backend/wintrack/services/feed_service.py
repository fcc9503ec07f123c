# Overview: HTTP client for the spreadsheet-backed pending feeds (Apps Script web apps).

"""
External pending feeds.

Each feed is an independently operated HTTP endpoint answering with a JSON
envelope {"success": bool, "data": [...], "error": str}. Reads fan out to
every configured endpoint and settle all branches: one failing endpoint
only removes its own rows. Writes go to the first endpoint and raise.

This module does not depend on Flask; the aggregation lives in
pending_service.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import requests

from ..config import MAX_EXTERNAL_FEEDS


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


class FeedError(Exception):
    """Raised when a feed request fails (network, HTTP status or {success: false})."""
    pass


class FeedConfigurationError(Exception):
    """Raised when a feed write is attempted with no endpoint configured."""
    pass


def _clean_endpoints(endpoints: Iterable[str] | None) -> tuple[str, ...]:
    cleaned = []
    for url in endpoints or ():
        if isinstance(url, str) and url.strip():
            cleaned.append(url.strip())
    if len(cleaned) > MAX_EXTERNAL_FEEDS:
        logger.warning(
            "%d external feeds configured, only the first %d are used",
            len(cleaned), MAX_EXTERNAL_FEEDS,
        )
    return tuple(cleaned[:MAX_EXTERNAL_FEEDS])


@dataclass(frozen=True)
class FeedConfig:
    """Ordered feed endpoints; blank entries are dropped."""
    endpoints: tuple[str, ...] = ()
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        object.__setattr__(self, "endpoints", _clean_endpoints(self.endpoints))

    @classmethod
    def from_app_config(cls, config: Mapping[str, Any]) -> "FeedConfig":
        return cls(
            endpoints=tuple(config.get("EXTERNAL_FEED_URLS") or ()),
            timeout_seconds=float(config.get("EXTERNAL_FEED_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
        )


@dataclass(frozen=True)
class FeedOutcome:
    """Settled result of one endpoint read."""
    source: int  # 1-based position in the endpoint list
    url: str
    ok: bool
    rows: list[dict] = field(default_factory=list)
    error: str | None = None


class ExternalFeedClient:
    def __init__(self, config: FeedConfig) -> None:
        self._config = config

    @property
    def endpoints(self) -> tuple[str, ...]:
        return self._config.endpoints

    @property
    def is_configured(self) -> bool:
        return bool(self._config.endpoints)

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return requests.request(method, url, timeout=self._config.timeout_seconds, **kwargs)
        except requests.RequestException as exc:
            raise FeedError(f"Request to feed failed: {exc}") from exc

    @staticmethod
    def _read_envelope(response: requests.Response, default_error: str) -> dict:
        if not 200 <= response.status_code < 300:
            raise FeedError(f"HTTP error! status: {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FeedError("Feed returned invalid JSON") from exc
        if not isinstance(payload, dict) or not payload.get("success"):
            error = payload.get("error") if isinstance(payload, dict) else None
            raise FeedError(error or default_error)
        return payload

    def fetch_source(self, url: str) -> list[dict]:
        """Rows of one feed. Raises FeedError."""
        response = self._request("GET", url, headers={"Accept": "application/json"})
        payload = self._read_envelope(response, "Feed reported failure")
        rows = payload.get("data") or []
        if not isinstance(rows, list):
            raise FeedError("Feed data is not a list")
        return [row for row in rows if isinstance(row, dict)]

    def _settle(self, source: int, url: str) -> FeedOutcome:
        try:
            rows = self.fetch_source(url)
        except FeedError as exc:
            logger.warning("Feed source %d failed, skipping: %s", source, exc)
            return FeedOutcome(source=source, url=url, ok=False, error=str(exc))
        logger.info("Feed source %d: fetched %d rows", source, len(rows))
        return FeedOutcome(source=source, url=url, ok=True, rows=rows)

    def fetch_all(self) -> list[FeedOutcome]:
        """Read every feed concurrently; one outcome per endpoint, in configured order."""
        if not self.endpoints:
            logger.warning(
                "No external feeds configured. Set EXTERNAL_FEED_URL_1 .. EXTERNAL_FEED_URL_%d",
                MAX_EXTERNAL_FEEDS,
            )
            return []

        with ThreadPoolExecutor(max_workers=len(self.endpoints), thread_name_prefix="feed") as pool:
            futures = [
                pool.submit(self._settle, source, url)
                for source, url in enumerate(self.endpoints, start=1)
            ]
            return [future.result() for future in futures]

    def _primary_endpoint(self) -> str:
        if not self.endpoints:
            raise FeedConfigurationError("External feed URL not configured")
        return self.endpoints[0]

    def add_pending(self, record: Mapping[str, Any]) -> dict:
        """Append a pending row to the first feed."""
        url = self._primary_endpoint()
        body = {
            "tellerName": record.get("teller_name"),
            "transCode": record.get("trans_id"),
            "drawTime": record.get("draw_date"),
            "betNumber": record.get("bet_number"),
            "betCode": record.get("bet_code"),
            "betAmount": record.get("bet_amount"),
            "winAmount": record.get("win_amount"),
            "collector": record.get("collector"),
            "status": record.get("status") or "pending",
            "notification": record.get("notification") or "",
        }
        response = self._request("POST", url, json=body)
        return self._read_envelope(response, "Failed to add data to external feed")

    def delete_pending(self, trans_code: str) -> dict:
        """Remove a pending row from the first feed by transaction code."""
        url = self._primary_endpoint()
        response = self._request(
            "GET", url, params={"action": "delete", "transCode": trans_code}
        )
        return self._read_envelope(response, "Failed to delete from external feed")

    def test_connection(self) -> bool:
        if not self.endpoints:
            return False
        try:
            response = self._request("GET", self.endpoints[0])
        except FeedError as exc:
            logger.warning("Feed connection test failed: %s", exc)
            return False
        return 200 <= response.status_code < 300
