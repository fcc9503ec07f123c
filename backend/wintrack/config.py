# backend/wintrack/config.py
from __future__ import annotations
import os


MAX_EXTERNAL_FEEDS = 10


def _external_feed_urls() -> list[str]:
    """EXTERNAL_FEED_URL_1 .. EXTERNAL_FEED_URL_10, blanks dropped, order kept."""
    urls = []
    for i in range(1, MAX_EXTERNAL_FEEDS + 1):
        url = os.environ.get(f"EXTERNAL_FEED_URL_{i}", "")
        if url and url.strip():
            urls.append(url.strip())
    return urls


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///wintrack.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Spreadsheet-backed pending feeds (Apps Script web apps)
    EXTERNAL_FEED_URLS = _external_feed_urls()
    EXTERNAL_FEED_TIMEOUT_SECONDS = float(os.environ.get("EXTERNAL_FEED_TIMEOUT_SECONDS", "15"))
