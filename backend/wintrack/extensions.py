# Overview: Flask extension instances for database and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()


def get_feed_client():
    """
    Feed client for the current app.

    Uses an injected client (app.extensions["feed_client"]) when present,
    otherwise builds one from EXTERNAL_FEED_URLS.
    """
    from flask import current_app
    from .services.feed_service import ExternalFeedClient, FeedConfig

    client = current_app.extensions.get("feed_client")
    if client is None:
        client = ExternalFeedClient(FeedConfig.from_app_config(current_app.config))
    return client
