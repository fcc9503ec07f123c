"""
Pytest fixtures for wintrack backend tests.

Provides an in-memory application, per-test table cleanup, users for every
role, bearer-token headers, record factories and a fake HTTP layer for the
spreadsheet feeds.
"""

import json
from datetime import datetime

import pytest

from wintrack import create_app
from wintrack.extensions import db
from wintrack.models import User, UnclaimedRecord
from wintrack.services.auth_service import hash_password
from wintrack.services.feed_service import ExternalFeedClient, FeedConfig


PASSWORD = "Password123!"
# bcrypt is slow; hash once for every fixture user
PASSWORD_HASH = hash_password(PASSWORD)

FEED_URL_1 = "https://feeds.test/sheet-1/exec"
FEED_URL_2 = "https://feeds.test/sheet-2/exec"

COLLECTOR_NAME = "Juan Dela Cruz"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'EXTERNAL_FEED_URLS': [],
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()
        app.extensions.pop("feed_client", None)


# =============================================================================
# USERS
# =============================================================================


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory: make_user("collector", fullname=..., **fields)."""
    def _make(role: str, username: str | None = None, **fields):
        user = User(
            username=username or role.replace(" ", "_"),
            fullname=fields.pop("fullname", f"{role.title()} User"),
            password_hash=PASSWORD_HASH,
            role=role,
            status=fields.pop("status", "active"),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def admin(make_user):
    return make_user("admin", fullname="Ana Admin")


@pytest.fixture
def specialist(make_user):
    return make_user("specialist", fullname="Sam Specialist")


@pytest.fixture
def collector(make_user):
    return make_user("collector", fullname=COLLECTOR_NAME)


@pytest.fixture
def checker(make_user):
    return make_user("checker", fullname="Carla Checker")


@pytest.fixture
def staff(make_user):
    return make_user("staff", fullname="Stan Staff")


@pytest.fixture
def general_manager(make_user):
    return make_user("general manager", username="gm", fullname="Gina Manager")


@pytest.fixture
def cashier(make_user):
    return make_user("cashier", fullname="Cora Cashier", assigned_collectors=[COLLECTOR_NAME])


def get_auth_token(client, username: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def headers_for(client):
    """headers_for(user) -> Authorization headers from a real login."""
    def _headers(user):
        return auth_headers(get_auth_token(client, user.username))
    return _headers


# =============================================================================
# RECORDS
# =============================================================================


@pytest.fixture
def make_record(db_session):
    """Factory for UnclaimedRecord rows; defaults to a 10-day-old cash win."""
    def _make(**fields):
        values = {
            "teller_name": "Teller One",
            "trans_id": "T-1",
            "bet_number": "12-34",
            "bet_code": "L2",
            "draw_date": datetime(2025, 12, 1, 17, 0),
            "bet_amount": 10,
            "win_amount": 4500,
            "charge_amount": 0,
            "net": 4500,
            "mode": "Cash",
            "collector": COLLECTOR_NAME,
            "area": "North",
            "franchise_name": "Franchise A",
            "status": "Unclaimed",
        }
        values.update(fields)
        record = UnclaimedRecord(**values)
        db_session.add(record)
        db_session.commit()
        return record
    return _make


# =============================================================================
# FEEDS
# =============================================================================


class _FakeResp:
    def __init__(self, status_code: int, payload=None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeFeeds:
    """
    Stand-in for requests.request keyed by URL.

    Each route is either a _FakeResp or an exception instance to raise.
    Calls are recorded as (method, url, kwargs).
    """

    def __init__(self) -> None:
        self.routes: dict[str, object] = {}
        self.calls: list[tuple[str, str, dict]] = []

    def respond(self, url: str, status_code: int = 200, payload=None, text: str | None = None) -> None:
        self.routes[url] = _FakeResp(status_code, payload, text)

    def rows(self, url: str, rows: list[dict]) -> None:
        self.respond(url, payload={"success": True, "data": rows})

    def fail(self, url: str, exc: Exception) -> None:
        self.routes[url] = exc

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        route = self.routes.get(url)
        if route is None:
            raise AssertionError(f"Unexpected feed request: {method} {url}")
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def fake_feeds(monkeypatch):
    feeds = FakeFeeds()
    monkeypatch.setattr("requests.request", feeds)
    return feeds


@pytest.fixture
def feed_client():
    return ExternalFeedClient(FeedConfig(endpoints=(FEED_URL_1, FEED_URL_2), timeout_seconds=5))


@pytest.fixture
def install_feed_client(app, db_session):
    """Make routes use the given client; removed again by db_session."""
    def _install(client):
        app.extensions["feed_client"] = client
        return client
    return _install
