"""
Login, logout, session validation and the health endpoint.
"""

from datetime import timedelta

from wintrack.models import SecurityEvent, SessionToken
from wintrack.time_utils import utcnow

from conftest import PASSWORD, auth_headers, get_auth_token


def test_login_returns_token_and_permissions(client, collector):
    resp = client.post("/api/auth/login", json={"username": "collector", "password": PASSWORD})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["token"]
    assert body["user"]["fullname"] == collector.fullname
    assert "password_hash" not in body["user"]
    assert body["permissions"] == sorted(["CREATE_UNCLAIMED", "MARK_AS_COLLECTED", "UPDATE_UNCLAIMED", "VIEW_UNCLAIMED"])


def test_bad_password_is_logged(client, db_session, collector):
    resp = client.post("/api/auth/login", json={"username": "collector", "password": "wrong"})

    assert resp.status_code == 401
    [event] = db_session.query(SecurityEvent).all()
    assert event.event_type == "LOGIN_FAILED"
    assert event.success is False


def test_missing_fields(client, db_session):
    resp = client.post("/api/auth/login", json={"username": "collector"})
    assert resp.status_code == 400


def test_inactive_user_cannot_login(client, make_user):
    make_user("staff", status="inactive")
    assert get_auth_token(client, "staff") is None


def test_me_and_logout(client, admin):
    headers = auth_headers(get_auth_token(client, "admin"))

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.get_json()["user"]["username"] == "admin"

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_invalid_token(client, db_session):
    resp = client.get("/api/auth/me", headers=auth_headers("not-a-token"))
    assert resp.status_code == 401


def test_idle_session_is_revoked(client, db_session, admin):
    headers = auth_headers(get_auth_token(client, "admin"))

    session = db_session.query(SessionToken).one()
    session.last_used_at = utcnow() - timedelta(hours=3)
    db_session.commit()

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    db_session.expire_all()
    assert db_session.query(SessionToken).one().revoked_reason == "Idle timeout"


def test_deactivated_user_loses_session(client, db_session, staff):
    headers = auth_headers(get_auth_token(client, "staff"))

    staff.status = "suspended"
    db_session.commit()

    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_health(client, db_session):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "healthy"
    assert body["checks"]["external_feeds"]["configured"] == 0


def test_cors_for_local_frontend(client, db_session):
    resp = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    resp = client.get("/health", headers={"Origin": "https://evil.test"})
    assert "Access-Control-Allow-Origin" not in resp.headers
