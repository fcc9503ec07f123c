"""
Route authorization tests.

Verifies:
- Unauthenticated requests return 401
- Each role is denied what its row of the role table does not grant (403)
- Denials are recorded as PERMISSION_DENIED security events
- Collectors can only edit and see their own records
"""

import pytest

from wintrack.models import SecurityEvent, UnclaimedRecord

from conftest import COLLECTOR_NAME


# =============================================================================
# UNAUTHENTICATED ACCESS - 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/users"),
            ("POST", "/api/users"),
            ("GET", "/api/permissions"),
            ("GET", "/api/unclaimed"),
            ("POST", "/api/unclaimed"),
            ("PATCH", "/api/unclaimed/1"),
            ("POST", "/api/unclaimed/1/collect"),
            ("DELETE", "/api/unclaimed/1"),
            ("GET", "/api/pending"),
            ("POST", "/api/pending/external"),
            ("DELETE", "/api/pending/external/T1"),
            ("GET", "/api/deposits"),
            ("POST", "/api/deposits/1/verify"),
            ("GET", "/api/collections"),
            ("GET", "/api/reports"),
            ("GET", "/api/reports/export"),
            ("GET", "/api/areas"),
            ("GET", "/api/dashboard"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"


# =============================================================================
# ROLE DENIALS - 403
# =============================================================================


class TestRoleDenials:

    @pytest.mark.parametrize(
        "role_fixture,method,path,permission",
        [
            ("staff", "POST", "/api/unclaimed", "CREATE_UNCLAIMED"),
            ("checker", "POST", "/api/unclaimed/1/collect", "MARK_AS_COLLECTED"),
            ("checker", "GET", "/api/reports", "VIEW_REPORTS"),
            ("collector", "DELETE", "/api/unclaimed/1", "DELETE_UNCLAIMED"),
            ("collector", "GET", "/api/users", "VIEW_USERS"),
            ("specialist", "POST", "/api/users", "CREATE_USER"),
            ("general_manager", "POST", "/api/users", "CREATE_USER"),
            ("general_manager", "PATCH", "/api/unclaimed/1", "UPDATE_UNCLAIMED"),
            ("staff", "GET", "/api/reports/export", "EXPORT_REPORTS"),
            ("cashier", "POST", "/api/deposits/1/verify", "VERIFY_DEPOSIT"),
            ("specialist", "POST", "/api/areas", "MANAGE_AREAS"),
        ],
    )
    def test_denied(self, request, client, db_session, headers_for, role_fixture, method, path, permission):
        user = request.getfixturevalue(role_fixture)
        resp = getattr(client, method.lower())(path, json={}, headers=headers_for(user))

        assert resp.status_code == 403
        assert resp.get_json()["required_permission"] == permission

        events = db_session.query(SecurityEvent).filter_by(event_type="PERMISSION_DENIED").all()
        assert [(e.user_id, e.action) for e in events] == [(user.id, permission)]

    def test_unknown_role_has_no_access(self, client, make_user, headers_for):
        ghost = make_user("auditor")
        resp = client.get("/api/unclaimed", headers=headers_for(ghost))
        assert resp.status_code == 403

    def test_general_manager_can_view_users(self, client, general_manager, headers_for):
        resp = client.get("/api/users", headers=headers_for(general_manager))
        assert resp.status_code == 200


# =============================================================================
# COLLECTOR OWNERSHIP
# =============================================================================


class TestCollectorOwnership:

    def test_can_update_own_record(self, client, collector, make_record, headers_for):
        record = make_record(collector=COLLECTOR_NAME)
        resp = client.patch(
            f"/api/unclaimed/{record.id}",
            json={"notification": "Texted agent"},
            headers=headers_for(collector),
        )
        assert resp.status_code == 200
        assert resp.get_json()["item"]["notification"] == "Texted agent"

    def test_cannot_update_other_collectors_record(self, client, db_session, collector, make_record, headers_for):
        record = make_record(collector="Maria Santos")
        resp = client.patch(
            f"/api/unclaimed/{record.id}",
            json={"notification": "Texted agent"},
            headers=headers_for(collector),
        )

        assert resp.status_code == 403
        [event] = db_session.query(SecurityEvent).filter_by(event_type="PERMISSION_DENIED").all()
        assert event.reason == "Not the assigned collector for UPDATE_UNCLAIMED"

        db_session.expire_all()
        assert db_session.get(UnclaimedRecord, record.id).notification is None

    def test_admin_updates_any_record(self, client, admin, make_record, headers_for):
        record = make_record(collector="Maria Santos")
        resp = client.patch(f"/api/unclaimed/{record.id}", json={"collector": "Pedro"}, headers=headers_for(admin))
        assert resp.status_code == 200
        assert resp.get_json()["item"]["collector"] == "Pedro"

    def test_list_is_scoped_to_collector(self, client, collector, make_record, headers_for):
        make_record(trans_id="MINE", collector=COLLECTOR_NAME)
        make_record(trans_id="THEIRS", collector="Maria Santos")

        resp = client.get("/api/unclaimed?collector=Maria%20Santos", headers=headers_for(collector))

        assert resp.status_code == 200
        assert [item["trans_id"] for item in resp.get_json()["items"]] == ["MINE"]

    def test_other_collectors_record_is_hidden(self, client, collector, make_record, headers_for):
        record = make_record(collector="Maria Santos")
        resp = client.get(f"/api/unclaimed/{record.id}", headers=headers_for(collector))
        assert resp.status_code == 404
