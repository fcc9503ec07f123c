"""
Unclaimed records, deposits, collections and reports over HTTP.
"""

import csv
import io

from wintrack.models import CollectionRecord, ReportRecord, UnclaimedRecord

from conftest import COLLECTOR_NAME


class TestUnclaimedRoutes:

    def test_checker_records_a_win(self, client, checker, headers_for):
        resp = client.post("/api/unclaimed", json={
            "teller_name": "Teller One",
            "trans_id": "T-100",
            "draw_date": "5PM 2025-12-23",
            "win_amount": 4500,
            "charge_amount": 50,
            "mode": "Cash",
            "collector": COLLECTOR_NAME,
        }, headers=headers_for(checker))

        assert resp.status_code == 201
        item = resp.get_json()["item"]
        assert item["status"] == "Unclaimed"
        assert item["net"] == 4450
        assert item["draw_date"] == "2025-12-23T17:00:00Z"

    def test_validation_error(self, client, checker, headers_for):
        resp = client.post("/api/unclaimed", json={"win_amount": 5}, headers=headers_for(checker))
        assert resp.status_code == 400

    def test_list_filters(self, client, staff, make_record, headers_for):
        make_record(trans_id="A", area="North")
        make_record(trans_id="B", area="South")

        resp = client.get("/api/unclaimed?area=South", headers=headers_for(staff))

        assert resp.get_json()["count"] == 1
        assert resp.get_json()["items"][0]["trans_id"] == "B"

    def test_cashier_collect_leaves_uncollected(self, client, db_session, cashier, make_record, headers_for):
        record = make_record()

        resp = client.post(f"/api/unclaimed/{record.id}/collect", headers=headers_for(cashier))

        assert resp.status_code == 200
        assert resp.get_json()["item"]["status"] == "Uncollected"
        assert db_session.query(CollectionRecord).count() == 1
        assert db_session.query(ReportRecord).count() == 1

    def test_collect_twice_conflicts(self, client, specialist, make_record, headers_for):
        record = make_record()
        headers = headers_for(specialist)

        assert client.post(f"/api/unclaimed/{record.id}/collect", headers=headers).status_code == 200
        assert client.post(f"/api/unclaimed/{record.id}/collect", headers=headers).status_code == 409

    def test_delete(self, client, db_session, specialist, make_record, headers_for):
        record = make_record()

        resp = client.delete(f"/api/unclaimed/{record.id}", headers=headers_for(specialist))

        assert resp.status_code == 200
        assert db_session.query(UnclaimedRecord).count() == 0

    def test_missing_record(self, client, admin, headers_for):
        assert client.delete("/api/unclaimed/999", headers=headers_for(admin)).status_code == 404

    def test_collector_cannot_close_record_by_editing(self, client, db_session, collector, make_record, headers_for):
        record = make_record(collector=COLLECTOR_NAME)

        resp = client.patch(f"/api/unclaimed/{record.id}", json={"status": "Collected"}, headers=headers_for(collector))

        assert resp.status_code == 400
        db_session.expire_all()
        assert db_session.get(UnclaimedRecord, record.id).status == "Unclaimed"
        assert db_session.query(CollectionRecord).count() == 0

    def test_reopening_cannot_collect_twice(self, client, db_session, specialist, make_record, headers_for):
        record = make_record()
        headers = headers_for(specialist)
        assert client.post(f"/api/unclaimed/{record.id}/collect", headers=headers).status_code == 200

        resp = client.patch(f"/api/unclaimed/{record.id}", json={"status": "Unclaimed"}, headers=headers)
        assert resp.status_code == 400

        assert client.post(f"/api/unclaimed/{record.id}/collect", headers=headers).status_code == 409
        assert db_session.query(CollectionRecord).count() == 1
        assert db_session.query(ReportRecord).count() == 1


class TestDepositRoutes:

    def test_deposit_then_verify(self, client, db_session, cashier, specialist, make_record, headers_for):
        record = make_record()
        client.post(f"/api/unclaimed/{record.id}/collect", headers=headers_for(cashier))

        listing = client.get("/api/deposits", headers=headers_for(cashier)).get_json()
        assert listing["pending_count"] == 1

        resp = client.post(f"/api/deposits/{record.id}", json={
            "deposit_amount": 4500,
            "bank_name": "BDO",
            "deposit_reference": "REF-9",
        }, headers=headers_for(cashier))
        assert resp.status_code == 200
        assert resp.get_json()["item"]["deposited_by"] == "Cora Cashier"

        resp = client.post(f"/api/deposits/{record.id}/verify", headers=headers_for(specialist))
        assert resp.status_code == 200
        item = resp.get_json()["item"]
        assert item["status"] == "Collected"
        assert item["verified_by"] == "Sam Specialist"

    def test_batch(self, client, collector, make_record, headers_for):
        first = make_record(trans_id="A", status="Collected", win_amount=1000, net=1000)
        second = make_record(trans_id="B", status="Collected", win_amount=1000, net=1000)

        resp = client.post("/api/deposits/batch", json={
            "record_ids": [first.id, second.id],
            "deposit_amount": 1990,
            "total_charges": 10,
        }, headers=headers_for(collector))

        assert resp.status_code == 200
        assert [item["net"] for item in resp.get_json()["items"]] == [995, 995]

    def test_batch_needs_ids(self, client, collector, headers_for):
        resp = client.post("/api/deposits/batch", json={"deposit_amount": 1}, headers=headers_for(collector))
        assert resp.status_code == 400

    def test_deposit_rejected(self, client, collector, make_record, headers_for):
        record = make_record(status="Unclaimed")
        resp = client.post(f"/api/deposits/{record.id}", json={"deposit_amount": 10}, headers=headers_for(collector))
        assert resp.status_code == 400


class TestReportRoutes:

    def test_collections_and_reports(self, client, admin, make_record, headers_for):
        first = make_record(trans_id="A", area="North", net=100)
        second = make_record(trans_id="B", area="South", net=250)
        headers = headers_for(admin)
        client.post(f"/api/unclaimed/{first.id}/collect", headers=headers)
        client.post(f"/api/unclaimed/{second.id}/collect", headers=headers)

        collections = client.get("/api/collections", headers=headers).get_json()
        assert collections["count"] == 2

        reports = client.get("/api/reports?area=South", headers=headers).get_json()
        assert reports["count"] == 1
        assert reports["total_amount"] == 250

    def test_export_csv(self, client, general_manager, admin, make_record, headers_for):
        record = make_record(net=4450)
        client.post(f"/api/unclaimed/{record.id}/collect", headers=headers_for(admin))

        resp = client.get("/api/reports/export", headers=headers_for(general_manager))

        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        rows = list(csv.DictReader(io.StringIO(resp.get_data(as_text=True))))
        assert len(rows) == 1
        assert rows[0]["unclaimed_id"] == str(record.id)
        assert float(rows[0]["amount"]) == 4450
