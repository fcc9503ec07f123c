"""
External feed client tests.

requests.request is replaced by the FakeFeeds router from conftest, so no
network access happens.
"""

import pytest
import requests

from wintrack.services.feed_service import (
    ExternalFeedClient,
    FeedConfig,
    FeedConfigurationError,
    FeedError,
)

from conftest import FEED_URL_1, FEED_URL_2


ROW = {"transCode": "T1", "tellerName": "Ana", "drawTime": "5PM 2025-12-01", "winAmount": "1,000"}


class TestFeedConfig:

    def test_blank_endpoints_are_dropped_in_order(self):
        config = FeedConfig(endpoints=("", FEED_URL_2, "   ", FEED_URL_1))
        assert config.endpoints == (FEED_URL_2, FEED_URL_1)

    def test_at_most_ten_endpoints(self):
        urls = tuple(f"https://feeds.test/{i}" for i in range(12))
        assert FeedConfig(endpoints=urls).endpoints == urls[:10]

    def test_from_app_config(self):
        config = FeedConfig.from_app_config({
            "EXTERNAL_FEED_URLS": [FEED_URL_1, ""],
            "EXTERNAL_FEED_TIMEOUT_SECONDS": 3,
        })
        assert config.endpoints == (FEED_URL_1,)
        assert config.timeout_seconds == 3.0


class TestFetchAll:

    def test_failures_are_isolated_per_endpoint(self, fake_feeds, feed_client):
        fake_feeds.fail(FEED_URL_1, requests.ConnectionError("connection refused"))
        fake_feeds.rows(FEED_URL_2, [ROW])

        first, second = feed_client.fetch_all()

        assert (first.source, first.ok, first.rows) == (1, False, [])
        assert "connection refused" in first.error
        assert (second.source, second.ok, second.rows) == (2, True, [ROW])

    @pytest.mark.parametrize(
        "status_code,payload,text,error",
        [
            (500, {"success": True, "data": [ROW]}, None, "HTTP error! status: 500"),
            (200, None, "<html>Sign in</html>", "invalid JSON"),
            (200, {"success": False, "error": "Sheet not found"}, None, "Sheet not found"),
            (200, {"success": False}, None, "Feed reported failure"),
            (200, ["not", "an", "envelope"], None, "Feed reported failure"),
        ],
    )
    def test_rejected_responses_degrade_to_empty(self, fake_feeds, feed_client, status_code, payload, text, error):
        fake_feeds.respond(FEED_URL_1, status_code, payload, text)
        fake_feeds.rows(FEED_URL_2, [ROW])

        first, second = feed_client.fetch_all()

        assert first.ok is False
        assert first.rows == []
        assert error in first.error
        assert second.rows == [ROW]

    def test_non_object_rows_are_skipped(self, fake_feeds, feed_client):
        fake_feeds.rows(FEED_URL_1, [ROW, "junk", None])
        fake_feeds.rows(FEED_URL_2, [])

        first, _ = feed_client.fetch_all()
        assert first.rows == [ROW]

    def test_every_request_has_a_timeout(self, fake_feeds, feed_client):
        fake_feeds.rows(FEED_URL_1, [])
        fake_feeds.rows(FEED_URL_2, [])

        feed_client.fetch_all()

        assert len(fake_feeds.calls) == 2
        assert all(kwargs["timeout"] == 5 for _, _, kwargs in fake_feeds.calls)

    def test_no_endpoints_means_no_requests(self, fake_feeds):
        client = ExternalFeedClient(FeedConfig())
        assert client.fetch_all() == []
        assert fake_feeds.calls == []


class TestWrites:

    def test_add_pending_posts_to_first_endpoint_only(self, fake_feeds, feed_client):
        fake_feeds.respond(FEED_URL_1, payload={"success": True, "message": "added"})

        result = feed_client.add_pending({
            "teller_name": "Ana",
            "trans_id": "T9",
            "draw_date": "5PM 2025-12-23",
            "win_amount": 300,
        })

        assert result["message"] == "added"
        [(method, url, kwargs)] = fake_feeds.calls
        assert (method, url) == ("POST", FEED_URL_1)
        assert kwargs["json"]["transCode"] == "T9"
        assert kwargs["json"]["tellerName"] == "Ana"
        assert kwargs["json"]["status"] == "pending"
        assert kwargs["json"]["notification"] == ""

    def test_delete_pending_uses_query_parameters(self, fake_feeds, feed_client):
        fake_feeds.respond(FEED_URL_1, payload={"success": True})

        feed_client.delete_pending("T9")

        [(method, url, kwargs)] = fake_feeds.calls
        assert (method, url) == ("GET", FEED_URL_1)
        assert kwargs["params"] == {"action": "delete", "transCode": "T9"}

    def test_writes_need_an_endpoint(self, fake_feeds):
        client = ExternalFeedClient(FeedConfig(endpoints=("", " ")))
        with pytest.raises(FeedConfigurationError):
            client.add_pending({"trans_id": "T9"})
        with pytest.raises(FeedConfigurationError):
            client.delete_pending("T9")
        assert fake_feeds.calls == []

    def test_application_rejection_raises(self, fake_feeds, feed_client):
        fake_feeds.respond(FEED_URL_1, payload={"success": False, "error": "Row not found"})
        with pytest.raises(FeedError, match="Row not found"):
            feed_client.delete_pending("T404")

    def test_default_write_error_message(self, fake_feeds, feed_client):
        fake_feeds.respond(FEED_URL_1, payload={"success": False})
        with pytest.raises(FeedError, match="Failed to add data to external feed"):
            feed_client.add_pending({"trans_id": "T9"})

    def test_network_failure_raises(self, fake_feeds, feed_client):
        fake_feeds.fail(FEED_URL_1, requests.Timeout("read timed out"))
        with pytest.raises(FeedError):
            feed_client.add_pending({"trans_id": "T9"})


class TestConnection:

    def test_reachable_first_endpoint(self, fake_feeds, feed_client):
        fake_feeds.respond(FEED_URL_1, payload={"success": True, "data": []})
        assert feed_client.test_connection() is True

    def test_http_error(self, fake_feeds, feed_client):
        fake_feeds.respond(FEED_URL_1, 404, text="Not Found")
        assert feed_client.test_connection() is False

    def test_network_error(self, fake_feeds, feed_client):
        fake_feeds.fail(FEED_URL_1, requests.ConnectionError("dns"))
        assert feed_client.test_connection() is False

    def test_not_configured(self, fake_feeds):
        assert ExternalFeedClient(FeedConfig()).test_connection() is False
