import time

import pytest

from netline import db
from netline.live.poller import REQUEST_MESSAGE, PresencePoller
from netline.live.presence import PresenceBoard, format_speed, normalize_connection, normalize_snapshot
from netline.live.pubsub import LiveFeedNotConfigured, PubNubTransport
from netline.live.service import sync_board
from netline.models import set_variable


RAW = {
    "complete_name": "Marie Client",
    "connexion_number": "509-1",
    "uptime": "1h2m",
    "ip": "10.0.0.5",
    "mac_address": "AA:BB:CC:DD:EE:FF",
    "schedule_data": {
        "activation_date": "2024-08-15T15:00:00Z",
        "expiration_date": {"$date": "2024-08-16T15:00:00Z"},
        "used_data": 12.5,
    },
    "bandwitch": {"rx": 2500000, "tx": 1500},
}


class TestPresence:
    def test_format_speed(self):
        assert format_speed(2500000) == "2.50 Mbps"
        assert format_speed(1500) == "1.50 Kbps"
        assert format_speed(12) == "12.00 bps"
        assert format_speed(None) == "0.00 bps"
        assert format_speed("junk") == "0.00 bps"

    def test_normalize_connection(self):
        conn = normalize_connection(RAW, "Etc/GMT+5")
        assert conn.name == "Marie Client"
        assert conn.activation_date == "2024-08-15T10:00:00"
        assert conn.expiration_date == "2024-08-16T10:00:00"
        assert conn.data_used == "12.50"
        assert conn.download == "2.50 Mbps"
        assert conn.upload == "1.50 Kbps"
        assert conn.to_dict()["dataLimit"] == "Unlimited"

    def test_missing_fields(self):
        conn = normalize_connection({}, "Etc/GMT+5")
        assert conn.ip_address == "N/A"
        assert conn.activation_date == "N/A"
        assert conn.data_used == "0.00"

    def test_snapshot_skips_junk(self):
        assert normalize_snapshot(None, "Etc/GMT+5") == ()
        assert len(normalize_snapshot([RAW, "junk", None], "Etc/GMT+5")) == 1

    def test_board_replaces_whole_snapshot(self):
        board = PresenceBoard()
        assert board.snapshot == () and board.updated_at is None
        board.update(normalize_snapshot([RAW, RAW], "Etc/GMT+5"))
        assert len(board.snapshot) == 2
        board.update([])
        assert board.snapshot == ()
        assert board.updated_at is not None
        board.clear()
        assert board.updated_at is None


class TestPoller:
    def test_request_once(self):
        sent = []
        poller = PresencePoller(sent.append, interval=1)
        assert poller.request_once()
        assert sent == [REQUEST_MESSAGE]
        assert poller.requests_sent == 1

    def test_publish_failure_is_reported(self):
        errors = []

        def failing(message):
            raise ConnectionError("offline")

        poller = PresencePoller(failing, interval=1, on_error=errors.append)
        assert not poller.request_once()
        assert poller.requests_sent == 0
        assert isinstance(errors[0], ConnectionError)

    def test_start_and_stop(self):
        sent = []
        poller = PresencePoller(sent.append, interval=0.01).start()
        deadline = time.monotonic() + 2
        while len(sent) < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
        poller.stop(timeout=1)
        assert not poller.running
        assert len(sent) >= 3
        count = len(sent)
        time.sleep(0.05)
        assert len(sent) == count

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            PresencePoller(lambda m: None, interval=0)


class TestTransport:
    def test_requires_keys(self, app):
        with pytest.raises(LiveFeedNotConfigured):
            PubNubTransport.from_config(app.config)


class TestLiveViews:
    def test_sync_board(self, app):
        set_variable(app.config["LIVE_SNAPSHOT_VARIABLE"], [RAW])
        db.session.commit()
        board = PresenceBoard()
        assert [c.name for c in sync_board(board)] == ["Marie Client"]

    def test_snapshot_json(self, auth_client, app):
        set_variable(app.config["LIVE_SNAPSHOT_VARIABLE"], [RAW])
        db.session.commit()
        body = auth_client.get("/live-connected/snapshot.json").get_json()
        assert body["count"] == 1
        assert body["connections"][0]["connectionNumber"] == "509-1"

    def test_empty_snapshot(self, auth_client):
        body = auth_client.get("/live-connected/snapshot.json").get_json()
        assert body == {"count": 0, "connections": []}

    def test_page(self, auth_client, app):
        set_variable(app.config["LIVE_SNAPSHOT_VARIABLE"], [RAW])
        db.session.commit()
        resp = auth_client.get("/live-connected/")
        assert resp.status_code == 200
        assert b"AA:BB:CC:DD:EE:FF" in resp.data
