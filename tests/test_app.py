"""WebSocket transport and health check."""

import logging
import json

from fastapi.testclient import TestClient

from unoroom.config import Settings
from unoroom.server.app import create_app
from unoroom.server.logs import JsonFormatter


def _client() -> TestClient:
    return TestClient(create_app(Settings(draw_debounce_ms=0)))


def test_health() -> None:
    response = _client().get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["rooms"] == 0


def test_create_join_and_start_over_websocket() -> None:
    client = _client()
    with client.websocket_connect("/ws") as host:
        host.send_json({"type": "create_room", "data": {"player_name": "Host"}})
        created = host.receive_json()
        assert created["event"] == "room_created"
        room_id = created["data"]["room_id"]
        assert host.receive_json()["event"] == "sync_state"

        with client.websocket_connect("/ws") as guest:
            guest.send_json({"type": "join_room", "data": {"room_id": room_id, "player_name": "Guest"}})
            assert guest.receive_json()["event"] == "sync_state"
            joined = guest.receive_json()
            assert joined["event"] == "joined_success"
            assert host.receive_json()["event"] == "sync_state"

            host.send_json({"type": "start_game"})
            started = host.receive_json()
            assert started["event"] == "game_started"
            assert started["data"]["status"] == "playing"
            assert guest.receive_json()["event"] == "game_started"


def test_bad_frame_gets_error() -> None:
    with _client().websocket_connect("/ws") as ws:
        ws.send_text("not json")
        reply = ws.receive_json()
        assert reply["event"] == "error"
        assert reply["data"]["kind"] == "validation"


def test_json_formatter() -> None:
    record = logging.LogRecord("unoroom.server", logging.INFO, __file__, 1, "Room created", None, None)
    record.meta = {"room_id": "ABC123"}
    entry = json.loads(JsonFormatter().format(record))
    assert entry["level"] == "INFO"
    assert entry["message"] == "Room created"
    assert entry["context"] == "unoroom.server"
    assert entry["meta"] == {"room_id": "ABC123"}
