from __future__ import annotations

from typing import Any
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from relay.server import build_app
from relay.config.websocket import WS_CLOSE_BUSY_CODE, WS_CLOSE_HEARTBEAT_CODE, WS_CLOSE_SUPERSEDED_CODE
from relay.state.settings import AppSettings, RelaySettings, LimitsSettings, WebSocketSettings


def _settings(
    *,
    capture_timeout_s: float = 5.0,
    heartbeat_interval_s: float = 0.0,
    max_connections: int = 10,
) -> AppSettings:
    return AppSettings(
        limits=LimitsSettings(
            max_concurrent_connections=max_connections,
            ws_message_window_seconds=60.0,
            ws_max_messages_per_window=1000,
        ),
        websocket=WebSocketSettings(idle_timeout_s=0.0, watchdog_tick_s=0.05, max_connection_duration_s=0.0),
        relay=RelaySettings(
            capture_timeout_s=capture_timeout_s,
            heartbeat_interval_s=heartbeat_interval_s,
            answer_max_chars=1,
            capture_max_payload_bytes=1024,
            capture_disconnect_poll_s=0.05,
        ),
    )


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(build_app(_settings())) as c:
        yield c


def _register(ws: Any, role: str) -> dict[str, Any]:
    ws.send_json({"type": "register", "request_id": "reg", "payload": {"role": role}})
    msg = ws.receive_json()
    assert msg["type"] == "registered"
    return msg


def test_health_and_ping(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    body = client.get("/ping").json()
    assert body["status"] == "ok"
    assert body["provider"] == "disconnected"
    assert body["subscriber"] == "disconnected"
    assert body["capture"] == "idle"


def test_capture_without_provider_reports_unavailable(client: TestClient) -> None:
    body = client.post("/capture").json()
    assert body["status"] == "error"
    assert body["code"] == "provider_unavailable"


def test_publish_and_pull_answer(client: TestClient) -> None:
    assert client.get("/answer").json() == {"status": "ok", "value": None, "version": 0}

    body = client.post("/answer", json={"answer": "  Banana "}).json()
    assert body == {"status": "ok", "value": "b", "version": 1}
    assert client.post("/answer", json={"answer": "b"}).json()["version"] == 2

    assert client.get("/last").json() == {"status": "ok", "value": "b", "version": 2}


def test_publish_rejects_empty_answer(client: TestClient) -> None:
    for body in ({"answer": "   "}, {}):
        resp = client.post("/answer", json=body).json()
        assert resp["status"] == "error"
        assert resp["code"] == "invalid_payload"
    assert client.get("/answer").json()["version"] == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"json": {"answer": 5}},
        {"json": ["a"]},
        {"content": b"{not json", "headers": {"content-type": "application/json"}},
    ],
)
def test_publish_malformed_body_is_reported_in_body(client: TestClient, kwargs: dict[str, Any]) -> None:
    resp = client.post("/answer", **kwargs)
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "error"
    assert body["code"] == "invalid_payload"
    assert client.get("/answer").json()["version"] == 0


def test_subscriber_gets_snapshot_on_register_and_pushes(client: TestClient) -> None:
    client.post("/answer", json={"answer": "a"})

    with client.websocket_connect("/ws") as ws:
        ack = _register(ws, "subscriber")
        assert ack["payload"] == {"role": "subscriber", "value": "a", "version": 1}

        client.post("/answer", json={"answer": "d"})
        push = ws.receive_json()
        assert push["type"] == "answer"
        assert push["payload"] == {"value": "d", "version": 2}

        ws.send_json({"type": "answer.get"})
        pulled = ws.receive_json()
        assert pulled["type"] == "answer"
        assert pulled["payload"] == {"value": "d", "version": 2}


def test_capture_round_trip_through_provider(client: TestClient) -> None:
    with client.websocket_connect("/ws") as provider:
        _register(provider, "provider")
        assert client.get("/ping").json()["provider"] == "connected"

        with ThreadPoolExecutor(max_workers=1) as pool:
            future = pool.submit(client.post, "/capture")

            command = provider.receive_json()
            assert command["type"] == "capture"
            request_id = command["request_id"]

            provider.send_json({"type": "capture.result", "request_id": request_id, "payload": {"data": "aGVsbG8="}})
            ack = provider.receive_json()
            assert ack["type"] == "capture.ack"
            assert ack["payload"] == {"resolved": True}

            body = future.result(timeout=5).json()

    assert body == {"status": "ok", "request_id": request_id, "payload": "aGVsbG8="}
    last = client.get("/capture/last").json()
    assert last["payload"] == "aGVsbG8="
    assert last["request_id"] == request_id


def test_capture_timeout_then_late_result() -> None:
    with TestClient(build_app(_settings(capture_timeout_s=0.1))) as client:
        with client.websocket_connect("/ws") as provider:
            _register(provider, "provider")

            body = client.post("/capture").json()
            assert body["status"] == "timeout"

            command = provider.receive_json()
            assert command["type"] == "capture"
            provider.send_json({"type": "capture.result", "request_id": command["request_id"], "payload": {"data": "x"}})
            ack = provider.receive_json()
            assert ack["payload"] == {"resolved": False}

        assert client.get("/ping").json()["capture"] == "idle"
        assert client.get("/last-image").json()["payload"] == "x"


def test_capture_result_requires_provider_role(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "capture.result", "payload": {"data": "x"}})
        msg = ws.receive_json()
        assert msg["type"] == "error"
        assert msg["payload"]["code"] == "not_registered"


def test_capture_result_payload_validation(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        _register(ws, "provider")
        ws.send_json({"type": "capture.result", "payload": {}})
        assert ws.receive_json()["payload"]["details"]["reason_code"] == "missing_data"
        ws.send_json({"type": "capture.result", "payload": {"data": "x" * 2048}})
        assert ws.receive_json()["payload"]["details"]["reason_code"] == "payload_too_large"


def test_invalid_role_and_bad_frames(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "register", "payload": {"role": "requester"}})
        msg = ws.receive_json()
        assert msg["type"] == "error"
        assert msg["payload"]["code"] == "invalid_role"

        ws.send_text("{nope")
        assert ws.receive_json()["payload"]["code"] == "invalid_message"

        ws.send_json({"type": "teleport"})
        assert ws.receive_json()["payload"]["details"]["reason_code"] == "unknown_message_type"

        ws.send_json({"type": "ping", "request_id": "p1"})
        pong = ws.receive_json()
        assert pong["type"] == "pong"
        assert pong["request_id"] == "p1"


def test_new_provider_supersedes_old(client: TestClient) -> None:
    with client.websocket_connect("/ws") as old:
        _register(old, "provider")
        with client.websocket_connect("/ws") as new:
            _register(new, "provider")
            with pytest.raises(WebSocketDisconnect) as exc:
                old.receive_json()
            assert exc.value.code == WS_CLOSE_SUPERSEDED_CODE
    assert client.get("/ping").json()["provider"] == "disconnected"


def test_old_provider_disconnect_does_not_evict_new(client: TestClient) -> None:
    with client.websocket_connect("/ws") as new:
        with client.websocket_connect("/ws") as old:
            _register(old, "provider")
            _register(new, "provider")
            with pytest.raises(WebSocketDisconnect):
                old.receive_json()
        new.send_json({"type": "ping"})
        assert new.receive_json()["type"] == "pong"
        assert client.get("/ping").json()["provider"] == "connected"


def test_heartbeat_evicts_silent_provider() -> None:
    with TestClient(build_app(_settings(heartbeat_interval_s=0.1))) as client:
        with client.websocket_connect("/ws") as provider:
            _register(provider, "provider")
            assert provider.receive_json()["type"] == "ping"
            with pytest.raises(WebSocketDisconnect) as exc:
                provider.receive_json()
            assert exc.value.code == WS_CLOSE_HEARTBEAT_CODE
        assert client.get("/ping").json()["provider"] == "disconnected"


def test_heartbeat_keeps_responsive_provider() -> None:
    with TestClient(build_app(_settings(heartbeat_interval_s=0.3))) as client:
        with client.websocket_connect("/ws") as provider:
            _register(provider, "provider")
            for _ in range(3):
                assert provider.receive_json()["type"] == "ping"
                provider.send_json({"type": "pong"})
            assert client.get("/ping").json()["provider"] == "connected"


def test_connection_over_capacity_is_rejected() -> None:
    with TestClient(build_app(_settings(max_connections=1))) as client:
        with client.websocket_connect("/ws") as first:
            with client.websocket_connect("/ws") as second:
                msg = second.receive_json()
                assert msg["type"] == "error"
                assert msg["payload"]["code"] == "server_at_capacity"
                with pytest.raises(WebSocketDisconnect) as exc:
                    second.receive_json()
                assert exc.value.code == WS_CLOSE_BUSY_CODE
            first.send_json({"type": "ping"})
            assert first.receive_json()["type"] == "pong"
