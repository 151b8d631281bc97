"""Client message parsing/validation for the relay envelope."""

from __future__ import annotations

from typing import Any

import orjson

from relay.config.websocket import (
    WS_KEY_TYPE,
    WS_KEY_PAYLOAD,
    WS_KEY_REQUEST_ID,
    WS_KEY_SESSION_ID,
    WS_UNKNOWN_REQUEST_ID,
    WS_UNKNOWN_SESSION_ID,
)


def _optional_id(msg: dict[str, Any], key: str, default: str) -> str:
    value = msg.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"message '{key}' must be a string")
    return value.strip() or default


def parse_client_message(raw: str) -> dict[str, Any]:
    """Validate one inbound frame.

    Only ``type`` is mandatory. Peers such as the capture provider rarely
    track sessions, so ``session_id`` and ``request_id`` default to "unknown".
    """
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise ValueError("message missing non-empty 'type'")

    payload = msg.get(WS_KEY_PAYLOAD, {})
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValueError("message 'payload' must be an object")

    return {
        WS_KEY_TYPE: msg_type.strip(),
        WS_KEY_SESSION_ID: _optional_id(msg, WS_KEY_SESSION_ID, WS_UNKNOWN_SESSION_ID),
        WS_KEY_REQUEST_ID: _optional_id(msg, WS_KEY_REQUEST_ID, WS_UNKNOWN_REQUEST_ID),
        WS_KEY_PAYLOAD: payload,
    }


__all__ = ["parse_client_message"]
