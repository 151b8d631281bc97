"""Envelope framing and error replies for the relay WebSocket.

Every frame the relay sends, including errors, has the same shape::

    {"type": ..., "session_id": ..., "request_id": ..., "payload": {...}}

Sends are best-effort: a peer that vanished mid-send is reported as
``False`` and left for the message loop to clean up.
"""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from relay.errors import RelayError
from relay.config.websocket import (
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_KEY_PAYLOAD,
    WS_KEY_REQUEST_ID,
    WS_KEY_SESSION_ID,
    WS_UNKNOWN_REQUEST_ID,
    WS_UNKNOWN_SESSION_ID,
)

logger = logging.getLogger(__name__)


def encode_envelope(
    msg_type: str,
    payload: dict[str, Any] | None = None,
    *,
    session_id: str | None = None,
    request_id: str | None = None,
) -> str:
    frame = {
        WS_KEY_TYPE: msg_type,
        WS_KEY_SESSION_ID: session_id or WS_UNKNOWN_SESSION_ID,
        WS_KEY_REQUEST_ID: request_id or WS_UNKNOWN_REQUEST_ID,
        WS_KEY_PAYLOAD: payload or {},
    }
    return orjson.dumps(frame).decode("utf-8")


def error_payload(
    code: str,
    message: str,
    *,
    reason_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    extra = dict(details or {})
    if reason_code:
        extra.setdefault("reason_code", reason_code)
    return {"code": code, "message": message, "details": extra}


async def send_envelope(
    ws: WebSocket,
    msg_type: str,
    payload: dict[str, Any] | None = None,
    *,
    session_id: str | None = None,
    request_id: str | None = None,
) -> bool:
    text = encode_envelope(msg_type, payload, session_id=session_id, request_id=request_id)
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("send failed type=%s", msg_type, exc_info=True)
        return False
    return True


async def send_error(
    ws: WebSocket,
    code: str,
    message: str,
    *,
    session_id: str | None = None,
    request_id: str | None = None,
    reason_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> bool:
    payload = error_payload(code, message, reason_code=reason_code, details=details)
    return await send_envelope(ws, WS_MSG_ERROR, payload, session_id=session_id, request_id=request_id)


async def send_relay_error(
    ws: WebSocket,
    exc: RelayError,
    *,
    session_id: str | None = None,
    request_id: str | None = None,
) -> bool:
    return await send_error(
        ws,
        exc.code,
        exc.message,
        session_id=session_id,
        request_id=request_id,
        reason_code=exc.code,
    )


async def reject_connection(ws: WebSocket, code: str, message: str, *, close_code: int) -> None:
    """Accept only to explain the refusal, then close with ``close_code``."""
    try:
        await ws.accept()
    except Exception:
        logger.debug("reject: accept failed", exc_info=True)
        return
    await send_error(ws, code, message, reason_code=code)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        logger.debug("reject: close failed", exc_info=True)


__all__ = [
    "encode_envelope",
    "error_payload",
    "reject_connection",
    "send_envelope",
    "send_error",
    "send_relay_error",
]
