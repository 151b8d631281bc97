"""Dispatch handlers for relay envelope messages."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from relay.state import PeerState, RuntimeDeps
from relay.coordinator import Role
from relay.errors import InvalidRoleError
from relay.config.websocket import (
    WS_MSG_ANSWER,
    WS_MSG_REGISTER,
    WS_MSG_ANSWER_GET,
    WS_MSG_REGISTERED,
    WS_MSG_CAPTURE_ACK,
    WS_MSG_CAPTURE_RESULT,
    WS_UNKNOWN_REQUEST_ID,
    WS_ERROR_INVALID_PAYLOAD,
    WS_ERROR_NOT_REGISTERED,
)

from .peer import PeerConnection
from .errors import send_error, send_relay_error

logger = logging.getLogger(__name__)

HandlerFn = Callable[
    [WebSocket, RuntimeDeps, PeerState, PeerConnection, str, str, dict[str, Any]],
    Awaitable[None],
]


async def _handle_register(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: PeerState,
    peer: PeerConnection,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> None:
    try:
        session = await runtime_deps.sessions.register(payload.get("role"), peer)
    except InvalidRoleError as exc:
        await send_relay_error(ws, exc, session_id=session_id, request_id=request_id)
        return

    state.role = session.role
    ack: dict[str, Any] = {"role": session.role.value}
    if session.role is Role.SUBSCRIBER:
        # Snapshot lets a reconnecting subscriber reconcile without a separate pull.
        ack.update(runtime_deps.answers.current().as_payload())
    await peer.send(WS_MSG_REGISTERED, ack, request_id=request_id)


async def _handle_capture_result(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: PeerState,
    peer: PeerConnection,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> None:
    if Role.PROVIDER not in runtime_deps.sessions.roles_of(peer):
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_NOT_REGISTERED,
            message="register as provider before delivering capture results",
            reason_code="not_provider",
        )
        return

    data = payload.get("data")
    if not isinstance(data, str) or not data:
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_INVALID_PAYLOAD,
            message="payload.data (non-empty string) is required",
            reason_code="missing_data",
        )
        return

    max_bytes = runtime_deps.settings.relay.capture_max_payload_bytes
    if max_bytes and len(data) > max_bytes:
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            code=WS_ERROR_INVALID_PAYLOAD,
            message="capture payload exceeds the maximum size",
            reason_code="payload_too_large",
            details={"max_bytes": max_bytes, "received_bytes": len(data)},
        )
        return

    logger.info("capture result received (%d KB)", round(len(data) / 1024))
    tag = request_id if request_id != WS_UNKNOWN_REQUEST_ID else None
    resolved = runtime_deps.captures.deliver(data, request_id=tag)
    await peer.send(WS_MSG_CAPTURE_ACK, {"resolved": resolved}, request_id=request_id)


async def _handle_answer_get(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: PeerState,
    peer: PeerConnection,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> None:
    await peer.send(WS_MSG_ANSWER, runtime_deps.answers.current().as_payload(), request_id=request_id)


HANDLERS: dict[str, HandlerFn] = {
    WS_MSG_REGISTER: _handle_register,
    WS_MSG_CAPTURE_RESULT: _handle_capture_result,
    WS_MSG_ANSWER_GET: _handle_answer_get,
}

__all__ = ["HANDLERS", "HandlerFn"]
