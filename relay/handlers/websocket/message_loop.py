"""WebSocket message loop for relay peers (/ws)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any, Literal

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from relay.state import PeerState, RuntimeDeps
from relay.handlers.limits import SlidingWindowRateLimiter
from relay.config.websocket import (
    WS_MSG_END,
    WS_MSG_PING,
    WS_MSG_PONG,
    WS_MSG_SESSION_END,
    WS_UNKNOWN_SESSION_ID,
    WS_ERROR_INVALID_MESSAGE,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .dispatch import HANDLERS
from .peer import PeerConnection
from .lifecycle import WebSocketLifecycle
from .parser import parse_client_message
from .errors import send_error
from .limits import consume_limiter

logger = logging.getLogger(__name__)


async def _recv_text_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    # Supersede and heartbeat eviction close the socket from other tasks.
    if ws.application_state == WebSocketState.DISCONNECTED:
        return None, True
    try:
        message = await asyncio.wait_for(ws.receive_text(), timeout=lifecycle.tick_s * 2)
        return message, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def _handle_control_message(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    peer: PeerConnection,
    msg_type: str,
    *,
    request_id: str,
) -> Literal["none", "continue", "close"]:
    if msg_type == WS_MSG_PING:
        await peer.send(WS_MSG_PONG, {}, request_id=request_id)
        return "continue"
    if msg_type == WS_MSG_PONG:
        runtime_deps.sessions.mark_alive(peer)
        return "continue"
    if msg_type == WS_MSG_END:
        await peer.send(WS_MSG_SESSION_END, {}, request_id=request_id)
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        return "close"
    return "none"


async def _parse_or_send_error(ws: WebSocket, raw: str, state: PeerState) -> dict[str, Any] | None:
    try:
        return parse_client_message(raw)
    except ValueError as exc:
        await send_error(
            ws,
            session_id=state.session_id,
            request_id=state.request_id,
            code=WS_ERROR_INVALID_MESSAGE,
            message=str(exc),
            reason_code="invalid_message",
        )
        return None


async def run_message_loop(
    ws: WebSocket,
    peer: PeerConnection,
    lifecycle: WebSocketLifecycle,
    message_limiter: SlidingWindowRateLimiter,
    runtime_deps: RuntimeDeps,
) -> str | None:
    """Serve one peer until it disconnects, asks to end, or the watchdog closes it.

    Returns the peer's session id (None if it never sent one). The peer is
    always unregistered on the way out; the registry ignores the call if a
    newer connection has taken over its role.
    """
    state = peer.state

    try:
        while True:
            raw, should_exit = await _recv_text_with_watchdog(ws, lifecycle)
            if should_exit:
                break
            if raw is None:
                continue

            lifecycle.touch()

            msg = await _parse_or_send_error(ws, raw, state)
            if msg is None:
                continue

            msg_type = msg["type"]
            session_id = msg["session_id"]
            request_id = msg["request_id"]
            payload = msg["payload"]

            if session_id != WS_UNKNOWN_SESSION_ID:
                state.session_id = session_id
            state.request_id = request_id

            admitted = await consume_limiter(
                ws, message_limiter, msg_type, session_id=state.session_id, request_id=request_id
            )
            if not admitted:
                continue

            control = await _handle_control_message(ws, runtime_deps, peer, msg_type, request_id=request_id)
            if control == "close":
                break
            if control == "continue":
                continue

            handler = HANDLERS.get(msg_type)
            if handler is not None:
                await handler(ws, runtime_deps, state, peer, state.session_id, request_id, payload)
                continue

            await send_error(
                ws,
                session_id=state.session_id,
                request_id=request_id,
                code=WS_ERROR_INVALID_MESSAGE,
                message=f"message type '{msg_type}' is not supported",
                reason_code="unknown_message_type",
            )
    except WebSocketDisconnect:
        pass
    finally:
        with contextlib.suppress(Exception):
            await runtime_deps.sessions.unregister(peer)

    return state.session_id if state.session_id != WS_UNKNOWN_SESSION_ID else None


__all__ = ["run_message_loop"]
