"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket

from relay.state import PeerState, RuntimeDeps
from relay.handlers.limits import SlidingWindowRateLimiter
from relay.config.websocket import WS_CLOSE_BUSY_CODE, WS_ERROR_SERVER_AT_CAPACITY

from .peer import PeerConnection
from .errors import reject_connection
from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


def _create_message_limiter(runtime_deps: RuntimeDeps) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
    )


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> bool:
    if not await runtime_deps.connections.admit(ws):
        await reject_connection(
            ws,
            code=WS_ERROR_SERVER_AT_CAPACITY,
            message="Server cannot accept new connections. Please try again later.",
            close_code=WS_CLOSE_BUSY_CODE,
        )
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(ws)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    lifecycle: WebSocketLifecycle | None = None
    admitted = False
    session_id: str | None = None
    try:
        if not await _prepare_connection(ws, runtime_deps):
            return
        admitted = True

        peer = PeerConnection(ws, PeerState())
        settings = runtime_deps.settings.websocket
        lifecycle = WebSocketLifecycle(
            ws,
            is_exempt_fn=lambda: bool(runtime_deps.sessions.roles_of(peer)),
            idle_timeout_s=settings.idle_timeout_s,
            watchdog_tick_s=settings.watchdog_tick_s,
            max_connection_duration_s=settings.max_connection_duration_s,
        )
        lifecycle.start()

        logger.info("WebSocket connection accepted peer=%s. Active: %s", peer.peer_id, runtime_deps.connections.count())
        session_id = await run_message_loop(ws, peer, lifecycle, _create_message_limiter(runtime_deps), runtime_deps)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        if admitted:
            with contextlib.suppress(Exception):
                await runtime_deps.connections.release(ws)
            logger.info(
                "WebSocket connection closed session_id=%s. Active: %s",
                session_id,
                runtime_deps.connections.count(),
            )


__all__ = ["handle_websocket_connection"]
