"""HTTP handlers for capture requests."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any

from fastapi import Request

from relay.errors import RelayError
from relay.coordinator import Role, PendingCapture
from relay.state import RuntimeDeps, CaptureOutcome

from .responses import ok_body, relay_error_body

logger = logging.getLogger(__name__)


async def _wait_or_abandon(request: Request, pending: PendingCapture, poll_s: float) -> CaptureOutcome | None:
    """Wait for the outcome, abandoning the capture if the requester goes away."""
    waiter = asyncio.ensure_future(pending.wait())
    try:
        while True:
            done, _ = await asyncio.wait({waiter}, timeout=poll_s)
            if done:
                return waiter.result()
            if await request.is_disconnected():
                logger.info("requester disconnected; abandoning capture request_id=%s", pending.request_id)
                pending.abandon()
                with contextlib.suppress(asyncio.CancelledError):
                    await waiter
                return None
    finally:
        if not waiter.done():
            waiter.cancel()


async def handle_capture(request: Request, runtime_deps: RuntimeDeps) -> dict[str, Any]:
    try:
        pending = await runtime_deps.captures.start()
    except RelayError as exc:
        logger.info("capture rejected: %s", exc.code)
        return relay_error_body(exc)

    outcome = await _wait_or_abandon(request, pending, runtime_deps.settings.relay.capture_disconnect_poll_s)
    if outcome is None:
        # Nobody is listening; the body is never read.
        return {"status": "cancelled", "request_id": pending.request_id}
    if outcome.ok:
        return ok_body(request_id=outcome.request_id, payload=outcome.payload)
    return {"status": "timeout", "request_id": outcome.request_id}


def last_capture_body(runtime_deps: RuntimeDeps) -> dict[str, Any]:
    result = runtime_deps.captures.last_result
    if result is None:
        return ok_body(request_id=None, payload=None, received_at=None)
    return ok_body(request_id=result.request_id, payload=result.payload, received_at=result.received_at)


def ping_body(runtime_deps: RuntimeDeps) -> dict[str, Any]:
    sessions = runtime_deps.sessions
    return ok_body(
        provider="connected" if sessions.get(Role.PROVIDER) is not None else "disconnected",
        subscriber="connected" if sessions.get(Role.SUBSCRIBER) is not None else "disconnected",
        capture=runtime_deps.captures.state.value,
    )


__all__ = ["handle_capture", "last_capture_body", "ping_body"]
