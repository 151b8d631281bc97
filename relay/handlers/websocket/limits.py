"""Rate-limit replies for WebSocket peers."""

from __future__ import annotations

import math

from fastapi import WebSocket

from relay.errors import RateLimitError
from relay.config.websocket import WS_ERROR_RATE_LIMITED
from relay.handlers.limits import SlidingWindowRateLimiter

from .errors import send_error


async def consume_limiter(
    ws: WebSocket,
    limiter: SlidingWindowRateLimiter,
    msg_type: str,
    *,
    session_id: str,
    request_id: str,
) -> bool:
    """Charge ``msg_type`` to the peer's budget; on overflow reply with rate_limited and return False."""
    try:
        limiter.consume(msg_type)
    except RateLimitError as exc:
        retry_in_s = max(1, math.ceil(exc.retry_in))
        window_s = int(exc.window_seconds)
        await send_error(
            ws,
            WS_ERROR_RATE_LIMITED,
            f"at most {exc.limit} messages per {window_s} seconds; retry in {retry_in_s} seconds",
            session_id=session_id,
            request_id=request_id,
            reason_code="message_rate_limited",
            details={"retry_in": retry_in_s, "limit": exc.limit, "window_seconds": window_s},
        )
        return False
    return True


__all__ = ["consume_limiter"]
