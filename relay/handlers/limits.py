"""Per-connection budget for inbound peer messages."""

from __future__ import annotations

import time
import collections
from collections.abc import Callable, Iterable

from relay.errors import RateLimitError
from relay.config.websocket import WS_MSG_END, WS_MSG_PING, WS_MSG_PONG

TimeFn = Callable[[], float]

# Heartbeats and session teardown must never be throttled.
EXEMPT_MESSAGE_TYPES = frozenset({WS_MSG_PING, WS_MSG_PONG, WS_MSG_END})


class SlidingWindowRateLimiter:
    """Admit at most ``limit`` counted messages in any ``window_seconds`` span.

    Message types in ``exempt`` pass without spending budget. A non-positive
    limit or window turns counting off entirely.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        exempt: Iterable[str] = EXEMPT_MESSAGE_TYPES,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self.exempt = frozenset(exempt)
        self._now = now_fn or time.monotonic
        self._stamps: collections.deque[float] = collections.deque()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def counts(self, msg_type: str | None) -> bool:
        return self.enabled and msg_type not in self.exempt

    def consume(self, msg_type: str | None = None) -> None:
        """Spend one unit for ``msg_type``; raises RateLimitError when the window is full."""
        if not self.counts(msg_type):
            return

        now = self._now()
        horizon = now - self.window_seconds
        stamps = self._stamps
        while stamps and stamps[0] <= horizon:
            stamps.popleft()

        if len(stamps) < self.limit:
            stamps.append(now)
            return
        raise RateLimitError(
            retry_in=max(0.0, stamps[0] - horizon),
            limit=self.limit,
            window_seconds=self.window_seconds,
        )


__all__ = ["EXEMPT_MESSAGE_TYPES", "RateLimitError", "SlidingWindowRateLimiter"]
