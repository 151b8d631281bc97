"""WebSocket connection admission control."""

from __future__ import annotations

import asyncio
from typing import Any


class ConnectionManager:
    """Caps the number of concurrently admitted WebSocket peers."""

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: set[int] = set()

    @property
    def max_connections(self) -> int:
        return self._max

    async def admit(self, ws: Any) -> bool:
        """Reserve a slot for ``ws`` (before the handshake is accepted)."""
        async with self._lock:
            if len(self._active) >= self._max:
                return False
            self._active.add(id(ws))
            return True

    async def release(self, ws: Any) -> None:
        async with self._lock:
            self._active.discard(id(ws))

    def count(self) -> int:
        return len(self._active)


__all__ = ["ConnectionManager"]
