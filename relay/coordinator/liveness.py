"""Periodic heartbeat over registered sessions."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from relay.state import Session
from relay.config.websocket import WS_MSG_PING, WS_CLOSE_HEARTBEAT_CODE, WS_CLOSE_HEARTBEAT_REASON

from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class LivenessMonitor:
    """Evicts sessions that miss a heartbeat.

    Each sweep evicts every session still awaiting the previous ping and
    pings the rest. A dead peer therefore survives at most one extra interval.
    """

    def __init__(self, registry: SessionRegistry, *, interval_s: float) -> None:
        self._registry = registry
        self._interval_s = float(interval_s)
        self._task: asyncio.Task | None = None

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def start(self) -> asyncio.Task | None:
        if self._interval_s <= 0:
            logger.info("liveness monitor disabled")
            return None
        if self._task is None:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await self._task
        self._task = None

    async def sweep(self) -> list[Session]:
        evicted: list[Session] = []
        pinged: set[int] = set()
        for session in self._registry.sessions():
            conn = session.connection
            if id(conn) in pinged:
                continue
            if session.awaiting_pong:
                if not await self._registry.unregister(conn):
                    continue
                evicted.append(session)
                logger.warning("heartbeat missed; evicting role=%s", session.role.value)
                with contextlib.suppress(Exception):
                    await conn.close(code=WS_CLOSE_HEARTBEAT_CODE, reason=WS_CLOSE_HEARTBEAT_REASON)
                continue
            pinged.add(id(conn))
            self._registry.mark_pinged(conn)
            if not await conn.send(WS_MSG_PING, {}):
                logger.debug("heartbeat ping not delivered role=%s", session.role.value)
        return evicted

    async def _run(self) -> None:
        try:
            while True:
                await asyncio.sleep(self._interval_s)
                try:
                    await self.sweep()
                except Exception:
                    logger.exception("liveness sweep failed")
        except asyncio.CancelledError:
            return


__all__ = ["LivenessMonitor"]
