"""Session registry: at most one live connection per role.

Connections are duck-typed; the registry and its collaborators only rely on

    async send(msg_type, payload, *, request_id=None) -> bool
    async close(*, code, reason) -> None
"""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from relay.state import Session
from relay.config.websocket import WS_CLOSE_SUPERSEDED_CODE, WS_CLOSE_SUPERSEDED_REASON

from .roles import Role, parse_role

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]


class SessionRegistry:
    def __init__(self, *, now_fn: TimeFn | None = None) -> None:
        self._now = now_fn or time.monotonic
        self._lock = asyncio.Lock()
        self._sessions: dict[Role, Session] = {}

    async def register(self, role: object, connection: Any) -> Session:
        """Bind ``connection`` to ``role``, superseding any previous occupant.

        Raises InvalidRoleError (before touching any state) for unknown roles.
        The superseded connection, if any, is closed best-effort.
        """
        parsed = parse_role(role)
        session = Session(role=parsed, connection=connection, last_seen=self._now())
        async with self._lock:
            previous = self._sessions.get(parsed)
            self._sessions[parsed] = session

        logger.info("session registered role=%s", parsed.value)
        if previous is not None and previous.connection is not connection:
            logger.info("session superseded role=%s", parsed.value)
            with contextlib.suppress(Exception):
                await previous.connection.close(code=WS_CLOSE_SUPERSEDED_CODE, reason=WS_CLOSE_SUPERSEDED_REASON)
        return session

    async def unregister(self, connection: Any) -> list[Role]:
        """Drop every role still bound to ``connection``.

        Roles that have since been re-registered by another connection are left alone.
        """
        async with self._lock:
            removed = [role for role, s in self._sessions.items() if s.connection is connection]
            for role in removed:
                del self._sessions[role]
        for role in removed:
            logger.info("session unregistered role=%s", role.value)
        return removed

    def get(self, role: Role) -> Any | None:
        session = self._sessions.get(role)
        return session.connection if session is not None else None

    def session(self, role: Role) -> Session | None:
        return self._sessions.get(role)

    def sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def roles_of(self, connection: Any) -> list[Role]:
        return [role for role, s in self._sessions.items() if s.connection is connection]

    def mark_pinged(self, connection: Any) -> None:
        for session in self._sessions.values():
            if session.connection is connection:
                session.awaiting_pong = True

    def mark_alive(self, connection: Any) -> bool:
        """Record a heartbeat acknowledgement. Returns False for unregistered connections."""
        found = False
        now = self._now()
        for session in self._sessions.values():
            if session.connection is connection:
                session.awaiting_pong = False
                session.last_seen = now
                found = True
        return found


__all__ = ["SessionRegistry"]
