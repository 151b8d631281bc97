"""Connection handle handed to the session registry for a WebSocket peer."""

from __future__ import annotations

import uuid
import logging
import contextlib
from typing import Any

from fastapi import WebSocket

from relay.state import PeerState

from .errors import send_envelope

logger = logging.getLogger(__name__)


class PeerConnection:
    """Wraps a WebSocket so coordinators can address a peer without knowing the transport.

    Outbound messages are framed in the relay envelope using the peer's
    current session id. Sends never raise; they report success as a bool.
    """

    def __init__(self, ws: WebSocket, state: PeerState) -> None:
        self._ws = ws
        self._state = state
        self.peer_id = uuid.uuid4().hex[:12]

    @property
    def state(self) -> PeerState:
        return self._state

    async def send(self, msg_type: str, payload: dict[str, Any], *, request_id: str | None = None) -> bool:
        return await send_envelope(
            self._ws,
            msg_type,
            payload,
            session_id=self._state.session_id,
            request_id=request_id or self._state.request_id,
        )

    async def close(self, *, code: int, reason: str = "") -> None:
        logger.debug("closing peer %s code=%s", self.peer_id, code)
        with contextlib.suppress(Exception):
            await self._ws.close(code=code, reason=reason)

    def __repr__(self) -> str:
        return f"PeerConnection(peer_id={self.peer_id!r}, session_id={self._state.session_id!r})"


__all__ = ["PeerConnection"]
