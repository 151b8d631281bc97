"""Per-connection WebSocket state."""

from __future__ import annotations

from typing import TYPE_CHECKING
from dataclasses import dataclass

if TYPE_CHECKING:
    from relay.coordinator.roles import Role


@dataclass(slots=True)
class PeerState:
    session_id: str = "unknown"
    request_id: str = "unknown"
    role: Role | None = None


__all__ = ["PeerState"]
