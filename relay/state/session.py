"""Registered peer sessions (dataclasses only)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from dataclasses import dataclass

if TYPE_CHECKING:
    from relay.coordinator.roles import Role


@dataclass(slots=True)
class Session:
    role: Role
    connection: Any
    last_seen: float
    # Set when a heartbeat ping is sent, cleared when the pong arrives.
    awaiting_pong: bool = False

    @property
    def alive(self) -> bool:
        return not self.awaiting_pong


__all__ = ["Session"]
