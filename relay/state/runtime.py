"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from dataclasses import dataclass

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from relay.state.settings import AppSettings
    from relay.coordinator.registry import SessionRegistry
    from relay.coordinator.liveness import LivenessMonitor
    from relay.handlers.connections import ConnectionManager
    from relay.coordinator.answers import AnswerDistributor
    from relay.coordinator.capture import CaptureCoordinator


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    sessions: SessionRegistry
    liveness: LivenessMonitor
    captures: CaptureCoordinator
    answers: AnswerDistributor
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.liveness.stop()
            self.captures.close()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
