"""Runtime dependency construction (relay coordinators + admission control)."""

from __future__ import annotations

import logging

from relay.state import RuntimeDeps
from relay.state.settings import AppSettings
from relay.handlers.connections import ConnectionManager
from relay.coordinator import SessionRegistry, LivenessMonitor, AnswerDistributor, CaptureCoordinator

from .settings import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    sessions = SessionRegistry()
    liveness = LivenessMonitor(sessions, interval_s=settings.relay.heartbeat_interval_s)
    captures = CaptureCoordinator(sessions, timeout_s=settings.relay.capture_timeout_s)
    answers = AnswerDistributor(sessions, push_timeout_s=settings.relay.answer_push_timeout_s)
    connections = ConnectionManager(max_connections=settings.limits.max_concurrent_connections)

    liveness.start()
    logger.info(
        "relay ready capture_timeout_s=%.1f heartbeat_interval_s=%.1f max_connections=%s",
        settings.relay.capture_timeout_s,
        liveness.interval_s,
        connections.max_connections,
    )

    return RuntimeDeps(
        connections=connections,
        sessions=sessions,
        liveness=liveness,
        captures=captures,
        answers=answers,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
