"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass

from relay.config.relay import DEFAULT_ANSWER_PUSH_TIMEOUT_S


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class RelaySettings:
    capture_timeout_s: float
    heartbeat_interval_s: float
    answer_max_chars: int
    capture_max_payload_bytes: int
    capture_disconnect_poll_s: float
    answer_push_timeout_s: float = DEFAULT_ANSWER_PUSH_TIMEOUT_S


@dataclass(frozen=True, slots=True)
class AppSettings:
    limits: LimitsSettings
    websocket: WebSocketSettings
    relay: RelaySettings


__all__ = [
    "AppSettings",
    "LimitsSettings",
    "RelaySettings",
    "WebSocketSettings",
]
