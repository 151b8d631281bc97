"""Environment parsing for runtime settings.

Names and defaults live in `relay/config/*`; this module resolves them once
into the frozen dataclasses of `relay/state/settings.py`.
"""

from __future__ import annotations

import os

from relay.state.settings import AppSettings, RelaySettings, LimitsSettings, WebSocketSettings
from relay.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)
from relay.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)
from relay.config.relay import (
    ENV_ANSWER_MAX_CHARS,
    ENV_CAPTURE_TIMEOUT_S,
    ENV_HEARTBEAT_INTERVAL_S,
    DEFAULT_ANSWER_MAX_CHARS,
    ENV_ANSWER_PUSH_TIMEOUT_S,
    DEFAULT_CAPTURE_TIMEOUT_S,
    DEFAULT_HEARTBEAT_INTERVAL_S,
    ENV_CAPTURE_MAX_PAYLOAD_BYTES,
    ENV_CAPTURE_DISCONNECT_POLL_S,
    DEFAULT_ANSWER_PUSH_TIMEOUT_S,
    DEFAULT_CAPTURE_MAX_PAYLOAD_BYTES,
    DEFAULT_CAPTURE_DISCONNECT_POLL_S,
)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _load_limits_settings() -> LimitsSettings:
    max_connections = _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)
    msg_window = _float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS)
    if msg_window <= 0:
        msg_window = DEFAULT_WS_MESSAGE_WINDOW_SECONDS
    msg_limit = _int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW)

    return LimitsSettings(
        max_concurrent_connections=max(1, max_connections),
        ws_message_window_seconds=msg_window,
        ws_max_messages_per_window=msg_limit,
    )


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        idle_timeout_s=_float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S),
        watchdog_tick_s=max(0.01, _float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S)),
        max_connection_duration_s=_float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S),
    )


def _load_relay_settings() -> RelaySettings:
    capture_timeout = _float_env(ENV_CAPTURE_TIMEOUT_S, DEFAULT_CAPTURE_TIMEOUT_S)
    if capture_timeout <= 0:
        capture_timeout = DEFAULT_CAPTURE_TIMEOUT_S
    poll = _float_env(ENV_CAPTURE_DISCONNECT_POLL_S, DEFAULT_CAPTURE_DISCONNECT_POLL_S)
    push_timeout = _float_env(ENV_ANSWER_PUSH_TIMEOUT_S, DEFAULT_ANSWER_PUSH_TIMEOUT_S)

    return RelaySettings(
        capture_timeout_s=capture_timeout,
        heartbeat_interval_s=_float_env(ENV_HEARTBEAT_INTERVAL_S, DEFAULT_HEARTBEAT_INTERVAL_S),
        answer_max_chars=max(0, _int_env(ENV_ANSWER_MAX_CHARS, DEFAULT_ANSWER_MAX_CHARS)),
        capture_max_payload_bytes=max(0, _int_env(ENV_CAPTURE_MAX_PAYLOAD_BYTES, DEFAULT_CAPTURE_MAX_PAYLOAD_BYTES)),
        capture_disconnect_poll_s=poll if poll > 0 else DEFAULT_CAPTURE_DISCONNECT_POLL_S,
        answer_push_timeout_s=push_timeout if push_timeout > 0 else DEFAULT_ANSWER_PUSH_TIMEOUT_S,
    )


def load_settings() -> AppSettings:
    return AppSettings(
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        relay=_load_relay_settings(),
    )


__all__ = ["load_settings"]
