"""Configuration module exports (env names, defaults and protocol constants)."""

from .relay import DEFAULT_CAPTURE_TIMEOUT_S, DEFAULT_HEARTBEAT_INTERVAL_S
from .limits import DEFAULT_MAX_CONCURRENT_CONNECTIONS

__all__ = [
    "DEFAULT_CAPTURE_TIMEOUT_S",
    "DEFAULT_HEARTBEAT_INTERVAL_S",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
]
