"""Capture relay configuration (env names and defaults)."""

from __future__ import annotations

ENV_CAPTURE_TIMEOUT_S = "CAPTURE_TIMEOUT_S"
ENV_HEARTBEAT_INTERVAL_S = "HEARTBEAT_INTERVAL_S"
ENV_ANSWER_MAX_CHARS = "ANSWER_MAX_CHARS"
ENV_CAPTURE_MAX_PAYLOAD_BYTES = "CAPTURE_MAX_PAYLOAD_BYTES"
ENV_CAPTURE_DISCONNECT_POLL_S = "CAPTURE_DISCONNECT_POLL_S"
ENV_ANSWER_PUSH_TIMEOUT_S = "ANSWER_PUSH_TIMEOUT_S"

DEFAULT_CAPTURE_TIMEOUT_S = 15.0
DEFAULT_HEARTBEAT_INTERVAL_S = 30.0

# Answers are single-letter choices by default ("a".."e").
DEFAULT_ANSWER_MAX_CHARS = 1

DEFAULT_CAPTURE_MAX_PAYLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_CAPTURE_DISCONNECT_POLL_S = 0.5
DEFAULT_ANSWER_PUSH_TIMEOUT_S = 5.0

__all__ = [
    "DEFAULT_ANSWER_MAX_CHARS",
    "DEFAULT_ANSWER_PUSH_TIMEOUT_S",
    "DEFAULT_CAPTURE_DISCONNECT_POLL_S",
    "DEFAULT_CAPTURE_MAX_PAYLOAD_BYTES",
    "DEFAULT_CAPTURE_TIMEOUT_S",
    "DEFAULT_HEARTBEAT_INTERVAL_S",
    "ENV_ANSWER_MAX_CHARS",
    "ENV_ANSWER_PUSH_TIMEOUT_S",
    "ENV_CAPTURE_DISCONNECT_POLL_S",
    "ENV_CAPTURE_MAX_PAYLOAD_BYTES",
    "ENV_CAPTURE_TIMEOUT_S",
    "ENV_HEARTBEAT_INTERVAL_S",
]
