"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_SESSION_ID = "session_id"
WS_KEY_REQUEST_ID = "request_id"
WS_KEY_PAYLOAD = "payload"

WS_UNKNOWN_SESSION_ID = "unknown"
WS_UNKNOWN_REQUEST_ID = "unknown"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_HEARTBEAT_CODE = 4003
WS_CLOSE_SUPERSEDED_CODE = 4004
WS_CLOSE_MAX_DURATION_CODE = 4005

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_HEARTBEAT_REASON = "heartbeat missed"
WS_CLOSE_SUPERSEDED_REASON = "superseded by a newer registration"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Watchdog
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_IDLE_TIMEOUT_S = 150.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 0.0

# Message types sent by the server
WS_MSG_REGISTERED = "registered"
WS_MSG_CAPTURE = "capture"
WS_MSG_CAPTURE_ACK = "capture.ack"
WS_MSG_ANSWER = "answer"
WS_MSG_PING = "ping"
WS_MSG_PONG = "pong"
WS_MSG_SESSION_END = "session_end"
WS_MSG_ERROR = "error"

# Message types sent by peers
WS_MSG_REGISTER = "register"
WS_MSG_CAPTURE_RESULT = "capture.result"
WS_MSG_ANSWER_GET = "answer.get"
WS_MSG_END = "end"

# Errors (payload.code values)
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_RATE_LIMITED = "rate_limited"
WS_ERROR_NOT_REGISTERED = "not_registered"

__all__ = [
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_HEARTBEAT_CODE",
    "WS_CLOSE_HEARTBEAT_REASON",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_CLOSE_SUPERSEDED_CODE",
    "WS_CLOSE_SUPERSEDED_REASON",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_NOT_REGISTERED",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_KEY_PAYLOAD",
    "WS_MSG_ANSWER",
    "WS_MSG_ANSWER_GET",
    "WS_MSG_CAPTURE",
    "WS_MSG_CAPTURE_ACK",
    "WS_MSG_CAPTURE_RESULT",
    "WS_MSG_END",
    "WS_MSG_ERROR",
    "WS_MSG_PING",
    "WS_MSG_PONG",
    "WS_MSG_REGISTER",
    "WS_MSG_REGISTERED",
    "WS_MSG_SESSION_END",
    "WS_KEY_REQUEST_ID",
    "WS_KEY_SESSION_ID",
    "WS_KEY_TYPE",
    "WS_UNKNOWN_REQUEST_ID",
    "WS_UNKNOWN_SESSION_ID",
]
