"""Shared error types for the capture relay."""

from __future__ import annotations

from dataclasses import dataclass


class RelayError(Exception):
    """Base class for reportable, operation-scoped relay failures."""

    code = "relay_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRoleError(RelayError):
    code = "invalid_role"

    def __init__(self, role: object) -> None:
        super().__init__(f"unknown role {role!r}")
        self.role = role


class ProviderUnavailableError(RelayError):
    code = "provider_unavailable"

    def __init__(self, message: str = "capture provider is not connected") -> None:
        super().__init__(message)


class AlreadyInFlightError(RelayError):
    code = "already_in_flight"

    def __init__(self, request_id: str) -> None:
        super().__init__("a capture is already in flight")
        self.request_id = request_id


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


__all__ = [
    "AlreadyInFlightError",
    "InvalidRoleError",
    "ProviderUnavailableError",
    "RateLimitError",
    "RelayError",
]
