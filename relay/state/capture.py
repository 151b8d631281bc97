"""Capture request and outcome types (dataclasses only)."""

from __future__ import annotations

import enum
from typing import Any
from dataclasses import dataclass


class CaptureState(str, enum.Enum):
    IDLE = "idle"
    REQUESTED = "requested"
    FULFILLED = "fulfilled"
    TIMED_OUT = "timed_out"


@dataclass(slots=True)
class CaptureRequest:
    request_id: str
    created_at: float
    generation: int
    state: CaptureState = CaptureState.REQUESTED
    payload: Any = None


@dataclass(frozen=True, slots=True)
class CaptureOutcome:
    """Terminal result handed to the requester: FULFILLED or TIMED_OUT."""

    request_id: str
    state: CaptureState
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.state is CaptureState.FULFILLED


@dataclass(frozen=True, slots=True)
class CaptureResult:
    """Latest payload delivered by the provider, including late arrivals."""

    payload: Any
    received_at: float
    request_id: str | None


__all__ = ["CaptureOutcome", "CaptureRequest", "CaptureResult", "CaptureState"]
