from .peer import PeerState
from .answer import AnswerRecord
from .runtime import RuntimeDeps
from .session import Session
from .settings import AppSettings
from .capture import CaptureState, CaptureResult, CaptureOutcome, CaptureRequest

__all__ = [
    "AnswerRecord",
    "AppSettings",
    "CaptureOutcome",
    "CaptureRequest",
    "CaptureResult",
    "CaptureState",
    "PeerState",
    "RuntimeDeps",
    "Session",
]
