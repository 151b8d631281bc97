from .roles import Role, parse_role
from .cache import AnswerCache
from .answers import AnswerDistributor
from .capture import CaptureCoordinator
from .pending import PendingCapture
from .liveness import LivenessMonitor
from .registry import SessionRegistry

__all__ = [
    "AnswerCache",
    "AnswerDistributor",
    "CaptureCoordinator",
    "LivenessMonitor",
    "PendingCapture",
    "Role",
    "SessionRegistry",
    "parse_role",
]
