"""Logging configuration."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ENV_SHOW_ACCESS_LOGS = "SHOW_ACCESS_LOGS"

__all__ = ["ENV_SHOW_ACCESS_LOGS", "LOG_FORMAT", "LOG_LEVEL"]
