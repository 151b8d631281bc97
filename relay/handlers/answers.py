"""HTTP handlers for publishing and reading the current answer."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import Request
from pydantic import BaseModel, ValidationError

from relay.state import RuntimeDeps
from relay.config.websocket import WS_ERROR_INVALID_PAYLOAD

from .responses import ok_body, error_body

logger = logging.getLogger(__name__)


class AnswerIn(BaseModel):
    # Loosely typed so a wrong type becomes an invalid_payload body, not a 422.
    answer: Any = None


def normalize_answer(raw: str, max_chars: int) -> str:
    value = raw.strip().lower()
    return value[:max_chars] if max_chars > 0 else value


async def read_answer_body(request: Request) -> AnswerIn | None:
    """Parse the request body; None when it is missing, not JSON or not an object."""
    raw = await request.body()
    if not raw.strip():
        return AnswerIn()
    try:
        return AnswerIn.model_validate(orjson.loads(raw))
    except (orjson.JSONDecodeError, ValidationError):
        return None


async def handle_publish_answer(body: AnswerIn | None, runtime_deps: RuntimeDeps) -> dict[str, Any]:
    if body is None:
        return error_body(WS_ERROR_INVALID_PAYLOAD, "body must be a JSON object")
    if body.answer is not None and not isinstance(body.answer, str):
        return error_body(WS_ERROR_INVALID_PAYLOAD, "answer must be a string")

    value = normalize_answer(body.answer or "", runtime_deps.settings.relay.answer_max_chars)
    if not value:
        return error_body(WS_ERROR_INVALID_PAYLOAD, "answer is required")
    version = await runtime_deps.answers.publish(value)
    return ok_body(value=value, version=version)


def current_answer_body(runtime_deps: RuntimeDeps) -> dict[str, Any]:
    return ok_body(**runtime_deps.answers.current().as_payload())


__all__ = ["AnswerIn", "current_answer_body", "handle_publish_answer", "normalize_answer", "read_answer_body"]
