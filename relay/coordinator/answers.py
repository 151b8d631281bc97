"""Versioned answer storage with best-effort push to the subscriber."""

from __future__ import annotations

import asyncio
import logging

from relay.state import AnswerRecord
from relay.config.websocket import WS_MSG_ANSWER
from relay.config.relay import DEFAULT_ANSWER_PUSH_TIMEOUT_S

from .roles import Role
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class AnswerDistributor:
    """Holds the current answer and its version.

    Publishes are serialised: each takes the next version and is pushed before
    the following publish starts, so pushes leave in version order. Each push
    is bounded by ``push_timeout_s`` so a stalled subscriber cannot hold up
    later publishes. A failed push is only logged; subscribers recover
    through ``current()``.
    """

    def __init__(self, registry: SessionRegistry, *, push_timeout_s: float = DEFAULT_ANSWER_PUSH_TIMEOUT_S) -> None:
        self._registry = registry
        self._push_timeout_s = push_timeout_s
        self._lock = asyncio.Lock()
        self._record = AnswerRecord()

    def current(self) -> AnswerRecord:
        return self._record

    async def publish(self, value: str) -> int:
        async with self._lock:
            record = AnswerRecord(value=value, version=self._record.version + 1)
            self._record = record
            logger.info("answer published version=%s", record.version)
            await self._push(record)
        return record.version

    async def _push(self, record: AnswerRecord) -> bool:
        subscriber = self._registry.get(Role.SUBSCRIBER)
        if subscriber is None:
            logger.debug("no subscriber registered; version=%s left for pull", record.version)
            return False
        try:
            sent = await asyncio.wait_for(subscriber.send(WS_MSG_ANSWER, record.as_payload()), self._push_timeout_s)
        except TimeoutError:
            logger.warning("answer push timed out version=%s after %.1fs", record.version, self._push_timeout_s)
            return False
        except Exception:
            logger.warning("answer push raised version=%s", record.version, exc_info=True)
            return False
        if not sent:
            logger.warning("answer push failed version=%s; subscriber must pull", record.version)
        return bool(sent)


__all__ = ["AnswerDistributor"]
