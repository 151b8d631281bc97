from __future__ import annotations

import json
import asyncio
import logging
from collections.abc import Callable

import websockets

from relay.state import AnswerRecord
from relay.coordinator import AnswerCache
from tests.params.env import build_ws_url

logger = logging.getLogger(__name__)


class RelayClient:
    """Minimal peer for a running relay: plays the provider or the subscriber.

    The provider answers every ``capture`` command with ``capture_fn()``.
    The subscriber keeps an ``AnswerCache`` and calls ``on_answer`` whenever
    the cached record changes. Both reply to heartbeat pings.
    """

    def __init__(
        self,
        server: str,
        secure: bool = False,
        *,
        debug: bool = False,
        capture_fn: Callable[[], str] | None = None,
        on_answer: Callable[[AnswerRecord], None] | None = None,
    ) -> None:
        self.url = build_ws_url(server, secure=secure)
        self.debug = debug
        self.cache = AnswerCache()
        self.captures_sent = 0
        self._capture_fn = capture_fn or (lambda: "")
        self._on_answer = on_answer or (lambda record: None)

    async def _send(self, ws, msg_type: str, payload: dict | None = None, request_id: str | None = None) -> None:
        msg = {"type": msg_type, "payload": payload or {}}
        if request_id:
            msg["request_id"] = request_id
        await ws.send(json.dumps(msg))

    def _handle_answer(self, payload: dict, *, resync: bool) -> None:
        record = AnswerRecord.from_payload(payload)
        changed = self.cache.resync(record) if resync else self.cache.apply(record)
        if changed:
            self._on_answer(self.cache.record)

    async def run(self, role: str, *, duration_s: float | None = None) -> None:
        async with websockets.connect(self.url) as ws:
            await self._send(ws, "register", {"role": role})
            try:
                await asyncio.wait_for(self._recv_loop(ws), timeout=duration_s)
            except TimeoutError:
                await self._send(ws, "end")

    async def _recv_loop(self, ws) -> None:
        async for raw in ws:
            try:
                msg = json.loads(raw)
            except (TypeError, json.JSONDecodeError):
                continue
            if self.debug:
                print(f"[recv] {msg}")

            msg_type = msg.get("type")
            payload = msg.get("payload") or {}
            request_id = msg.get("request_id")

            if msg_type == "ping":
                await self._send(ws, "pong", request_id=request_id)
            elif msg_type == "registered":
                if "version" in payload:
                    # Fresh connection: trust the server even if its version went backwards.
                    self._handle_answer(payload, resync=True)
            elif msg_type == "answer":
                self._handle_answer(payload, resync=False)
            elif msg_type == "capture":
                await self._send(ws, "capture.result", {"data": self._capture_fn()}, request_id=request_id)
                self.captures_sent += 1
            elif msg_type == "error":
                logger.warning("relay error: %s", payload)
            elif msg_type == "session_end":
                return


__all__ = ["RelayClient"]
