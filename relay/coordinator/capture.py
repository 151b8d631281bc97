"""Single-slot capture coordination.

At most one capture is in flight. ``start`` forwards a command to the
registered provider and arms a timer; the first of provider result or timer
resolves the waiting requester and frees the slot. Timers are tagged with the
generation of the request they were armed for, so a stale timer can never
touch a newer request.
"""

from __future__ import annotations

import time
import uuid
import asyncio
import logging
from typing import Any
from collections.abc import Callable

from relay.config.websocket import WS_MSG_CAPTURE
from relay.errors import AlreadyInFlightError, ProviderUnavailableError
from relay.state import CaptureState, CaptureResult, CaptureOutcome, CaptureRequest

from .roles import Role
from .pending import PendingCapture
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


def _new_request_id() -> str:
    return uuid.uuid4().hex


class CaptureCoordinator:
    def __init__(
        self,
        registry: SessionRegistry,
        *,
        timeout_s: float,
        now_fn: Callable[[], float] | None = None,
        id_fn: Callable[[], str] | None = None,
    ) -> None:
        self._registry = registry
        self._timeout_s = max(0.0, float(timeout_s))
        self._now = now_fn or time.time
        self._new_id = id_fn or _new_request_id
        self._lock = asyncio.Lock()
        self._generation = 0
        self._request: CaptureRequest | None = None
        self._waiter: asyncio.Future[CaptureOutcome] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._last_result: CaptureResult | None = None

    @property
    def state(self) -> CaptureState:
        return CaptureState.IDLE if self._request is None else CaptureState.REQUESTED

    @property
    def in_flight(self) -> CaptureRequest | None:
        return self._request

    @property
    def last_result(self) -> CaptureResult | None:
        return self._last_result

    async def start(self) -> PendingCapture:
        """Open the slot and forward a capture command to the provider.

        Raises ProviderUnavailableError when no provider is registered (or it
        rejects the command) and AlreadyInFlightError when the slot is busy.
        Neither failure disturbs an in-flight request.
        """
        async with self._lock:
            provider = self._registry.get(Role.PROVIDER)
            if provider is None:
                raise ProviderUnavailableError()
            if self._request is not None:
                raise AlreadyInFlightError(self._request.request_id)

            loop = asyncio.get_running_loop()
            self._generation += 1
            request = CaptureRequest(request_id=self._new_id(), created_at=self._now(), generation=self._generation)
            waiter: asyncio.Future[CaptureOutcome] = loop.create_future()
            self._request = request
            self._waiter = waiter

            try:
                sent = await provider.send(WS_MSG_CAPTURE, {}, request_id=request.request_id)
            except asyncio.CancelledError:
                self.abandon(request)
                raise
            except Exception:
                logger.debug("capture command send failed", exc_info=True)
                sent = False
            if not sent:
                if self._request is request:
                    self._clear()
                    waiter.cancel()
                raise ProviderUnavailableError("capture provider did not accept the command")

            # The provider may already have answered while the command was being sent.
            if self._request is request:
                self._timer = loop.call_later(self._timeout_s, self._on_timeout, request.generation)

        logger.info("capture requested request_id=%s", request.request_id)
        return PendingCapture(self, request, waiter)

    async def capture(self) -> CaptureOutcome:
        pending = await self.start()
        return await pending.wait()

    def deliver(self, payload: Any, *, request_id: str | None = None) -> bool:
        """Accept a provider result. Returns True when it resolved a waiting requester.

        Results are stored as the latest result even when nothing is in flight.
        """
        request = self._request
        tag = request_id or (request.request_id if request is not None else None)
        self._last_result = CaptureResult(payload=payload, received_at=self._now(), request_id=tag)

        if request is None:
            logger.info("capture result arrived with no capture in flight; stored as latest")
            return False

        request.state = CaptureState.FULFILLED
        request.payload = payload
        self._resolve(CaptureOutcome(request_id=request.request_id, state=CaptureState.FULFILLED, payload=payload))
        logger.info("capture fulfilled request_id=%s", request.request_id)
        return True

    def abandon(self, request: CaptureRequest) -> bool:
        """Release the slot held by ``request`` after its requester lost interest."""
        if self._request is not request:
            return False
        waiter = self._waiter
        self._clear()
        if waiter is not None and not waiter.done():
            waiter.cancel()
        logger.info("capture abandoned request_id=%s", request.request_id)
        return True

    def close(self) -> None:
        if self._request is not None:
            self.abandon(self._request)

    def _on_timeout(self, generation: int) -> None:
        request = self._request
        if request is None or request.generation != generation:
            logger.debug("stale capture timer ignored generation=%s", generation)
            return
        request.state = CaptureState.TIMED_OUT
        self._resolve(CaptureOutcome(request_id=request.request_id, state=CaptureState.TIMED_OUT))
        logger.warning("capture timed out request_id=%s after %.1fs", request.request_id, self._timeout_s)

    def _resolve(self, outcome: CaptureOutcome) -> None:
        waiter = self._waiter
        self._clear()
        if waiter is not None and not waiter.done():
            waiter.set_result(outcome)

    def _clear(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._request = None
        self._waiter = None


__all__ = ["CaptureCoordinator"]
