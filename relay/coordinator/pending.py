"""Requester-side handle for an in-flight capture."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from relay.state import CaptureOutcome, CaptureRequest

if TYPE_CHECKING:
    from .capture import CaptureCoordinator


class PendingCapture:
    def __init__(
        self,
        coordinator: CaptureCoordinator,
        request: CaptureRequest,
        waiter: asyncio.Future[CaptureOutcome],
    ) -> None:
        self._coordinator = coordinator
        self._request = request
        self._waiter = waiter

    @property
    def request_id(self) -> str:
        return self._request.request_id

    def done(self) -> bool:
        return self._waiter.done()

    async def wait(self) -> CaptureOutcome:
        """Wait for fulfilment or timeout.

        Cancelling the waiting task abandons the capture and frees the slot.
        """
        try:
            return await asyncio.shield(self._waiter)
        except asyncio.CancelledError:
            self.abandon()
            raise

    def abandon(self) -> bool:
        return self._coordinator.abandon(self._request)


__all__ = ["PendingCapture"]
