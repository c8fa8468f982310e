from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from models.status import AggregatePayload

log = logging.getLogger(__name__)


class PayloadConsumer(ABC):
    """Output sink for aggregate payloads, run as its own asyncio task.

    A consumer sees every payload the scheduler publishes, in order.  A
    payload that fails to render or write is logged and skipped; the next
    poll delivers a complete replacement anyway.
    """

    def __init__(self, queue: asyncio.Queue[AggregatePayload]) -> None:
        self._queue = queue

    @abstractmethod
    async def process(self, payload: AggregatePayload) -> None:
        """Render or store one aggregate."""

    async def run(self) -> None:
        """Drain the subscription queue until the task is cancelled."""
        log.info("%s started, awaiting payloads", type(self).__name__)
        while True:
            payload = await self._queue.get()
            try:
                await self.process(payload)
            except Exception:
                log.exception(
                    "%s failed processing payload from %s",
                    type(self).__name__,
                    payload.last_updated_iso,
                )
            finally:
                self._queue.task_done()
