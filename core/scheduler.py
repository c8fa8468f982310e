from __future__ import annotations

import asyncio
import logging

from core.aggregator import Aggregator
from core.event_bus import EventBus
from models.status import AggregatePayload

log = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 300


class Scheduler:
    """Polling loop that runs a full aggregation every ``poll_interval``
    seconds and publishes the payload on the ``EventBus``.

    Runs never overlap and share nothing; a failed poll is simply retried on
    the next tick.  The scheduler has no knowledge of consumers.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        bus: EventBus,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._aggregator = aggregator
        self._bus = bus
        self._poll_interval = poll_interval

    async def poll_once(self) -> AggregatePayload | None:
        try:
            payload = await self._aggregator.run()
        except Exception:
            log.exception("Aggregation run failed")
            return None

        await self._bus.put(payload)
        return payload

    async def run(self, iterations: int | None = None) -> None:
        """Poll until cancelled, or ``iterations`` times when given."""
        log.info("Scheduler starting (interval=%ss)", self._poll_interval)

        done = 0
        while iterations is None or done < iterations:
            payload = await self.poll_once()
            if payload is not None:
                log.info("Published payload: %s", payload.banner)
            done += 1
            if iterations is None or done < iterations:
                await asyncio.sleep(self._poll_interval)
