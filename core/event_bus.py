from __future__ import annotations

import asyncio

from models.status import AggregatePayload


class EventBus:
    """Hands every finished aggregate to all subscribed consumers.

    Each subscriber owns a queue, so a consumer writing snapshots to a slow
    disk never holds back the console report or the next poll.  Payloads
    are immutable, so the same object is shared by all queues.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._subscribers: list[asyncio.Queue[AggregatePayload]] = []
        self._maxsize = maxsize

    def subscribe(self) -> asyncio.Queue[AggregatePayload]:
        """Register a consumer; it receives every payload published after this."""
        q: asyncio.Queue[AggregatePayload] = asyncio.Queue(maxsize=self._maxsize)
        self._subscribers.append(q)
        return q

    async def put(self, payload: AggregatePayload) -> None:
        for q in self._subscribers:
            await q.put(payload)
