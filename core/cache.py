"""Freshness policy for aggregate payloads.

The engine never caches on its own.  ``FreshnessPolicy`` is the directive a
fronting layer (CDN, edge function) should send, and ``PayloadCache`` is an
in-process equivalent for long-running hosts: fresh within ``s_maxage``,
served stale while a background refresh runs within
``stale_while_revalidate``, recomputed synchronously after that.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from models.status import AggregatePayload

NO_STORE = "no-store, max-age=0"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FreshnessPolicy:
    s_maxage: int = 300
    stale_while_revalidate: int = 300
    max_age: int = 0

    def cache_control(self) -> str:
        parts = ["public", f"max-age={self.max_age}", f"s-maxage={self.s_maxage}"]
        if self.stale_while_revalidate:
            parts.append(f"stale-while-revalidate={self.stale_while_revalidate}")
        return ", ".join(parts)

    def headers(self, force_refresh: bool = False) -> dict[str, str]:
        """Response headers for a payload; forced pulls must not be cached."""
        return {
            "content-type": "application/json; charset=utf-8",
            "cache-control": NO_STORE if force_refresh else self.cache_control(),
        }


class PayloadCache:
    """Caches the last aggregate payload according to a FreshnessPolicy.

    ``compute`` is typically ``Aggregator.run``.  Concurrent callers that
    need a recomputation share a single run.
    """

    def __init__(
        self,
        compute: Callable[[], Awaitable[AggregatePayload]],
        policy: FreshnessPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._compute = compute
        self._policy = policy or FreshnessPolicy()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._payload: AggregatePayload | None = None
        self._stored_at = 0.0
        self._refresh_task: asyncio.Task[AggregatePayload] | None = None

    def age(self) -> float | None:
        if self._payload is None:
            return None
        return self._clock() - self._stored_at

    async def get(self, force_refresh: bool = False) -> AggregatePayload:
        if force_refresh:
            return await self._recompute(since=None)

        age = self.age()
        if age is not None and self._payload is not None:
            if age < self._policy.s_maxage:
                return self._payload
            if age < self._policy.s_maxage + self._policy.stale_while_revalidate:
                self._schedule_refresh()
                return self._payload

        return await self._recompute(since=self._stored_at)

    async def _recompute(self, since: float | None) -> AggregatePayload:
        async with self._lock:
            # Another caller refreshed while we waited for the lock.
            if since is not None and self._payload is not None and self._stored_at != since:
                return self._payload
            payload = await self._compute()
            self._payload = payload
            self._stored_at = self._clock()
            return payload

    def _schedule_refresh(self) -> None:
        if self._refresh_task is not None and not self._refresh_task.done():
            return
        log.debug("Serving stale payload, refreshing in background")
        self._refresh_task = asyncio.create_task(
            self._recompute(since=self._stored_at), name="payload-refresh"
        )
        self._refresh_task.add_done_callback(self._log_refresh_failure)

    @staticmethod
    def _log_refresh_failure(task: asyncio.Task[AggregatePayload]) -> None:
        if not task.cancelled() and task.exception() is not None:
            log.error("Background refresh failed: %s", task.exception())

    async def wait_for_refresh(self) -> None:
        """Block until a pending background refresh has finished."""
        if self._refresh_task is not None:
            await asyncio.gather(self._refresh_task, return_exceptions=True)
