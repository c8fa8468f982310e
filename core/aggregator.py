from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable, Sequence

from core.registry import ProviderRegistry
from models.status import AggregatePayload, FallbackPayload, ServiceRecord, Status
from providers.base import UNREACHABLE_NOTE, StatusProvider

DEFAULT_TIMEOUT = 8.0

FETCH_FAILED_NOTE = "Fetch failed"
OUTAGE_BANNER = "Vendor outage detected."
DEGRADED_BANNER = "Some vendors degraded."
ALL_CLEAR_BANNER = "All monitored vendors operational."

log = logging.getLogger(__name__)

FallbackLoader = Callable[[], Awaitable["FallbackPayload | None"]]


def merge_services(
    live: Sequence[ServiceRecord], fallback: Iterable[ServiceRecord] = ()
) -> list[ServiceRecord]:
    """Live records first, then fallback records whose name is not taken."""
    merged = list(live)
    seen = {s.name for s in merged}
    for record in fallback:
        if record.name in seen:
            continue
        seen.add(record.name)
        merged.append(record)
    return merged


def derive_banner(services: Iterable[ServiceRecord], fallback_banner: str | None = None) -> str:
    statuses = {s.status for s in services}
    if Status.OUTAGE in statuses:
        return OUTAGE_BANNER
    if Status.DEGRADED in statuses:
        return DEGRADED_BANNER
    return fallback_banner or ALL_CLEAR_BANNER


class Aggregator:
    """Runs every registered provider concurrently and merges the results.

    Each provider gets its own task bounded by ``timeout``.  The batch waits
    until every task has settled; a provider that hangs or raises only
    turns its own row into ``unknown``.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        timeout: float = DEFAULT_TIMEOUT,
        fallback_loader: FallbackLoader | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._registry = registry
        self._timeout = timeout
        self._fallback_loader = fallback_loader
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _invoke(self, provider: StatusProvider) -> ServiceRecord:
        try:
            return await asyncio.wait_for(provider.fetch(), timeout=self._timeout)
        except asyncio.TimeoutError:
            log.warning("[%s] timed out after %.1fs", provider.name, self._timeout)
            return ServiceRecord(
                name=provider.name,
                status=Status.UNKNOWN,
                note=UNREACHABLE_NOTE,
                link=provider.link,
            )

    async def _load_fallback(self) -> FallbackPayload | None:
        if self._fallback_loader is None:
            return None
        try:
            return await asyncio.wait_for(self._fallback_loader(), timeout=self._timeout)
        except asyncio.TimeoutError:
            log.warning("Fallback loader timed out after %.1fs", self._timeout)
            return None
        except Exception:
            log.exception("Fallback loader failed")
            return None

    async def collect(self) -> list[ServiceRecord]:
        """Fan out to all providers; one record per provider, registry order."""
        providers = self._registry.providers
        results = await asyncio.gather(
            *(self._invoke(p) for p in providers),
            return_exceptions=True,
        )

        records: list[ServiceRecord] = []
        for provider, result in zip(providers, results):
            if isinstance(result, BaseException):
                log.error(
                    "[%s] provider raised %s: %s",
                    provider.name,
                    type(result).__name__,
                    result,
                )
                result = ServiceRecord(
                    name=provider.name,
                    status=Status.UNKNOWN,
                    note=FETCH_FAILED_NOTE,
                    link=provider.link or "#",
                )
            records.append(result)
        return records

    async def run(self, fallback: FallbackPayload | None = None) -> AggregatePayload:
        """One aggregation run.

        ``fallback`` overrides the configured loader when given.
        """
        if fallback is None:
            live, fallback = await asyncio.gather(self.collect(), self._load_fallback())
        else:
            live = await self.collect()

        services = merge_services(live, fallback.services if fallback else ())
        banner = derive_banner(services, fallback.banner if fallback else None)

        counts: dict[str, int] = {}
        for s in services:
            counts[s.status.value] = counts.get(s.status.value, 0) + 1
        log.info("Aggregated %d vendor(s): %s", len(services), counts)

        return AggregatePayload(
            banner=banner,
            last_updated=self._clock(),
            services=tuple(services),
        )
