"""Vendor Status -- entry point.

Assembles the aggregation pipeline:

    Providers (one asyncio task per vendor per run)
        -> Aggregator (merge with fallback payload, banner)
        -> EventBus (asyncio.Queue fan-out)
        -> Consumer tasks (react to queue.get())

A shared httpx.AsyncClient is injected into all providers.
Settings are read once here and passed down explicitly.
"""
from __future__ import annotations

import asyncio
import functools
import logging

import click
import httpx

from consumers.base import PayloadConsumer
from consumers.console import ConsoleConsumer
from consumers.snapshot import SnapshotConsumer
from core.aggregator import Aggregator
from core.config import Settings, default_sources
from core.event_bus import EventBus
from core.fallback import load_fallback
from core.registry import ProviderRegistry
from core.scheduler import Scheduler


def build_aggregator(settings: Settings, client: httpx.AsyncClient) -> Aggregator:
    registry = ProviderRegistry.from_sources(default_sources(settings), client)
    return Aggregator(
        registry=registry,
        timeout=settings.timeout,
        fallback_loader=functools.partial(load_fallback, settings.fallback_source, client),
    )


async def run_once(settings: Settings) -> str:
    async with httpx.AsyncClient(timeout=settings.timeout, follow_redirects=True) as client:
        payload = await build_aggregator(settings, client).run()
    return payload.to_json(indent=2)


async def run(settings: Settings) -> None:
    async with httpx.AsyncClient(timeout=settings.timeout, follow_redirects=True) as client:
        bus = EventBus()

        scheduler = Scheduler(
            aggregator=build_aggregator(settings, client),
            bus=bus,
            poll_interval=settings.poll_interval,
        )

        consumers: list[PayloadConsumer] = [ConsoleConsumer(queue=bus.subscribe())]
        if settings.snapshot_path:
            consumers.append(
                SnapshotConsumer(queue=bus.subscribe(), path=settings.snapshot_path)
            )

        tasks = [
            asyncio.create_task(scheduler.run(), name="scheduler"),
            *(
                asyncio.create_task(c.run(), name=type(c).__name__)
                for c in consumers
            ),
        ]

        await asyncio.gather(*tasks)


@click.command()
@click.option("--once", is_flag=True, help="Run a single aggregation and print its JSON")
@click.option("--log-level", default=None, help="Override STATUS_LOG_LEVEL")
def main(once: bool, log_level: str | None) -> None:
    """Poll vendor status sources and report an aggregate banner."""
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, (log_level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        if once:
            click.echo(asyncio.run(run_once(settings)))
        else:
            asyncio.run(run(settings))
    except KeyboardInterrupt:
        click.echo("\nShutting down.")


if __name__ == "__main__":
    main()
