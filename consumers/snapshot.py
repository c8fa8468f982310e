from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from consumers.base import PayloadConsumer
from models.status import AggregatePayload

log = logging.getLogger(__name__)


class SnapshotConsumer(PayloadConsumer):
    """Writes the latest payload as JSON, replacing the file atomically."""

    def __init__(self, queue: asyncio.Queue[AggregatePayload], path: str | Path) -> None:
        super().__init__(queue)
        self._path = Path(path)

    async def process(self, payload: AggregatePayload) -> None:
        await asyncio.to_thread(self._write, payload.to_json(indent=2))
        log.debug("Snapshot written to %s", self._path)

    def _write(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(text + "\n", encoding="utf-8")
        os.replace(tmp, self._path)
