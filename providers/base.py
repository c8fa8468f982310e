from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from models.source import SourceConfig
from models.status import ServiceRecord, Status

UNREACHABLE_NOTE = "Source unreachable"

log = logging.getLogger(__name__)


def note_text(value: Any) -> str | None:
    """Upstream text field as a note; numbers are stringified, other
    non-string values dropped."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


class StatusProvider(ABC):
    """Abstract base for all vendor status provider adapters.

    Each concrete provider is responsible for fetching its own data source
    (Statuspage summary, JSON API, RSS feed, ...) and normalizing it into a
    single ServiceRecord.

    A shared ``httpx.AsyncClient`` is injected at construction time so
    that all providers reuse one connection pool.  Providers never raise
    out of ``fetch()``: every failure becomes an ``unknown`` record.
    """

    def __init__(self, source: SourceConfig, client: httpx.AsyncClient) -> None:
        self._source = source
        self._client = client

    @property
    def name(self) -> str:
        """Vendor display name (e.g. 'Zoom')."""
        return self._source.name

    @property
    def link(self) -> str | None:
        return self._source.link

    @abstractmethod
    async def fetch(self) -> ServiceRecord:
        """Fetch the vendor's current state and return a normalised record."""

    def _record(self, status: Status, note: str | None = None) -> ServiceRecord:
        return ServiceRecord(name=self.name, status=status, note=note, link=self.link)

    def _unknown(self, note: str = UNREACHABLE_NOTE) -> ServiceRecord:
        return self._record(Status.UNKNOWN, note)

    async def _get(self, url: str) -> httpx.Response:
        """GET ``url``; raises ``httpx.HTTPError`` on transport or non-2xx."""
        resp = await self._client.get(url)
        resp.raise_for_status()
        return resp

    async def _get_json(self, url: str) -> dict[str, Any]:
        """GET ``url`` and decode a JSON object.

        Raises ``ValueError`` when the body is not JSON or not an object.
        """
        resp = await self._get(url)
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return data
