from __future__ import annotations

from models.status import ServiceRecord
from providers.base import StatusProvider


class StaticProvider(StatusProvider):
    """Returns a preconfigured record for vendors without a public API."""

    async def fetch(self) -> ServiceRecord:
        return self._record(self._source.status, self._source.note)
