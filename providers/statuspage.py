from __future__ import annotations

import logging
from typing import Any

import httpx

from models.source import StatuspagePolicy
from models.status import ServiceRecord, Status
from providers.base import StatusProvider, note_text

_SUMMARY_PATH = "/api/v2/summary.json"

_INDICATOR_MAP = {
    "none": Status.OK,
    "operational": Status.OK,
    "minor": Status.DEGRADED,
    "maintenance": Status.DEGRADED,
    "major": Status.OUTAGE,
    "critical": Status.OUTAGE,
}

log = logging.getLogger(__name__)


def map_indicator(indicator: Any) -> Status:
    """Map a Statuspage ``status.indicator`` code onto a Status."""
    return _INDICATOR_MAP.get(str(indicator or "").strip().lower(), Status.UNKNOWN)


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


class StatuspageProvider(StatusProvider):
    """Provider adapter for Statuspage-hosted ``/api/v2/summary.json``.

    The source's ``policy`` decides how the summary is reduced; an instance
    always applies the same one.
    """

    @property
    def summary_url(self) -> str:
        return (self._source.url or "").rstrip("/") + _SUMMARY_PATH

    async def fetch(self) -> ServiceRecord:
        try:
            summary = await self._get_json(self.summary_url)
        except (httpx.HTTPError, ValueError) as exc:
            log.error("[%s] summary fetch failed: %s", self.name, exc)
            return self._unknown()

        if self._source.policy is StatuspagePolicy.COMPONENTS:
            return self._from_components(summary)
        return self._from_indicator(summary)

    def _from_indicator(self, summary: dict[str, Any]) -> ServiceRecord:
        overall = _dict(summary.get("status"))
        status = map_indicator(overall.get("indicator"))
        description = note_text(overall.get("description"))

        incidents = _list(summary.get("incidents"))
        if incidents:
            note = note_text(_dict(incidents[0]).get("name")) or description
        else:
            note = description
        return self._record(status, note)

    def _from_components(self, summary: dict[str, Any]) -> ServiceRecord:
        incidents = _list(summary.get("incidents"))
        any_degraded = any(
            _dict(c).get("status") != "operational"
            for c in _list(summary.get("components"))
        )
        if incidents:
            note = note_text(_dict(incidents[0]).get("name")) or "Incident in progress"
        else:
            note = "Operational"
        status = Status.DEGRADED if incidents or any_degraded else Status.OK
        return self._record(status, note)
