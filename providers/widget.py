from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from models.status import ServiceRecord, Status
from providers.base import StatusProvider, note_text

NOT_CONFIGURED_NOTE = "Widget API URL not configured"

_CLOSED_STATES = {"resolved", "completed", "cancelled"}
_EVENT_TYPES = {"incident", "maintenance"}

log = logging.getLogger(__name__)

Entry = dict[str, Any]
ShapeMatcher = Callable[[dict[str, Any]], Optional[Entry]]


def _entries(payload: dict[str, Any], key: str) -> list[Entry]:
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [e for e in value if isinstance(e, dict)]


def _is_open(entry: Entry) -> bool:
    return str(entry.get("status") or "").lower() not in _CLOSED_STATES


def _match_ongoing(payload: dict[str, Any]) -> Entry | None:
    entries = _entries(payload, "ongoing_incidents")
    return entries[0] if entries else None


def _match_incidents(payload: dict[str, Any]) -> Entry | None:
    return next((e for e in _entries(payload, "incidents") if _is_open(e)), None)


def _match_events(payload: dict[str, Any]) -> Entry | None:
    return next(
        (
            e
            for e in _entries(payload, "events")
            if str(e.get("type") or "").lower() in _EVENT_TYPES and _is_open(e)
        ),
        None,
    )


# Best-effort tolerance of the payload shapes seen in the wild, in order of
# preference.  Not a contract with the upstream vendor.
SHAPE_MATCHERS: tuple[ShapeMatcher, ...] = (
    _match_ongoing,
    _match_incidents,
    _match_events,
)


def find_active_entry(payload: dict[str, Any]) -> Entry | None:
    for matcher in SHAPE_MATCHERS:
        entry = matcher(payload)
        if entry is not None:
            return entry
    return None


class WidgetProvider(StatusProvider):
    """Provider adapter for an incident-widget JSON endpoint.

    Without a configured URL no request is made at all.
    """

    async def fetch(self) -> ServiceRecord:
        url = self._source.url
        if not url:
            return self._unknown(NOT_CONFIGURED_NOTE)

        try:
            payload = await self._get_json(url)
        except (httpx.HTTPError, ValueError) as exc:
            log.error("[%s] widget fetch failed: %s", self.name, exc)
            return self._unknown()

        entry = find_active_entry(payload)
        if entry is None:
            return self._record(Status.OK)
        note = note_text(entry.get("name")) or note_text(entry.get("title")) or "Active incident"
        return self._record(Status.DEGRADED, note)
