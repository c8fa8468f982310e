from __future__ import annotations

import logging

import httpx

from models.status import ServiceRecord, Status
from providers.base import StatusProvider, note_text

DEFAULT_SLACK_URL = "https://slack-status.com/api/v2.0.0/current"

log = logging.getLogger(__name__)


class SlackProvider(StatusProvider):
    """Provider adapter for the Slack status API (``/api/v2.0.0/current``)."""

    async def fetch(self) -> ServiceRecord:
        url = self._source.url or DEFAULT_SLACK_URL
        try:
            data = await self._get_json(url)
        except (httpx.HTTPError, ValueError) as exc:
            log.error("[%s] status API failed: %s", self.name, exc)
            return self._unknown()

        incidents = data.get("active_incidents")
        incidents = [i for i in incidents if isinstance(i, dict)] if isinstance(incidents, list) else []

        if data.get("status") == "ok" and not incidents:
            return self._record(Status.OK)

        if any(i.get("type") == "outage" for i in incidents):
            status = Status.OUTAGE
        else:
            status = Status.DEGRADED
        note = (note_text(incidents[0].get("title")) if incidents else None) or "Active incident"
        return self._record(status, note)
