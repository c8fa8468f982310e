from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import httpx

from models.status import FallbackPayload, ServiceRecord

log = logging.getLogger(__name__)


def parse_fallback(raw: Any) -> FallbackPayload:
    """Build a FallbackPayload from a decoded ``services.json`` document.

    Entries without a name are skipped; unknown status strings become
    ``unknown``.
    """
    if not isinstance(raw, dict):
        raise ValueError("fallback document must be a JSON object")

    services: list[ServiceRecord] = []
    entries = raw.get("services")
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        try:
            services.append(ServiceRecord.from_dict(entry))
        except ValueError as exc:
            log.warning("Skipping fallback entry: %s", exc)

    banner = raw.get("banner")
    return FallbackPayload(
        banner=banner if isinstance(banner, str) and banner else None,
        services=tuple(services),
    )


async def load_fallback(
    source: str | None, client: httpx.AsyncClient | None = None
) -> FallbackPayload | None:
    """Load the static fallback payload from a file path or HTTP(S) URL.

    Returns None when no source is configured or it cannot be read.
    """
    if not source:
        return None

    try:
        if source.startswith(("http://", "https://")):
            if client is None:
                raise ValueError("an HTTP client is required for URL sources")
            resp = await client.get(source)
            resp.raise_for_status()
            raw = resp.json()
        else:
            text = await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
            raw = json.loads(text)
        return parse_fallback(raw)
    except (httpx.HTTPError, OSError, ValueError) as exc:
        log.warning("Fallback payload %s unavailable: %s", source, exc)
        return None
