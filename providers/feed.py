from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import feedparser
import httpx

from models.source import SourceConfig
from models.status import ServiceRecord, Status
from providers.base import StatusProvider

NO_FEEDS_NOTE = "No feeds configured"
NO_EVENTS_NOTE = "No recent public events"

_NORMAL_PHRASES = ("operating normally", "[resolved]", "resolved:")
_OUTAGE_KEYWORDS = (
    "major outage",
    "service disruption",
    "widespread",
    "unable to",
    "unavailable",
)
_DEGRADED_KEYWORDS = (
    "degrad",
    "elevated error",
    "increased error",
    "error rate",
    "intermittent",
    "impact",
    "impair",
    "latenc",
    "delay",
    "issue",
    "outage",
    "incident",
)

log = logging.getLogger(__name__)


def classify_title(title: str) -> Status:
    """Keyword classification of a single feed item title."""
    text = (title or "").strip().lower()
    if not text or any(p in text for p in _NORMAL_PHRASES):
        return Status.OK
    if any(k in text for k in _OUTAGE_KEYWORDS):
        return Status.OUTAGE
    if any(k in text for k in _DEGRADED_KEYWORDS):
        return Status.DEGRADED
    return Status.OK


@dataclass(frozen=True)
class FeedItem:
    title: str
    published: datetime | None


def parse_items(text: str) -> list[FeedItem]:
    """Extract title and publication time from every RSS item / Atom entry.

    Raises ``ValueError`` when the body is not recognisable as a feed, so an
    HTML error page served with a 200 never reads as an empty feed.
    """
    feed = feedparser.parse(text)
    if not feed.entries and not feed.get("version"):
        raise ValueError(f"not a feed: {feed.get('bozo_exception') or 'unknown format'}")
    items: list[FeedItem] = []
    for entry in feed.entries:
        stamp = entry.get("published_parsed") or entry.get("updated_parsed")
        published = datetime(*stamp[:6], tzinfo=timezone.utc) if stamp else None
        items.append(FeedItem(title=(entry.get("title") or "").strip(), published=published))
    return items


class FeedProvider(StatusProvider):
    """Provider adapter for one vendor backed by one or more RSS/Atom feeds.

    Items older than the source's recency window are ignored; undated items
    count as recent.  The worst classified item across all feeds decides
    the status.  Individual feed failures are tolerated as long as at least
    one feed could be read.
    """

    def __init__(
        self,
        source: SourceConfig,
        client: httpx.AsyncClient,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(source, client)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch(self) -> ServiceRecord:
        urls = self._source.feed_urls
        if not urls:
            return self._unknown(NO_FEEDS_NOTE)

        results = await asyncio.gather(
            *(self._read_feed(url) for url in urls),
            return_exceptions=True,
        )

        items: list[FeedItem] = []
        failures = 0
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                log.warning("[%s] feed %s failed: %s", self.name, url, result)
                failures += 1
                continue
            items.extend(result)

        if failures == len(urls):
            return self._unknown()

        cutoff = self._clock() - timedelta(hours=self._source.window_hours)
        recent = [i for i in items if i.published is None or i.published >= cutoff]
        if not recent:
            return self._record(Status.OK, NO_EVENTS_NOTE)

        worst = max(recent, key=lambda i: classify_title(i.title).severity)
        status = classify_title(worst.title)
        if status is Status.OK:
            note = next((i.title for i in recent if i.title), NO_EVENTS_NOTE)
        else:
            note = worst.title
        return self._record(status, note)

    async def _read_feed(self, url: str) -> list[FeedItem]:
        resp = await self._get(url)
        return parse_items(resp.text)
