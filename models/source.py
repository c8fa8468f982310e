from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from models.status import Status


class SourceKind(str, Enum):
    STATUSPAGE = "statuspage"
    SLACK = "slack"
    FEED = "feed"
    WIDGET = "widget"
    STATIC = "static"


class StatuspagePolicy(str, Enum):
    """How a Statuspage summary is reduced to a Status.

    INDICATOR maps ``status.indicator`` onto all four values.
    COMPONENTS only yields ok/degraded from incidents and component states.
    """

    INDICATOR = "indicator"
    COMPONENTS = "components"


@dataclass(frozen=True)
class SourceConfig:
    """Binds one vendor to exactly one provider kind and its parameters.

    ``url`` is the Statuspage origin, the Slack API endpoint or the widget
    endpoint depending on ``kind``.  ``status`` and ``note`` are only read by
    static sources, ``window_hours`` only by feed sources.
    """

    kind: SourceKind
    name: str
    link: str | None = None
    url: str | None = None
    feed_urls: tuple[str, ...] = ()
    status: Status = Status.UNKNOWN
    note: str | None = None
    policy: StatuspagePolicy = StatuspagePolicy.INDICATOR
    window_hours: float = 12.0
