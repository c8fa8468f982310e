from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

_SEVERITY = {"unknown": 0, "ok": 1, "degraded": 2, "outage": 3}


class Status(str, Enum):
    """Canonical vendor status.

    Severity order (unknown < ok < degraded < outage) is only used to pick
    the worst status for banners and feed classification.
    """

    OK = "ok"
    DEGRADED = "degraded"
    OUTAGE = "outage"
    UNKNOWN = "unknown"

    @property
    def severity(self) -> int:
        return _SEVERITY[self.value]

    @classmethod
    def parse(cls, raw: Any) -> Status:
        """Lenient conversion; anything non-canonical becomes UNKNOWN."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ServiceRecord:
    """Normalised state of a single vendor.

    Fields:
        name:   Display name, unique within a merged payload.
        status: One of the four canonical values.
        note:   Incident title or description, if any.
        link:   Public status page of the vendor.
    """

    name: str
    status: Status
    note: str | None = None
    link: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ServiceRecord name must be non-empty")
        if not isinstance(self.status, Status):
            object.__setattr__(self, "status", Status.parse(self.status))

    def to_dict(self) -> dict[str, str]:
        out = {"name": self.name, "status": self.status.value}
        if self.note:
            out["note"] = self.note
        if self.link:
            out["link"] = self.link
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ServiceRecord:
        name = str(raw.get("name") or "").strip()
        if not name:
            raise ValueError(f"service entry without a name: {raw!r}")
        return cls(
            name=name,
            status=Status.parse(raw.get("status")),
            note=raw.get("note") or None,
            link=raw.get("link") or None,
        )


def _iso(ts: datetime) -> str:
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class AggregatePayload:
    """Result of one aggregation run, built fresh every time."""

    banner: str
    last_updated: datetime
    services: tuple[ServiceRecord, ...] = ()

    @property
    def last_updated_iso(self) -> str:
        return _iso(self.last_updated)

    def to_dict(self) -> dict[str, Any]:
        return {
            "banner": self.banner,
            "lastUpdatedISO": self.last_updated_iso,
            "services": [s.to_dict() for s in self.services],
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass(frozen=True)
class FallbackPayload:
    """Manually curated status document merged under the live results."""

    banner: str | None = None
    services: tuple[ServiceRecord, ...] = field(default_factory=tuple)
