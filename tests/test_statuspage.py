from __future__ import annotations

import httpx
import pytest

from models.source import SourceConfig, SourceKind, StatuspagePolicy
from models.status import Status
from providers.statuspage import StatuspageProvider, map_indicator
from tests.helpers import Recorder, connect_error, routes

ORIGIN = "https://status.example.com"
SUMMARY = ORIGIN + "/api/v2/summary.json"


def _source(**kw) -> SourceConfig:
    kw.setdefault("url", ORIGIN + "/")
    return SourceConfig(kind=SourceKind.STATUSPAGE, name="Example", link=ORIGIN, **kw)


@pytest.mark.parametrize(
    "indicator, expected",
    [
        ("none", Status.OK),
        ("operational", Status.OK),
        ("minor", Status.DEGRADED),
        ("maintenance", Status.DEGRADED),
        ("major", Status.OUTAGE),
        ("critical", Status.OUTAGE),
        ("CRITICAL", Status.OUTAGE),
        ("something-new", Status.UNKNOWN),
        ("", Status.UNKNOWN),
        (None, Status.UNKNOWN),
    ],
)
def test_map_indicator(indicator, expected):
    assert map_indicator(indicator) is expected


@pytest.mark.asyncio
async def test_critical_with_incident_uses_incident_name(make_client):
    body = {"status": {"indicator": "critical"}, "incidents": [{"name": "DB outage"}]}
    recorder = Recorder(routes({SUMMARY: httpx.Response(200, json=body)}))
    provider = StatuspageProvider(_source(), make_client(recorder))

    record = await provider.fetch()

    assert record.status is Status.OUTAGE
    assert record.note == "DB outage"
    assert record.link == ORIGIN
    assert [str(r.url) for r in recorder.requests] == [SUMMARY]


@pytest.mark.asyncio
async def test_note_falls_back_to_description(make_client):
    body = {"status": {"indicator": "none", "description": "All Systems Operational"}, "incidents": []}
    client = make_client(routes({SUMMARY: httpx.Response(200, json=body)}))

    record = await StatuspageProvider(_source(), client).fetch()

    assert record.status is Status.OK
    assert record.note == "All Systems Operational"


@pytest.mark.asyncio
async def test_missing_indicator_and_note(make_client):
    client = make_client(routes({SUMMARY: httpx.Response(200, json={})}))

    record = await StatuspageProvider(_source(), client).fetch()

    assert record.status is Status.UNKNOWN
    assert record.note is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "handler",
    [
        connect_error,
        routes({SUMMARY: httpx.Response(503)}),
        routes({SUMMARY: httpx.Response(200, text="<html>not json</html>")}),
        routes({SUMMARY: httpx.Response(200, json=["not", "an", "object"])}),
    ],
    ids=["connect-error", "http-503", "not-json", "not-object"],
)
async def test_failures_become_unreachable(make_client, handler):
    record = await StatuspageProvider(_source(), make_client(handler)).fetch()

    assert record.status is Status.UNKNOWN
    assert record.note == "Source unreachable"
    assert record.link == ORIGIN


@pytest.mark.asyncio
async def test_components_policy(make_client):
    body = {
        "status": {"indicator": "none"},
        "components": [{"status": "operational"}, {"status": "partial_outage"}],
        "incidents": [],
    }
    client = make_client(routes({SUMMARY: httpx.Response(200, json=body)}))
    provider = StatuspageProvider(_source(policy=StatuspagePolicy.COMPONENTS), client)

    record = await provider.fetch()

    assert record.status is Status.DEGRADED
    assert record.note == "Operational"


@pytest.mark.asyncio
async def test_components_policy_all_operational(make_client):
    body = {"components": [{"status": "operational"}], "incidents": []}
    client = make_client(routes({SUMMARY: httpx.Response(200, json=body)}))
    provider = StatuspageProvider(_source(policy=StatuspagePolicy.COMPONENTS), client)

    record = await provider.fetch()

    assert record.status is Status.OK


@pytest.mark.asyncio
async def test_non_string_notes_are_coerced(make_client):
    body = {"status": {"indicator": "minor", "description": {"text": "x"}}, "incidents": [{"name": 503}]}
    client = make_client(routes({SUMMARY: httpx.Response(200, json=body)}))

    record = await StatuspageProvider(_source(), client).fetch()

    assert record.status is Status.DEGRADED
    assert record.note == "503"


@pytest.mark.asyncio
async def test_non_string_description_is_dropped(make_client):
    body = {"status": {"indicator": "none", "description": ["All good"]}, "incidents": []}
    client = make_client(routes({SUMMARY: httpx.Response(200, json=body)}))

    record = await StatuspageProvider(_source(), client).fetch()

    assert record.note is None
