from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from core.config import DEFAULT_FEED_URL, Settings, default_sources
from core.fallback import load_fallback, parse_fallback
from models.source import SourceKind
from models.status import Status
from tests.helpers import connect_error, routes


def test_defaults(monkeypatch):
    for key in ("STATUS_WIDGET_URL", "STATUS_FEED_URLS", "STATUS_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings(_env_file=None)

    assert settings.timeout == 8.0
    assert settings.widget_url is None
    assert settings.feed_url_list == (DEFAULT_FEED_URL,)


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STATUS_FEED_URLS", " https://a.example/rss , ,https://b.example/rss")
    monkeypatch.setenv("STATUS_WIDGET_URL", "https://widget.example/api")
    monkeypatch.setenv("STATUS_TIMEOUT", "5")

    settings = Settings(_env_file=None)
    sources = {s.name: s for s in default_sources(settings)}

    assert settings.timeout == 5.0
    assert sources["incident.io"].url == "https://widget.example/api"
    assert sources["Amazon Connect (us-east-1)"].feed_urls == (
        "https://a.example/rss",
        "https://b.example/rss",
    )


def test_default_sources_cover_every_kind_but_static(monkeypatch):
    monkeypatch.delenv("STATUS_WIDGET_URL", raising=False)

    sources = default_sources(Settings(_env_file=None))

    kinds = {s.kind for s in sources}
    assert kinds == {SourceKind.STATUSPAGE, SourceKind.SLACK, SourceKind.WIDGET, SourceKind.FEED}
    assert len({s.name for s in sources}) == len(sources)


def test_parse_fallback_skips_nameless_and_normalises_status():
    raw = {
        "banner": "Manual banner",
        "services": [
            {"name": "Payroll", "status": "Degraded", "note": "Slow exports"},
            {"status": "ok"},
            {"name": "Badge readers", "status": "flaky"},
            "garbage",
        ],
    }

    payload = parse_fallback(raw)

    assert payload.banner == "Manual banner"
    assert [(s.name, s.status) for s in payload.services] == [
        ("Payroll", Status.DEGRADED),
        ("Badge readers", Status.UNKNOWN),
    ]


@pytest.mark.asyncio
async def test_load_fallback_from_file(tmp_path):
    path = tmp_path / "services.json"
    path.write_text(json.dumps({"services": [{"name": "Payroll", "status": "ok"}]}))

    payload = await load_fallback(str(path))

    assert payload is not None
    assert payload.banner is None
    assert payload.services[0].name == "Payroll"


@pytest.mark.asyncio
async def test_load_fallback_from_url(make_client):
    url = "https://dash.example.com/services.json"
    client = make_client(routes({url: httpx.Response(200, json={"banner": "Hi", "services": []})}))

    payload = await load_fallback(url, client)

    assert payload is not None
    assert payload.banner == "Hi"


@pytest.mark.asyncio
async def test_load_fallback_failures_return_none(tmp_path, make_client):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")

    assert await load_fallback(None) is None
    assert await load_fallback(str(tmp_path / "missing.json")) is None
    assert await load_fallback(str(broken)) is None
    assert await load_fallback("https://dash.example.com/services.json", make_client(connect_error)) is None


def test_freshness_policy_from_settings(monkeypatch):
    monkeypatch.setenv("STATUS_CACHE_TTL", "60")
    monkeypatch.setenv("STATUS_STALE_TTL", "120")

    policy = Settings(_env_file=None).freshness_policy()

    assert policy.s_maxage == 60
    assert policy.stale_while_revalidate == 120
    assert policy.cache_control() == "public, max-age=0, s-maxage=60, stale-while-revalidate=120"


@pytest.mark.asyncio
async def test_load_fallback_reads_file_off_the_event_loop(tmp_path, monkeypatch):
    path = tmp_path / "services.json"
    path.write_text(json.dumps({"services": [{"name": "Payroll", "status": "ok"}]}))
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, *args, **kwargs):
        offloaded.append(func)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr("core.fallback.asyncio.to_thread", recording_to_thread)

    payload = await load_fallback(str(path))

    assert payload is not None
    assert len(offloaded) == 1
