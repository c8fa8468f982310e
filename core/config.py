"""Process-wide configuration.

Built once at start-up from ``STATUS_*`` environment variables (or a
``.env`` file) and passed explicitly to whatever needs it; providers never
read the environment themselves.
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.cache import FreshnessPolicy
from models.source import SourceConfig, SourceKind
from providers.slack import DEFAULT_SLACK_URL

DEFAULT_FEED_URL = "https://status.aws.amazon.com/rss/connect-us-east-1.rss"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STATUS_", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    timeout: float = Field(default=8.0, gt=0)
    feed_urls: str = DEFAULT_FEED_URL
    feed_window_hours: float = Field(default=12.0, gt=0)
    widget_url: str | None = None
    slack_url: str = DEFAULT_SLACK_URL
    fallback_source: str | None = None
    poll_interval: int = Field(default=300, ge=1)
    cache_ttl: int = Field(default=300, ge=0)
    stale_ttl: int = Field(default=300, ge=0)
    log_level: str = "INFO"
    snapshot_path: str | None = None

    @property
    def feed_url_list(self) -> tuple[str, ...]:
        """Comma-separated ``feed_urls`` split into a tuple, blanks dropped."""
        return tuple(u.strip() for u in self.feed_urls.split(",") if u.strip())

    def freshness_policy(self) -> FreshnessPolicy:
        return FreshnessPolicy(s_maxage=self.cache_ttl, stale_while_revalidate=self.stale_ttl)


def _statuspage(name: str, origin: str) -> SourceConfig:
    return SourceConfig(kind=SourceKind.STATUSPAGE, name=name, url=origin, link=origin + "/")


def default_sources(settings: Settings) -> tuple[SourceConfig, ...]:
    """The monitored vendors, in display order."""
    return (
        _statuspage("Atlassian (Jira/Confluence)", "https://status.atlassian.com"),
        _statuspage("Zoom", "https://status.zoom.us"),
        _statuspage("Ashby", "https://status.ashbyhq.com"),
        _statuspage("Bob (HiBob)", "https://status.hibob.io"),
        SourceConfig(
            kind=SourceKind.SLACK,
            name="Slack",
            url=settings.slack_url,
            link="https://slack-status.com/",
        ),
        SourceConfig(
            kind=SourceKind.WIDGET,
            name="incident.io",
            url=settings.widget_url,
            link="https://status.incident.io/",
        ),
        SourceConfig(
            kind=SourceKind.FEED,
            name="Amazon Connect (us-east-1)",
            feed_urls=settings.feed_url_list,
            window_hours=settings.feed_window_hours,
            link="https://health.aws.amazon.com/health/status",
        ),
    )
