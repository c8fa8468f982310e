from __future__ import annotations

from typing import Iterable

import httpx

from models.source import SourceConfig, SourceKind
from providers.base import StatusProvider
from providers.feed import FeedProvider
from providers.slack import SlackProvider
from providers.static import StaticProvider
from providers.statuspage import StatuspageProvider
from providers.widget import WidgetProvider

PROVIDER_CLASSES: dict[SourceKind, type[StatusProvider]] = {
    SourceKind.STATUSPAGE: StatuspageProvider,
    SourceKind.SLACK: SlackProvider,
    SourceKind.FEED: FeedProvider,
    SourceKind.WIDGET: WidgetProvider,
    SourceKind.STATIC: StaticProvider,
}


class ProviderRegistry:
    """Central registry of vendor status provider adapters.

    Adding a new vendor requires only a SourceConfig; the provider class is
    picked from its kind when the registry is built.  Order of registration
    is the display order of live results.
    """

    def __init__(self) -> None:
        self._providers: list[StatusProvider] = []

    def register(self, provider: StatusProvider) -> None:
        if any(p.name == provider.name for p in self._providers):
            raise ValueError(f"duplicate vendor name: {provider.name}")
        self._providers.append(provider)

    @property
    def providers(self) -> list[StatusProvider]:
        return list(self._providers)

    @classmethod
    def from_sources(
        cls, sources: Iterable[SourceConfig], client: httpx.AsyncClient
    ) -> ProviderRegistry:
        registry = cls()
        for source in sources:
            registry.register(build_provider(source, client))
        return registry


def build_provider(source: SourceConfig, client: httpx.AsyncClient) -> StatusProvider:
    return PROVIDER_CLASSES[source.kind](source, client)
