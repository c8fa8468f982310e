from core.aggregator import Aggregator, derive_banner, merge_services
from core.cache import FreshnessPolicy, PayloadCache
from core.config import Settings, default_sources
from core.event_bus import EventBus
from core.registry import ProviderRegistry
from core.scheduler import Scheduler

__all__ = [
    "Aggregator",
    "EventBus",
    "FreshnessPolicy",
    "PayloadCache",
    "ProviderRegistry",
    "Scheduler",
    "Settings",
    "default_sources",
    "derive_banner",
    "merge_services",
]
