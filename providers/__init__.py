from providers.base import StatusProvider
from providers.feed import FeedProvider
from providers.slack import SlackProvider
from providers.static import StaticProvider
from providers.statuspage import StatuspageProvider
from providers.widget import WidgetProvider

__all__ = [
    "FeedProvider",
    "SlackProvider",
    "StaticProvider",
    "StatusProvider",
    "StatuspageProvider",
    "WidgetProvider",
]
