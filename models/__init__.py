from models.source import SourceConfig, SourceKind, StatuspagePolicy
from models.status import AggregatePayload, FallbackPayload, ServiceRecord, Status

__all__ = [
    "AggregatePayload",
    "FallbackPayload",
    "ServiceRecord",
    "SourceConfig",
    "SourceKind",
    "Status",
    "StatuspagePolicy",
]
