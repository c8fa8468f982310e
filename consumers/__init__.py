from consumers.base import PayloadConsumer
from consumers.console import ConsoleConsumer
from consumers.snapshot import SnapshotConsumer

__all__ = ["ConsoleConsumer", "PayloadConsumer", "SnapshotConsumer"]
