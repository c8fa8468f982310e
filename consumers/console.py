from __future__ import annotations

from consumers.base import PayloadConsumer
from models.status import AggregatePayload


def format_payload(payload: AggregatePayload) -> str:
    lines = [f"[{payload.last_updated_iso}] {payload.banner}"]
    for s in payload.services:
        line = f"  {s.status.value.upper():<9} {s.name}"
        if s.note:
            line += f" -- {s.note}"
        lines.append(line)
    return "\n".join(lines) + "\n"


class ConsoleConsumer(PayloadConsumer):
    """Reactive consumer that prints each aggregate to stdout."""

    async def process(self, payload: AggregatePayload) -> None:
        print(format_payload(payload), flush=True)
