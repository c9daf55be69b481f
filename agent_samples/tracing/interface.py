"""Trace collectors — per-exchange structured records, no internal deps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class TraceCollector(ABC):
    """Receives the records of one exchange at a time, keyed by exchange id.

    The session emits ``send``, ``backend_call``, ``tool_exec`` and
    ``exchange_done`` records, then calls ``flush`` once the exchange has
    reached its terminal event.
    """

    @abstractmethod
    async def emit(self, trace_id: str, event_type: str, data: dict[str, Any]) -> None: ...

    @abstractmethod
    async def flush(self, trace_id: str) -> None: ...


class InMemoryTraceCollector(TraceCollector):
    """Keeps flushed records in ``exchanges`` instead of writing them anywhere."""

    def __init__(self) -> None:
        self._pending: dict[str, list[dict[str, Any]]] = {}
        self.exchanges: dict[str, list[dict[str, Any]]] = {}

    async def emit(self, trace_id: str, event_type: str, data: dict[str, Any]) -> None:
        self._pending.setdefault(trace_id, []).append({"event": event_type, **data})

    async def flush(self, trace_id: str) -> None:
        records = self._pending.pop(trace_id, [])
        if records:
            self.exchanges.setdefault(trace_id, []).extend(records)

    def events(self, trace_id: str) -> list[str]:
        return [record["event"] for record in self.exchanges.get(trace_id, [])]
