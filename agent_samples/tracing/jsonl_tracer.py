"""JSONL file-based trace collector."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from agent_samples.tracing.interface import TraceCollector

logger = logging.getLogger(__name__)


class JSONLTraceCollector(TraceCollector):
    """Appends one JSON line per record to ``<trace_dir>/<exchange_id>.jsonl``.

    Records are buffered per exchange and numbered with ``seq``; the file is
    written when the session flushes the exchange. The directory is created
    on first write.
    """

    def __init__(self, trace_dir: str | Path = "./traces") -> None:
        self._dir = Path(trace_dir)
        self._buffers: dict[str, list[dict[str, Any]]] = {}

    @property
    def trace_dir(self) -> Path:
        return self._dir

    def path_for(self, trace_id: str) -> Path:
        return self._dir / f"{trace_id}.jsonl"

    async def emit(self, trace_id: str, event_type: str, data: dict[str, Any]) -> None:
        buffer = self._buffers.setdefault(trace_id, [])
        buffer.append({
            "ts": time.time(),
            "trace_id": trace_id,
            "seq": len(buffer),
            "event": event_type,
            **data,
        })

    async def flush(self, trace_id: str) -> None:
        records = self._buffers.pop(trace_id, [])
        if not records:
            return
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(trace_id)
        with path.open("a", encoding="utf-8") as f:
            for record in records:
                f.write(json.dumps(record, default=str) + "\n")
        logger.debug("Wrote %d trace record(s) to %s", len(records), path)
