"""Tool registry with Pydantic v2 schemas, timeout, and audit."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ValidationError

from agent_samples.session.models import ToolResult
from agent_samples.tracing.interface import TraceCollector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDef:
    """Registration record for a single tool.

    ``input_model`` declares the parameters (name, type, description via
    ``Field``); ``handler`` receives a validated instance of it and may be
    sync or async. Either way the call is bounded by ``timeout``; a sync
    handler runs in a worker thread, which keeps running after a timeout.
    """

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Callable[..., Any]
    timeout: float = 30.0

    def openai_schema(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }


def _to_result(raw: Any) -> ToolResult:
    if isinstance(raw, ToolResult):
        return raw
    if isinstance(raw, str):
        return ToolResult.ok(raw)
    if isinstance(raw, dict):
        return ToolResult(success=True, data=raw)
    if isinstance(raw, BaseModel):
        return ToolResult(success=True, data=raw.model_dump())
    return ToolResult.ok(str(raw))


class ToolRegistry:
    """Fixed set of tools for one session; dispatches calls by name.

    ``invoke`` never raises for tool-level faults: every failure becomes a
    ``ToolResult`` with ``success=False`` so the exchange keeps going.
    """

    def __init__(self, tools: Iterable[ToolDef] = ()) -> None:
        self._tools: dict[str, ToolDef] = {}
        for tool in tools:
            self.register(tool)

    # -- registration -------------------------------------------------------

    def register(self, tool_def: ToolDef) -> None:
        if tool_def.name in self._tools:
            raise ValueError(f"Tool '{tool_def.name}' is already registered")
        self._tools[tool_def.name] = tool_def
        logger.debug("Registered tool %s", tool_def.name)

    def get(self, name: str) -> ToolDef | None:
        return self._tools.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    # -- OpenAI function-calling schemas ------------------------------------

    def openai_schemas(self) -> list[dict[str, Any]]:
        return [tool.openai_schema() for tool in self._tools.values()]

    # -- execution ----------------------------------------------------------

    @staticmethod
    async def _call(tool: ToolDef, validated_input: BaseModel) -> Any:
        if inspect.iscoroutinefunction(tool.handler):
            return await tool.handler(validated_input)
        # Sync handlers run in a worker thread so a slow one cannot stall the loop
        outcome = await asyncio.to_thread(tool.handler, validated_input)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    async def invoke(
        self,
        name: str,
        arguments: dict[str, Any],
        trace_collector: TraceCollector | None = None,
        trace_id: str | None = None,
    ) -> ToolResult:
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("tool=%s not registered", name)
            return ToolResult.fail(f"Unknown tool '{name}'")

        t0 = time.time()
        try:
            validated_input = tool.input_model(**arguments)
            outcome = await asyncio.wait_for(self._call(tool, validated_input), timeout=tool.timeout)
            result = _to_result(outcome)
        except ValidationError as exc:
            result = ToolResult.fail(f"Invalid arguments for '{name}': {exc.error_count()} error(s)",
                                     errors=[e["msg"] for e in exc.errors()])
        except asyncio.TimeoutError:
            result = ToolResult.fail(f"Tool '{name}' timed out after {tool.timeout}s")
        except Exception as exc:
            result = ToolResult.fail(str(exc) or type(exc).__name__)

        latency = time.time() - t0
        if result.success:
            logger.info("tool=%s latency=%.3fs OK", name, latency)
        else:
            logger.warning("tool=%s latency=%.3fs error=%s", name, latency, result.message)
        if trace_collector and trace_id:
            await trace_collector.emit(trace_id, "tool_exec", {
                "tool": name,
                "latency_ms": round(latency * 1000, 2),
                "status": "ok" if result.success else "error",
                "message": result.message if not result.success else "",
            })
        return result
