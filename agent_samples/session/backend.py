"""Agent backend — ABC, OpenAI implementation, and offline backends."""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

from agent_samples.session.models import BackendTurn, ToolCallRequest

logger = logging.getLogger(__name__)

DeltaCallback = Callable[[str], None]


class AgentBackend(ABC):
    """Opaque model service. One call == one model turn.

    When ``on_delta`` is given the backend streams: every text fragment is
    passed to it in emission order, and the returned turn carries the
    aggregated text.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> BackendTurn: ...

    async def aclose(self) -> None:
        """Release transport resources. Default: nothing to release."""


def _parse_arguments(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Model sent non-JSON tool arguments: %.200s", raw)
        return {}
    return parsed if isinstance(parsed, dict) else {}


# ---------------------------------------------------------------------------
# OpenAI implementation
# ---------------------------------------------------------------------------

class OpenAIBackend(AgentBackend):
    def __init__(self, api_key: str | None = None, base_url: str | None = None) -> None:
        # Late import so the rest of the package works without openai installed
        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> BackendTurn:
        kwargs: dict[str, Any] = {"model": model, "messages": messages}
        if tools:
            kwargs["tools"] = tools

        if on_delta is None:
            response = await self._client.chat.completions.create(**kwargs)
            choice = response.choices[0]
            if choice.message.tool_calls:
                return BackendTurn(content=choice.message.content or None, tool_calls=[
                    ToolCallRequest(
                        id=tc.id,
                        name=tc.function.name,
                        arguments=_parse_arguments(tc.function.arguments),
                    )
                    for tc in choice.message.tool_calls
                ])
            return BackendTurn(content=choice.message.content or "")

        stream = await self._client.chat.completions.create(stream=True, **kwargs)
        parts: list[str] = []
        # Tool calls arrive as fragments keyed by index
        pending: dict[int, dict[str, str]] = {}
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            if delta.content:
                parts.append(delta.content)
                on_delta(delta.content)
            for tc in delta.tool_calls or []:
                slot = pending.setdefault(tc.index, {"id": "", "name": "", "arguments": ""})
                if tc.id:
                    slot["id"] = tc.id
                if tc.function is not None:
                    slot["name"] += tc.function.name or ""
                    slot["arguments"] += tc.function.arguments or ""

        if pending:
            return BackendTurn(content="".join(parts) or None, tool_calls=[
                ToolCallRequest(
                    id=slot["id"] or f"call-{index}",
                    name=slot["name"],
                    arguments=_parse_arguments(slot["arguments"]),
                )
                for index, slot in sorted(pending.items())
            ])
        return BackendTurn(content="".join(parts))

    async def aclose(self) -> None:
        await self._client.close()


# ---------------------------------------------------------------------------
# Test backend — deterministic, pre-loaded turns
# ---------------------------------------------------------------------------

class ScriptedBackend(AgentBackend):
    """Returns pre-configured turns in order. Used in unit tests.

    A script entry that is an exception instance is raised instead of
    returned. Text is "streamed" word by word when a delta callback is given.
    """

    def __init__(self, responses: list[BackendTurn | Exception], delay: float = 0.0) -> None:
        self._responses = list(responses)
        self._delay = delay
        self._call_index = 0
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> BackendTurn:
        self.calls.append({"messages": list(messages), "model": model, "tools": tools})
        if self._delay:
            await asyncio.sleep(self._delay)

        if self._call_index >= len(self._responses):
            turn: BackendTurn | Exception = BackendTurn(content="[scripted responses exhausted]")
        else:
            turn = self._responses[self._call_index]
            self._call_index += 1

        if isinstance(turn, Exception):
            raise turn

        if on_delta is not None and turn.content:
            words = turn.content.split(" ")
            for i, word in enumerate(words):
                on_delta(word if i == len(words) - 1 else word + " ")
        return turn

    @property
    def call_count(self) -> int:
        return self._call_index


# ---------------------------------------------------------------------------
# Demo backend — context-aware, for running without an API key
# ---------------------------------------------------------------------------

class DemoBackend(AgentBackend):
    """Walks through the full tool-calling loop without a real model.

    Behaviour:
    1. If the last message is a tool result → answer with a summary of it.
    2. If tools are available → call the first one, filling required
       arguments from the user prompt.
    3. Otherwise → echo a short canned answer.
    """

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        on_delta: DeltaCallback | None = None,
    ) -> BackendTurn:
        last = messages[-1] if messages else {}
        user_text = next(
            (m["content"] for m in reversed(messages) if m.get("role") == "user" and m.get("content")),
            "",
        )

        if last.get("role") == "tool":
            content = f"[{model} demo] Based on the tool output: {last.get('content', '')[:300]}"
        elif tools:
            function = tools[0]["function"]
            return BackendTurn(tool_calls=[
                ToolCallRequest(
                    id="demo-call-1",
                    name=function["name"],
                    arguments=self._fill_arguments(function.get("parameters", {}), user_text),
                ),
            ])
        else:
            content = (
                f"[{model} demo] You asked: {user_text[:200]} "
                "Set OPENAI_API_KEY for real model output."
            )

        if on_delta is not None:
            words = content.split(" ")
            for i, word in enumerate(words):
                on_delta(word if i == len(words) - 1 else word + " ")
        return BackendTurn(content=content)

    @staticmethod
    def _fill_arguments(schema: dict[str, Any], user_text: str) -> dict[str, Any]:
        defaults = {"string": user_text[:200], "integer": 3, "number": 1.0, "boolean": True}
        arguments: dict[str, Any] = {}
        for name in schema.get("required", []):
            kind = schema.get("properties", {}).get(name, {}).get("type", "string")
            arguments[name] = defaults.get(kind, user_text[:200])
        return arguments
