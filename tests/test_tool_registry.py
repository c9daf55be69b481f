"""Tests for ToolRegistry — registration, execution, timeout, schemas."""

from __future__ import annotations

import asyncio
import time

import pytest
from pydantic import BaseModel

from agent_samples.session.models import ToolResult
from agent_samples.tools.registry import ToolDef, ToolRegistry


# -- helpers ----------------------------------------------------------------

class EchoInput(BaseModel):
    msg: str


class EchoOutput(BaseModel):
    echo: str


async def _echo_handler(inp: EchoInput) -> dict:
    return {"echo": inp.msg}


async def _slow_handler(inp: EchoInput) -> dict:
    await asyncio.sleep(5)
    return {"echo": inp.msg}


def _make_echo_tool(**overrides) -> ToolDef:
    defaults = dict(
        name="echo",
        description="Echoes input",
        input_model=EchoInput,
        handler=_echo_handler,
    )
    defaults.update(overrides)
    return ToolDef(**defaults)


# -- tests ------------------------------------------------------------------

class TestRegistration:
    def test_duplicate_name_rejected(self):
        registry = ToolRegistry([_make_echo_tool()])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_make_echo_tool())

    def test_names_keep_registration_order(self):
        registry = ToolRegistry([_make_echo_tool(name="b"), _make_echo_tool(name="a")])
        assert registry.names == ["b", "a"]
        assert len(registry) == 2
        assert registry.get("a").name == "a"
        assert registry.get("missing") is None


class TestToolExecution:
    async def test_dict_result_becomes_data(self):
        registry = ToolRegistry([_make_echo_tool()])
        result = await registry.invoke("echo", {"msg": "hi"})
        assert result == ToolResult(success=True, data={"echo": "hi"})

    async def test_sync_handler_and_str_result(self):
        registry = ToolRegistry([_make_echo_tool(handler=lambda inp: inp.msg.upper())])
        result = await registry.invoke("echo", {"msg": "hi"})
        assert result.success and result.message == "HI"

    async def test_model_result_is_dumped(self):
        registry = ToolRegistry([_make_echo_tool(handler=lambda inp: EchoOutput(echo=inp.msg))])
        result = await registry.invoke("echo", {"msg": "x"})
        assert result.data == {"echo": "x"}

    async def test_tool_result_passes_through(self):
        registry = ToolRegistry([_make_echo_tool(handler=lambda inp: ToolResult.fail("nope"))])
        result = await registry.invoke("echo", {"msg": "x"})
        assert result.success is False
        assert result.message == "nope"

    async def test_unknown_tool_is_a_failed_result(self):
        result = await ToolRegistry().invoke("nonexistent", {"msg": "hi"})
        assert result.success is False
        assert "Unknown tool 'nonexistent'" in result.message

    async def test_invalid_arguments(self):
        registry = ToolRegistry([_make_echo_tool()])
        result = await registry.invoke("echo", {"wrong": 1})
        assert result.success is False
        assert result.message.startswith("Invalid arguments for 'echo'")
        assert result.data["errors"]

    async def test_timeout(self):
        registry = ToolRegistry([_make_echo_tool(name="slow", handler=_slow_handler, timeout=0.1)])
        result = await registry.invoke("slow", {"msg": "hi"})
        assert result.success is False
        assert "timed out" in result.message

    async def test_slow_sync_handler_times_out(self):
        def _blocking(inp: EchoInput) -> str:
            time.sleep(0.3)
            return "done"

        registry = ToolRegistry([_make_echo_tool(name="blocking", handler=_blocking, timeout=0.05)])
        t0 = time.perf_counter()
        result = await registry.invoke("blocking", {"msg": "hi"})

        assert result.success is False
        assert "timed out after 0.05s" in result.message
        assert time.perf_counter() - t0 < 0.25

    async def test_sync_handler_does_not_block_the_loop(self):
        ticks = 0

        async def _ticker():
            nonlocal ticks
            while True:
                ticks += 1
                await asyncio.sleep(0.01)

        def _blocking(inp: EchoInput) -> str:
            time.sleep(0.1)
            return inp.msg

        registry = ToolRegistry([_make_echo_tool(handler=_blocking)])
        ticker = asyncio.create_task(_ticker())
        try:
            result = await registry.invoke("echo", {"msg": "hi"})
        finally:
            ticker.cancel()
        assert result.message == "hi"
        assert ticks > 3

    async def test_handler_exception(self):
        async def _broken(inp: EchoInput) -> dict:
            raise RuntimeError("transient failure")

        registry = ToolRegistry([_make_echo_tool(handler=_broken)])
        result = await registry.invoke("echo", {"msg": "ok"})
        assert result == ToolResult(success=False, message="transient failure")

    async def test_trace_record_emitted(self, trace_collector):
        registry = ToolRegistry([_make_echo_tool()])
        await registry.invoke("echo", {"msg": "hi"}, trace_collector=trace_collector, trace_id="t-1")
        await registry.invoke("missing", {}, trace_collector=trace_collector, trace_id="t-1")
        await trace_collector.flush("t-1")

        lines = (trace_collector.trace_dir / "t-1.jsonl").read_text().splitlines()
        # Unknown tools are rejected before anything runs
        assert len(lines) == 1
        assert '"status": "ok"' in lines[0]


class TestOpenAISchemas:
    def test_schema_shape(self):
        schema = _make_echo_tool().openai_schema()
        assert schema["type"] == "function"
        assert schema["function"]["name"] == "echo"
        assert schema["function"]["parameters"]["required"] == ["msg"]

    def test_schemas_empty_when_no_tools(self):
        assert ToolRegistry().openai_schemas() == []
