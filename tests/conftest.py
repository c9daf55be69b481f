"""Shared fixtures for agent_samples tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from agent_samples.session.backend import ScriptedBackend
from agent_samples.session.models import BackendTurn, SessionEventType, ToolCallRequest
from agent_samples.session.session import AgentClient
from agent_samples.tracing.jsonl_tracer import JSONLTraceCollector


class EventRecorder:
    """Handler that keeps every event it sees."""

    def __init__(self) -> None:
        self.events = []

    def __call__(self, event) -> None:
        self.events.append(event)

    @property
    def types(self) -> list[SessionEventType]:
        return [e.type for e in self.events]

    def of_type(self, event_type: SessionEventType) -> list:
        return [e for e in self.events if e.type == event_type]


class FakeLocator:
    def __init__(self, page: FakePage, text: str) -> None:
        self._page = page
        self._text = text

    @property
    def first(self) -> FakeLocator:
        return self

    async def click(self) -> None:
        if self._text not in self._page.body:
            raise RuntimeError(f"Timeout 30000ms exceeded waiting for text={self._text!r}")
        self._page.actions.append(("click_text", self._text))


class FakePage:
    """Just enough of a Playwright page for the browser tools."""

    def __init__(self, body: str = "Example Domain\nMore information...", title: str = "Example Domain") -> None:
        self.body = body
        self._title = title
        self.url = "about:blank"
        self.actions: list[tuple] = []
        self.selectors = {"#search", ".submit", "form > input"}

    async def goto(self, url: str) -> None:
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Protocol error (Page.navigate): Cannot navigate to invalid URL {url}")
        self.url = url
        self.actions.append(("goto", url))

    async def wait_for_load_state(self, state: str) -> None:
        self.actions.append(("wait", state))

    async def title(self) -> str:
        return self._title

    async def evaluate(self, script: str) -> str:
        return self.body

    async def click(self, selector: str) -> None:
        if selector not in self.selectors:
            raise RuntimeError(f"Timeout 30000ms exceeded waiting for selector {selector!r}")
        self.actions.append(("click", selector))

    def get_by_text(self, text: str) -> FakeLocator:
        return FakeLocator(self, text)

    async def fill(self, selector: str, value: str) -> None:
        if selector not in self.selectors:
            raise RuntimeError(f"Timeout 30000ms exceeded waiting for selector {selector!r}")
        self.actions.append(("fill", selector, value))

    async def screenshot(self, path: str) -> None:
        Path(path).write_bytes(b"\x89PNG fake")
        self.actions.append(("screenshot", path))


def tool_call(name: str, call_id: str = "call-1", **arguments) -> BackendTurn:
    return BackendTurn(tool_calls=[ToolCallRequest(id=call_id, name=name, arguments=arguments)])


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def trace_collector(tmp_path):
    return JSONLTraceCollector(trace_dir=str(tmp_path / "traces"))


@pytest.fixture
def make_client(trace_collector):
    """Build a not-yet-started client over a scripted backend."""

    def _make(responses, *, delay: float = 0.0, **kwargs) -> AgentClient:
        return AgentClient(ScriptedBackend(responses, delay=delay), trace_collector=trace_collector, **kwargs)

    return _make


@pytest.fixture
def fake_page():
    return FakePage()
