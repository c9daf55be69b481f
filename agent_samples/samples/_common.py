"""Helpers shared by the sample programs: logging, console output, client scope."""

from __future__ import annotations

import contextlib
import logging
import os
import sys
from pathlib import Path
from typing import AsyncIterator

from agent_samples import create_client
from agent_samples.session.dispatcher import SessionEventHandler
from agent_samples.session.errors import SessionError
from agent_samples.session.models import (
    AssistantMessageDeltaEvent,
    AssistantMessageEvent,
    ExchangeResult,
    SessionErrorEvent,
    ToolExecutionCompleteEvent,
    ToolExecutionStartEvent,
)
from agent_samples.session.session import AgentClient, AgentSession

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Logs go to stderr so they never interleave with the streamed answer."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def banner(title: str) -> None:
    print(title)
    print("=" * len(title))
    print()


def truncate(text: str, limit: int) -> tuple[str, bool]:
    if len(text) <= limit:
        return text, False
    return text[:limit], True


def read_text_file(path: str) -> str | None:
    """Return the file's text, or print an error and return ``None``."""
    file_path = Path(path)
    if not file_path.is_file():
        print(f"❌ File not found: {path}")
        return None
    return file_path.read_text(encoding="utf-8", errors="replace")


@contextlib.asynccontextmanager
async def open_client(client: AgentClient | None = None) -> AsyncIterator[AgentClient]:
    """Start ``client`` (or one built from the environment) and stop it on exit."""
    client = client or create_client()
    async with client:
        yield client


class ConsolePrinter(SessionEventHandler):
    """Prints an exchange as it happens and keeps the streamed text.

    The complete message is printed only when no deltas were streamed
    (non-streaming sessions).
    """

    def __init__(self, *, show_tools: bool = True) -> None:
        self.show_tools = show_tools
        self.parts: list[str] = []
        self.tools_called: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self.parts)

    def on_message_delta(self, event: AssistantMessageDeltaEvent) -> None:
        self.parts.append(event.delta_content)
        print(event.delta_content, end="", flush=True)

    def on_message(self, event: AssistantMessageEvent) -> None:
        if not self.parts:
            print(event.content, end="")
        print(flush=True)

    def on_tool_start(self, event: ToolExecutionStartEvent) -> None:
        self.tools_called.append(event.tool_name)
        if self.show_tools:
            print(f"\n🔧 Using tool: {event.tool_name}", flush=True)

    def on_tool_complete(self, event: ToolExecutionCompleteEvent) -> None:
        if not self.show_tools:
            return
        if event.result.success:
            print("✓ Tool completed", flush=True)
        else:
            print(f"✗ Tool failed: {event.result.message}", flush=True)

    def on_error(self, event: SessionErrorEvent) -> None:
        print(f"\n❌ Error: {event.message}", flush=True)


async def run_exchange(session: AgentSession, prompt: str) -> ExchangeResult | None:
    """Send and wait; session errors were already printed by the handler."""
    try:
        return await session.send_and_wait(prompt)
    except SessionError as exc:
        logger.info("Exchange failed: %s", exc)
        return None
