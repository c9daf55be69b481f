"""browser_agent — let the model drive a headless Chromium page via Playwright."""

from __future__ import annotations

import asyncio
import contextlib
import os
import sys
from typing import Any, AsyncContextManager, Callable

from agent_samples.samples._common import (
    ConsolePrinter,
    banner,
    configure_logging,
    open_client,
    run_exchange,
)
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient
from agent_samples.tools.browser import BrowserToolContext, open_page

DEFAULT_TASK = "Describe what you see on the page"

USAGE = """\
Usage: agent-browser <url> [task-description]

Examples:
  agent-browser https://example.com
  agent-browser https://github.com "Find the trending repositories\""""


def build_prompt(url: str, task: str) -> str:
    return (
        "You are a browser automation assistant. Use the provided tools to complete this task:\n\n"
        f"Target URL: {url}\n"
        f"Task: {task}\n\n"
        "First, navigate to the URL, then analyze the page content and complete the requested task.\n"
        "Use the tools in sequence as needed. Be specific about what you find."
    )


async def run(
    argv: list[str],
    *,
    client: AgentClient | None = None,
    page_factory: Callable[[], AsyncContextManager[Any]] | None = None,
) -> int:
    if not argv:
        print(USAGE)
        return 1
    url = argv[0]
    task = " ".join(argv[1:]) or DEFAULT_TASK

    banner("🌐 Browser Agent")
    print(f"📍 Target: {url}")
    print(f"🎯 Task: {task}\n")

    headless = os.environ.get("BROWSER_HEADLESS", "1") != "0"
    page_scope = page_factory() if page_factory else open_page(headless=headless)

    async with contextlib.AsyncExitStack() as stack:
        page = await stack.enter_async_context(page_scope)
        browser_tools = BrowserToolContext(page)
        client = await stack.enter_async_context(open_client(client))
        session = await stack.enter_async_context(
            await client.create_session(SessionConfig(streaming=True, tools=browser_tools.tools()))
        )
        session.on(ConsolePrinter())
        result = await run_exchange(session, build_prompt(url, task))

    if result is None:
        return 1
    print("\n✅ Automation complete!")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
