"""custom_tools — let the model call functions defined in this project."""

from __future__ import annotations

import asyncio
import sys

from agent_samples.samples._common import (
    ConsolePrinter,
    banner,
    configure_logging,
    open_client,
    run_exchange,
)
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient
from agent_samples.tools.demo import DEMO_TOOLS

DEFAULT_PROMPT = (
    "What's the weather in Seattle and Austin? Also calculate 42 * 17, "
    "and give me 3 facts about this SDK."
)


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    banner("🔧 Custom Tools")
    prompt = " ".join(argv) if argv else DEFAULT_PROMPT

    async with open_client(client) as client:
        config = SessionConfig(streaming=True, tools=DEMO_TOOLS)
        async with await client.create_session(config) as session:
            print(f"✅ Session created with {len(session.tools)} custom tools:")
            for tool in DEMO_TOOLS:
                print(f"   • {tool.name} — {tool.description}")
            print()

            printer = ConsolePrinter()
            session.on(printer)
            print(f"📤 Prompt: {prompt}\n")
            result = await run_exchange(session, prompt)

    if result is None:
        return 1
    print(f"\n✅ Done! {result.tool_calls} tool call(s) made: {', '.join(printer.tools_called)}")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
