"""interactive_chat — a terminal REPL over one streaming session.

Commands: ``exit``/``quit`` leave, ``clear`` throws the session away and
starts a fresh one. A failed exchange is reported and the loop continues.
"""

from __future__ import annotations

import asyncio
import sys
from typing import Callable

from agent_samples.samples._common import (
    ConsolePrinter,
    banner,
    configure_logging,
    open_client,
    run_exchange,
)
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient

EXIT_COMMANDS = {"exit", "quit"}
CLEAR_COMMAND = "clear"


async def run(
    argv: list[str],
    *,
    client: AgentClient | None = None,
    input_fn: Callable[[str], str] = input,
) -> int:
    banner("💬 Interactive Chat")
    print("Type your messages below. Type 'exit' or 'quit' to end.")
    print("Type 'clear' to start a new session.\n")

    async with open_client(client) as client:
        config = SessionConfig(streaming=True)
        session = await client.create_session(config)
        print(f"✅ Connected (model: {session.model})\n")
        try:
            while True:
                try:
                    line = await asyncio.to_thread(input_fn, "You > ")
                except EOFError:
                    print()
                    break

                text = line.strip()
                if not text:
                    continue
                if text.lower() in EXIT_COMMANDS:
                    print("👋 Goodbye!")
                    break
                if text.lower() == CLEAR_COMMAND:
                    await session.aclose()
                    session = await client.create_session(config)
                    print("🔄 Session cleared. Starting fresh.\n")
                    continue

                print("AI  > ", end="", flush=True)
                with session.on(ConsolePrinter(show_tools=False)):
                    await run_exchange(session, text)
                print()
        finally:
            await session.aclose()
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
