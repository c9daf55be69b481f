"""streaming_chat — print a response token by token as it arrives."""

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

DEFAULT_PROMPT = "Write a short poem about Python and AI working together. Be creative!"


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    banner("🌊 Streaming Chat")
    prompt = " ".join(argv) if argv else DEFAULT_PROMPT

    async with open_client(client) as client:
        async with await client.create_session(SessionConfig(streaming=True)) as session:
            session.on(ConsolePrinter())
            print(f"📤 Prompt: {prompt}\n")
            print("💬 ", end="", flush=True)
            result = await run_exchange(session, prompt)

    if result is None:
        return 1
    print("\n✅ Streaming complete.")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
