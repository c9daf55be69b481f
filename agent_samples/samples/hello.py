"""hello — the smallest possible exchange: one prompt, one printed answer."""

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

DEFAULT_PROMPT = "What are 3 cool things about Python's asyncio? Keep it brief."


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    banner("🤖 Hello Agent SDK")
    prompt = " ".join(argv) if argv else DEFAULT_PROMPT

    async with open_client(client) as client:
        async with await client.create_session(SessionConfig()) as session:
            print("✅ Session created")
            session.on(ConsolePrinter())

            print(f"📤 Sending: {prompt}\n")
            print("💬 Agent says:")
            result = await run_exchange(session, prompt)

    if result is None:
        return 1
    print("✅ Done!")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
