"""code_reviewer — review a source file with a reviewer system message."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from agent_samples.samples._common import (
    ConsolePrinter,
    banner,
    configure_logging,
    open_client,
    read_text_file,
    run_exchange,
)
from agent_samples.session.models import SessionConfig, SystemMessageConfig, SystemMessageMode
from agent_samples.session.session import AgentClient

USAGE = """\
Usage: agent-review <file-path>

Examples:
  agent-review app.py
  agent-review src/service.py"""

REVIEWER_PROMPT = """\
You are a senior code reviewer. When reviewing code:
1. Identify bugs, potential issues, and security concerns
2. Suggest performance improvements
3. Comment on code style and readability
4. Highlight what's done well
5. Keep feedback constructive and actionable
Format your review with clear sections and use markdown."""


def build_prompt(path: Path, content: str) -> str:
    language = path.suffix.lstrip(".") or "text"
    return (
        f"Please review the following {language} file ({path.name}):\n\n"
        f"```{language}\n{content}\n```"
    )


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    if not argv:
        print(USAGE)
        return 1

    content = read_text_file(argv[0])
    if content is None:
        return 1
    path = Path(argv[0])

    banner("📋 Code Reviewer")
    print(f"📄 Reviewing: {path} ({len(content.splitlines())} lines)\n")

    config = SessionConfig(
        streaming=True,
        system_message=SystemMessageConfig(mode=SystemMessageMode.APPEND, content=REVIEWER_PROMPT),
    )
    async with open_client(client) as client:
        async with await client.create_session(config) as session:
            session.on(ConsolePrinter())
            result = await run_exchange(session, build_prompt(path, content))

    if result is None:
        return 1
    print("\n✅ Review complete.")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
