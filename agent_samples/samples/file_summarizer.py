"""file_summarizer — summarize any text file as prose or bullet points."""

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
    truncate,
)
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient

MAX_CHARS = 50_000

USAGE = """\
Usage: agent-summarize <file-path> [--bullets]

Options:
  --bullets    Output as bullet points instead of prose

Examples:
  agent-summarize README.md
  agent-summarize docs/notes.txt --bullets"""


def build_prompt(name: str, content: str, bullets: bool) -> str:
    style = "Use bullet points for each key point." if bullets else "Write a concise prose summary."
    return (
        f"Summarize the following file ({name}).\n"
        f"{style}\n"
        "Focus on the most important information and key takeaways.\n"
        "Keep the summary under 300 words.\n\n"
        f"---\n{content}\n---"
    )


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    positional = [a for a in argv if not a.startswith("--")]
    if not positional:
        print(USAGE)
        return 1
    bullets = "--bullets" in argv

    content = read_text_file(positional[0])
    if content is None:
        return 1
    path = Path(positional[0])

    banner("📄 File Summarizer")
    print(f"📁 File: {path}")
    print(f"📏 Size: {len(content.splitlines())} lines, {len(content):,} characters\n")

    content, truncated = truncate(content, MAX_CHARS)
    if truncated:
        print(f"⚠️  File truncated to first {MAX_CHARS:,} characters for summarization.\n")

    async with open_client(client) as client:
        async with await client.create_session(SessionConfig(streaming=True)) as session:
            session.on(ConsolePrinter())
            print("📝 Summary:\n")
            result = await run_exchange(session, build_prompt(path.name, content, bullets))

    if result is None:
        return 1
    print("\n✅ Summarization complete.")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
