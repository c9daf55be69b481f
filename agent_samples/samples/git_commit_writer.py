"""git_commit_writer — suggest Conventional Commits messages for the current diff."""

from __future__ import annotations

import asyncio
import logging
import sys

from agent_samples.samples._common import (
    ConsolePrinter,
    banner,
    configure_logging,
    open_client,
    run_exchange,
    truncate,
)
from agent_samples.session.models import SessionConfig, SystemMessageConfig, SystemMessageMode
from agent_samples.session.session import AgentClient

logger = logging.getLogger(__name__)

MAX_DIFF_CHARS = 30_000

COMMIT_STYLE_PROMPT = """\
You are an expert at writing git commit messages.
Follow the Conventional Commits specification.
Format: <type>(<scope>): <description>

Types: feat, fix, docs, style, refactor, perf, test, build, ci, chore

Rules:
- Subject line max 72 characters
- Use imperative mood ("add" not "added")
- Don't end subject with period
- Separate subject from body with blank line
- Body should explain what and why, not how

Provide exactly 3 options ranked from best to least, numbered 1-3."""


async def run_git(*args: str, cwd: str | None = None) -> str:
    """Run git and return trimmed stdout; any failure counts as empty output."""
    try:
        process = await asyncio.create_subprocess_exec(
            "git", *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as exc:
        logger.warning("git %s failed to start: %s", " ".join(args), exc)
        return ""
    if process.returncode != 0:
        logger.warning("git %s exited %s: %s", " ".join(args), process.returncode,
                       stderr.decode(errors="replace").strip())
        return ""
    return stdout.decode(errors="replace").strip()


def build_prompt(files: str, diff: str) -> str:
    return (
        "Generate commit messages for these changes:\n\n"
        f"Files changed:\n{files}\n\n"
        f"Diff:\n```\n{diff}\n```"
    )


async def run(argv: list[str], *, client: AgentClient | None = None, cwd: str | None = None) -> int:
    banner("✍️  Git Commit Writer")

    diff = await run_git("diff", "--cached", cwd=cwd)
    files = await run_git("diff", "--cached", "--name-status", cwd=cwd)
    if diff:
        print("📋 Found staged changes.\n")
    else:
        diff = await run_git("diff", cwd=cwd)
        files = await run_git("diff", "--name-status", cwd=cwd)
        if not diff:
            print("ℹ️  No changes detected (staged or unstaged).")
            print("   Stage some changes with 'git add' and run again.")
            return 0
        print("⚠️  No staged changes found. Showing unstaged changes preview.")
        print("   Stage changes with 'git add' before committing.\n")

    if files:
        print("📁 Changed files:")
        for line in files.splitlines():
            print(f"   {line}")
        print()

    diff, truncated = truncate(diff, MAX_DIFF_CHARS)
    if truncated:
        print(f"⚠️  Diff truncated to {MAX_DIFF_CHARS:,} characters.\n")

    config = SessionConfig(
        streaming=True,
        system_message=SystemMessageConfig(mode=SystemMessageMode.APPEND, content=COMMIT_STYLE_PROMPT),
    )
    async with open_client(client) as client:
        async with await client.create_session(config) as session:
            session.on(ConsolePrinter())
            print("💬 Suggested commit messages:\n")
            result = await run_exchange(session, build_prompt(files, diff))

    if result is None:
        return 1
    print('\n✅ Done! Copy your preferred message and use: git commit -m "<message>"')
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
