"""log_analyzer — find errors, security issues and slow spots in a log file."""

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
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient
from agent_samples.tools.logs import make_log_tools, sample_log

USAGE = """\
Usage: agent-logs <log-file-path> [analysis-type]

Analysis types:
  errors       Find and categorize all errors
  security     Identify potential security issues
  performance  Find performance bottlenecks
  summary      General overview (default)

Example:
  agent-logs app.log errors"""

ANALYSIS_STEPS = {
    "errors": (
        "Analyze this log file and provide a detailed error analysis:\n"
        "1. Extract all errors/exceptions using the extract_errors tool\n"
        "2. Categorize the errors by type\n"
        "3. Identify the most frequent errors\n"
        "4. Suggest potential root causes\n"
        "5. Recommend fixes"
    ),
    "security": (
        "Perform a security-focused analysis of this log file:\n"
        "1. Look for failed authentication attempts (use count_pattern)\n"
        "2. Identify suspicious patterns or potential attacks\n"
        "3. Check for sensitive data exposure\n"
        "4. Look for unusual access patterns\n"
        "5. Provide security recommendations"
    ),
    "performance": (
        "Analyze this log file for performance issues:\n"
        "1. Find slow operations using find_slow_operations\n"
        "2. Identify performance bottlenecks\n"
        "3. Look for timeout patterns\n"
        "4. Check for resource exhaustion indicators\n"
        "5. Provide performance optimization suggestions"
    ),
    "summary": (
        "Provide a comprehensive analysis of this log file:\n"
        "1. Use get_time_range to understand the coverage\n"
        "2. Extract and categorize errors\n"
        "3. Identify key patterns and trends\n"
        "4. Highlight any concerning issues\n"
        "5. Provide actionable recommendations"
    ),
}


def build_prompt(analysis_type: str, log_sample: str) -> str:
    steps = ANALYSIS_STEPS.get(analysis_type, ANALYSIS_STEPS["summary"])
    return f"{steps}\n\nLog file (sample):\n{log_sample}"


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    if not argv:
        print(USAGE)
        return 1
    analysis_type = argv[1].lower() if len(argv) > 1 else "summary"

    content = read_text_file(argv[0])
    if content is None:
        return 1

    banner("📊 Log Analyzer")
    size_mb = Path(argv[0]).stat().st_size / (1024 * 1024)
    print(f"📁 File: {argv[0]}")
    print(f"🔍 Analysis: {analysis_type}")
    print(f"📏 File size: {size_mb:.2f} MB")
    print(f"📝 Lines: {len(content.splitlines()):,}\n")

    # Tools see the whole log; the prompt only carries a sample of it
    config = SessionConfig(streaming=True, tools=make_log_tools(content))
    async with open_client(client) as client:
        async with await client.create_session(config) as session:
            session.on(ConsolePrinter())
            result = await run_exchange(session, build_prompt(analysis_type, sample_log(content)))

    if result is None:
        return 1
    print("\n✅ Analysis complete!")
    print("💡 Tip: Try different analysis types: errors, security, performance")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
