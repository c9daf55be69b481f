"""Log analysis tools, bound to one loaded log file."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from agent_samples.session.models import ToolResult
from agent_samples.tools.registry import ToolDef

ERROR_MARKERS = ("error", "fatal", "exception")
MAX_ERRORS_SCANNED = 50
MAX_ERRORS_REPORTED = 20
MAX_PATTERN_EXAMPLES = 5
MAX_SLOW_OPERATIONS = 20
MAX_ENTRY_CHARS = 200

_LONG_MILLIS = re.compile(r"\d{4,}ms", re.IGNORECASE)


# -- pure helpers ---------------------------------------------------------------

def extract_errors(content: str) -> ToolResult:
    errors: list[str] = []
    for line in content.split("\n"):
        lowered = line.lower()
        if any(marker in lowered for marker in ERROR_MARKERS):
            errors.append(line.strip())
            if len(errors) >= MAX_ERRORS_SCANNED:
                break
    top = errors[:MAX_ERRORS_REPORTED]
    return ToolResult.ok(
        f"{len(errors)} error line(s) found",
        error_count=len(errors),
        errors=top,
    )


def count_pattern(content: str, pattern: str) -> ToolResult:
    if not pattern.strip():
        return ToolResult.fail("pattern must not be empty")
    needle = pattern.lower()
    count = 0
    examples: list[str] = []
    for line in content.split("\n"):
        if needle in line.lower():
            count += 1
            if len(examples) < MAX_PATTERN_EXAMPLES:
                examples.append(line.strip())
    return ToolResult.ok(
        f"'{pattern}' occurs on {count} line(s)",
        pattern=pattern,
        count=count,
        examples=examples,
    )


def get_time_range(content: str) -> ToolResult:
    lines = [line for line in content.split("\n") if line]
    first = lines[0][:MAX_ENTRY_CHARS] if lines else ""
    last = lines[-1][:MAX_ENTRY_CHARS] if lines else ""
    return ToolResult.ok(
        f"{len(lines)} non-empty line(s)",
        total_lines=len(lines),
        first_entry=first,
        last_entry=last,
    )


def find_slow_operations(content: str) -> ToolResult:
    slow: list[str] = []
    for line in content.split("\n"):
        lowered = line.lower()
        has_timing = "ms" in lowered or "seconds" in lowered
        looks_slow = "slow" in lowered or "timeout" in lowered or _LONG_MILLIS.search(line)
        if has_timing and looks_slow:
            slow.append(line.strip())
            if len(slow) >= MAX_SLOW_OPERATIONS:
                break
    return ToolResult.ok(f"{len(slow)} slow operation(s)", slow_operations=slow)


def sample_log(content: str, max_chars: int = 50_000, sample_lines: int = 200) -> str:
    """Keep the first, middle and last ``sample_lines`` lines of a large log."""
    if len(content) <= max_chars:
        return content
    lines = content.split("\n")
    middle = len(lines) // 2
    return (
        "\n".join(lines[:sample_lines])
        + "\n\n... (middle section omitted) ...\n\n"
        + "\n".join(lines[middle:middle + sample_lines])
        + "\n\n... (more content omitted) ...\n\n"
        + "\n".join(lines[-sample_lines:])
    )


# -- tool definitions -------------------------------------------------------------

class _NoInput(BaseModel):
    pass


class CountPatternInput(BaseModel):
    pattern: str = Field(description="Pattern to search for (case-insensitive)")


def make_log_tools(content: str) -> list[ToolDef]:
    """Factory — binds the loaded log text into each tool handler."""

    def _extract(_: _NoInput) -> ToolResult:
        return extract_errors(content)

    def _count(inp: CountPatternInput) -> ToolResult:
        return count_pattern(content, inp.pattern)

    def _range(_: _NoInput) -> ToolResult:
        return get_time_range(content)

    def _slow(_: _NoInput) -> ToolResult:
        return find_slow_operations(content)

    return [
        ToolDef(
            name="extract_errors",
            description="Extract error and exception lines from the log",
            input_model=_NoInput,
            handler=_extract,
        ),
        ToolDef(
            name="count_pattern",
            description="Count occurrences of a pattern in the log",
            input_model=CountPatternInput,
            handler=_count,
        ),
        ToolDef(
            name="get_time_range",
            description="Get the first and last entries covered by the log",
            input_model=_NoInput,
            handler=_range,
        ),
        ToolDef(
            name="find_slow_operations",
            description="Find operations that took a long time",
            input_model=_NoInput,
            handler=_slow,
        ),
    ]
