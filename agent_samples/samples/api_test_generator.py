"""api_test_generator — turn an OpenAPI spec into pytest, Postman or curl tests."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import httpx

from agent_samples.samples._common import (
    ConsolePrinter,
    banner,
    configure_logging,
    open_client,
    run_exchange,
)
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient
from agent_samples.tools.openapi import make_openapi_tools

logger = logging.getLogger(__name__)

USAGE = """\
Usage: agent-api-tests <openapi-url-or-file> [format]

Formats:
  pytest   Generate a pytest test module (default)
  postman  Generate a Postman collection
  curl     Generate curl commands

Examples:
  agent-api-tests https://api.example.com/openapi.json
  agent-api-tests openapi.json postman"""

OUTPUT_FILES = {
    "pytest": "test_api.py",
    "postman": "api-tests.postman_collection.json",
    "curl": "api-tests.sh",
}

INSTRUCTIONS = {
    "postman": (
        "Generate a Postman collection for this API.\n"
        "1. Parse all endpoints from the spec using parse_endpoints\n"
        "2. Analyze authentication using analyze_auth\n"
        "3. For each endpoint, create Postman requests with:\n"
        "   - Variables for base URL and auth tokens\n"
        "   - Request examples with sample payloads\n"
        "   - Tests for status codes and response validation\n"
        "4. Generate the complete Postman collection JSON"
    ),
    "curl": (
        "Generate curl command examples for testing this API.\n"
        "1. Parse all endpoints\n"
        "2. Analyze authentication requirements\n"
        "3. For each endpoint, generate:\n"
        "   - Basic curl command with proper method\n"
        "   - Example with authentication headers\n"
        "   - Example with request body (for POST/PUT)\n"
        "   - Common error case examples"
    ),
    "pytest": (
        "Generate pytest test cases for this API.\n"
        "1. Parse all endpoints using parse_endpoints\n"
        "2. Analyze authentication using analyze_auth\n"
        "3. For each major endpoint, use generate_test_cases to create test scenarios\n"
        "4. Generate a Python test module using httpx with:\n"
        "   - A fixture providing a client with base URL and authentication\n"
        "   - Test functions for happy path and error cases\n"
        "   - Assertions for status codes and response validation\n"
        "   - Descriptive test names\n\n"
        "Format the output as a complete, runnable pytest module."
    ),
}


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


async def load_spec(source: str) -> str:
    """Download or read the spec. Raises on any failure."""
    if is_url(source):
        print("⬇️  Downloading spec...")
        async with httpx.AsyncClient(timeout=30.0, follow_redirects=True) as http:
            response = await http.get(source)
            response.raise_for_status()
            return response.text
    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {source}")
    return path.read_text(encoding="utf-8")


def build_prompt(output_format: str, spec: str) -> str:
    return f"{INSTRUCTIONS[output_format]}\n\nOpenAPI Spec:\n{spec}"


async def run(argv: list[str], *, client: AgentClient | None = None, output_dir: str | None = None) -> int:
    if not argv:
        print(USAGE)
        return 1
    source = argv[0]
    output_format = argv[1].lower() if len(argv) > 1 else "pytest"
    if output_format not in OUTPUT_FILES:
        print(f"❌ Unknown format '{output_format}'. Choose one of: {', '.join(OUTPUT_FILES)}")
        return 1

    banner("🧪 API Test Generator")
    print(f"📋 Spec: {source}")
    print(f"📝 Format: {output_format}\n")

    try:
        spec = await load_spec(source)
    except (httpx.HTTPError, OSError) as exc:
        print(f"❌ Error loading spec: {exc}")
        return 1
    print(f"✓ Loaded spec ({len(spec):,} characters)\n")

    printer = ConsolePrinter()
    config = SessionConfig(streaming=True, tools=make_openapi_tools(spec))
    async with open_client(client) as client:
        async with await client.create_session(config) as session:
            session.on(printer)
            result = await run_exchange(session, build_prompt(output_format, spec))

    if result is None:
        return 1

    output_path = Path(output_dir or Path.cwd()) / OUTPUT_FILES[output_format]
    output_path.write_text(printer.text or result.content, encoding="utf-8")
    print("\n✅ Tests generated!")
    print(f"💾 Saved to: {output_path}")
    print("💡 Tip: Review and customize the generated tests before use")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
