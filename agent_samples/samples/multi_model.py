"""multi_model — send the same prompt to several models and compare."""

from __future__ import annotations

import asyncio
import os
import sys
import time

from agent_samples.samples._common import banner, configure_logging, open_client
from agent_samples.session.errors import SessionError
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient

DEFAULT_MODELS = ("gpt-4o", "gpt-4.1")
DEFAULT_PROMPT = "In exactly 2 sentences, explain what makes Python a great language for AI development."


def compare_models() -> list[str]:
    raw = os.environ.get("AGENT_COMPARE_MODELS", "")
    models = [m.strip() for m in raw.split(",") if m.strip()]
    return models or list(DEFAULT_MODELS)


async def run(argv: list[str], *, client: AgentClient | None = None) -> int:
    banner("🔀 Multi-Model Comparison")
    prompt = " ".join(argv) if argv else DEFAULT_PROMPT
    print(f"📤 Prompt: {prompt}\n")

    async with open_client(client) as client:
        for model in compare_models():
            print(f"━━━ Model: {model} ━━━")
            t0 = time.perf_counter()
            try:
                async with await client.create_session(SessionConfig(model=model)) as session:
                    result = await session.send_and_wait(prompt)
                print(result.content)
            except SessionError as exc:
                print(f"❌ Failed: {exc}")
            print(f"⏱️  Response time: {time.perf_counter() - t0:.1f}s\n")

    print("✅ Comparison complete.")
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
