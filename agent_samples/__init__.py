"""agent_samples — sample programs built on a small streaming agent-session driver.

Usage::

    from agent_samples import create_client
    from agent_samples.session import SessionConfig

    async with create_client() as client:
        session = await client.create_session(SessionConfig(streaming=True))
        session.on(print)
        await session.send_and_wait("What is 2+2?")
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()  # reads .env into os.environ (no-op if file missing)

from agent_samples.session.backend import AgentBackend, DemoBackend, OpenAIBackend
from agent_samples.session.models import DEFAULT_MODEL, SessionConfig
from agent_samples.session.session import AgentClient, AgentSession
from agent_samples.tracing.jsonl_tracer import JSONLTraceCollector

__all__ = [
    "AgentClient",
    "AgentSession",
    "SessionConfig",
    "create_client",
]


def create_client(
    *,
    openai_api_key: str | None = None,
    model: str | None = None,
    trace_dir: str | None = None,
    use_mock_llm: bool | None = None,
    exchange_timeout: float | None = None,
    backend: AgentBackend | None = None,
) -> AgentClient:
    """Wire a backend (and optional tracing) into a not-yet-started AgentClient.

    Environment variables (all optional):
      OPENAI_API_KEY          — required for real model calls
      OPENAI_BASE_URL         — alternate OpenAI-compatible endpoint
      AGENT_MODEL             — default ``gpt-4o``
      USE_MOCK_LLM            — set to ``1`` to use the offline demo backend
      AGENT_TRACE_DIR         — write JSONL traces per exchange into this dir
      AGENT_EXCHANGE_TIMEOUT  — seconds before an exchange is aborted
    """
    api_key = openai_api_key or os.environ.get("OPENAI_API_KEY")
    default_model = model or os.environ.get("AGENT_MODEL", DEFAULT_MODEL)
    mock = use_mock_llm if use_mock_llm is not None else os.environ.get("USE_MOCK_LLM") == "1"
    trace_dir = trace_dir or os.environ.get("AGENT_TRACE_DIR")
    if exchange_timeout is None and os.environ.get("AGENT_EXCHANGE_TIMEOUT"):
        exchange_timeout = float(os.environ["AGENT_EXCHANGE_TIMEOUT"])

    if backend is None:
        if mock or not api_key:
            backend = DemoBackend()
        else:
            backend = OpenAIBackend(api_key=api_key, base_url=os.environ.get("OPENAI_BASE_URL"))

    return AgentClient(
        backend,
        default_model=default_model,
        trace_collector=JSONLTraceCollector(trace_dir) if trace_dir else None,
        exchange_timeout=exchange_timeout,
    )
