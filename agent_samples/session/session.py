"""AgentClient and AgentSession — the exchange driver."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
import uuid
from enum import Enum
from typing import Any, AsyncIterator, Callable

from agent_samples.session.backend import AgentBackend
from agent_samples.session.completion import PendingExchange
from agent_samples.session.dispatcher import EventDispatcher, Handler, Subscription
from agent_samples.session.errors import (
    ExchangeInProgressError,
    ExchangeTimeoutError,
    SessionClosedError,
    SessionError,
)
from agent_samples.session.models import (
    DEFAULT_MODEL,
    AssistantMessageDeltaEvent,
    AssistantMessageEvent,
    ExchangeResult,
    SessionConfig,
    SessionErrorEvent,
    SessionEvent,
    SessionIdleEvent,
    ToolExecutionCompleteEvent,
    ToolExecutionStartEvent,
)
from agent_samples.tools.registry import ToolRegistry
from agent_samples.tracing.interface import TraceCollector

logger = logging.getLogger(__name__)


class ExchangeState(str, Enum):
    IDLE = "idle"
    SENT = "sent"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERRORED = "errored"


class AgentSession:
    """One conversational context: ``send`` a prompt, observe events via ``on``.

    At most one exchange is pending at a time. ``send`` returns immediately;
    everything the model produces arrives through the dispatcher.
    """

    MAX_ITERATIONS: int = 6

    def __init__(
        self,
        config: SessionConfig,
        backend: AgentBackend,
        *,
        model: str = DEFAULT_MODEL,
        trace_collector: TraceCollector | None = None,
        default_timeout: float | None = None,
        on_close: Callable[[AgentSession], None] | None = None,
    ) -> None:
        self.session_id = str(uuid.uuid4())
        self.config = config
        self.model = config.model or model
        self._backend = backend
        self._tools = ToolRegistry(config.tools)
        self._dispatcher = EventDispatcher()
        self._trace = trace_collector
        self._default_timeout = default_timeout
        self._on_close = on_close

        self._messages: list[dict[str, Any]] = [
            {"role": "system", "content": config.system_prompt()},
        ]
        self._state = ExchangeState.IDLE
        self._pending: PendingExchange | None = None
        self._task: asyncio.Task | None = None
        self._abort_error: SessionError | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> ExchangeState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    @property
    def messages(self) -> list[dict[str, Any]]:
        return list(self._messages)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def on(self, handler: Handler) -> Subscription:
        return self._dispatcher.on(handler)

    def send(self, prompt: str) -> PendingExchange:
        if self._closed:
            raise SessionClosedError(f"Session {self.session_id} is closed")
        if self.busy:
            raise ExchangeInProgressError(
                f"Session {self.session_id} is still waiting on exchange {self._pending.exchange_id}"
            )
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")

        pending = PendingExchange()
        self._pending = pending
        self._state = ExchangeState.SENT
        self._task = asyncio.create_task(
            self._run_exchange(prompt, pending),
            name=f"exchange-{pending.exchange_id}",
        )
        return pending

    async def send_and_wait(self, prompt: str, timeout: float | None = None) -> ExchangeResult:
        pending = self.send(prompt)
        timeout = timeout if timeout is not None else self._default_timeout
        try:
            return await pending.wait(timeout)
        except ExchangeTimeoutError as exc:
            await self.abort(str(exc), error=exc)
            raise

    def stream(self, prompt: str) -> AsyncIterator[SessionEvent]:
        """Send ``prompt`` now and iterate its events up to the terminal one.

        The prompt is sent before this returns, so ``send``'s errors
        (``ExchangeInProgressError`` and friends) are raised by the call
        itself, not on first iteration.
        """
        queue: asyncio.Queue = asyncio.Queue()
        subscription = self.on(queue.put_nowait)
        try:
            pending = self.send(prompt)
        except Exception:
            subscription.dispose()
            raise
        return self._iter_events(queue, subscription, pending)

    async def _iter_events(
        self, queue: asyncio.Queue, subscription: Subscription, pending: PendingExchange,
    ) -> AsyncIterator[SessionEvent]:
        with subscription:
            try:
                while True:
                    event = await queue.get()
                    yield event
                    if event.is_terminal:
                        break
            finally:
                if not pending.done:
                    await self.abort("Stream closed before the exchange finished")
                # Failures were delivered as the terminal event
                pending.exception()

    async def abort(self, reason: str = "Exchange aborted", *, error: SessionError | None = None) -> bool:
        """Cancel the in-flight exchange. Returns ``False`` if nothing was pending."""
        pending, task = self._pending, self._task
        if pending is None or pending.done:
            return False

        error = error or SessionError(reason)
        self._abort_error = error
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._abort_error = None

        # A task cancelled before it ever ran never reached its handlers
        if not pending.done:
            self._terminate_error(pending, error)
        # Reported through the error event and to whoever awaits the exchange
        pending.exception()
        return True

    async def aclose(self) -> None:
        if self._closed:
            return
        await self.abort("Session closed")
        self._closed = True
        self._dispatcher.clear()
        logger.debug("Session %s closed", self.session_id)
        if self._on_close is not None:
            self._on_close(self)

    async def __aenter__(self) -> AgentSession:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Exchange
    # ------------------------------------------------------------------

    async def _run_exchange(self, prompt: str, pending: PendingExchange) -> None:
        trace_id = pending.exchange_id
        t_start = time.time()
        await self._trace_emit(trace_id, "send", {
            "session_id": self.session_id,
            "model": self.model,
            "streaming": self.config.streaming,
            "prompt_chars": len(prompt),
        })

        outcome = ExchangeState.ERRORED
        try:
            messages, content, tool_calls = await self._drive(prompt, trace_id)
        except asyncio.CancelledError:
            error = self._abort_error or SessionError("Exchange cancelled")
            self._terminate_error(pending, error)
            raise
        except Exception as exc:
            error = exc if isinstance(exc, SessionError) else SessionError(str(exc) or type(exc).__name__)
            self._terminate_error(pending, error)
        else:
            self._messages = messages
            self._terminate_ok(pending, content, tool_calls)
            outcome = ExchangeState.COMPLETED
        finally:
            await self._trace_emit(trace_id, "exchange_done", {
                "state": outcome.value,
                "total_latency_ms": round((time.time() - t_start) * 1000, 2),
            })
            if self._trace is not None:
                await self._trace.flush(trace_id)

    async def _drive(self, prompt: str, trace_id: str) -> tuple[list[dict[str, Any]], str, int]:
        # Work on a copy: a failed exchange leaves the history untouched
        messages = list(self._messages)
        messages.append({"role": "user", "content": prompt})
        tool_schemas = self._tools.openai_schemas()
        on_delta = self._on_delta if self.config.streaming else None
        tool_calls = 0
        # Text from every turn, tool-calling turns included, in the order streamed
        texts: list[str] = []

        for iteration in range(self.MAX_ITERATIONS):
            t_call = time.time()
            turn = await self._backend.complete(
                messages,
                model=self.model,
                tools=tool_schemas or None,
                on_delta=on_delta,
            )
            await self._trace_emit(trace_id, "backend_call", {
                "iteration": iteration,
                "latency_ms": round((time.time() - t_call) * 1000, 2),
                "has_tool_calls": bool(turn.tool_calls),
            })

            if turn.content:
                texts.append(turn.content)
            if not turn.tool_calls:
                messages.append({"role": "assistant", "content": turn.content or ""})
                return messages, "".join(texts), tool_calls

            self._state = ExchangeState.STREAMING
            messages.append({
                "role": "assistant",
                "content": turn.content,
                "tool_calls": [
                    {
                        "id": tc.id,
                        "type": "function",
                        "function": {"name": tc.name, "arguments": json.dumps(tc.arguments)},
                    }
                    for tc in turn.tool_calls
                ],
            })

            # One tool at a time, in the order the model asked for them
            for tc in turn.tool_calls:
                tool_calls += 1
                self._emit(ToolExecutionStartEvent(
                    tool_call_id=tc.id, tool_name=tc.name, arguments=tc.arguments,
                ))
                result = await self._tools.invoke(
                    tc.name, tc.arguments, trace_collector=self._trace, trace_id=trace_id,
                )
                self._emit(ToolExecutionCompleteEvent(
                    tool_call_id=tc.id, tool_name=tc.name, result=result,
                ))
                messages.append({
                    "role": "tool",
                    "tool_call_id": tc.id,
                    "content": result.model_dump_json(),
                })

        raise SessionError(f"Max iterations ({self.MAX_ITERATIONS}) reached without final answer")

    def _on_delta(self, text: str) -> None:
        if not text:
            return
        self._state = ExchangeState.STREAMING
        self._emit(AssistantMessageDeltaEvent(delta_content=text))

    # ------------------------------------------------------------------
    # Terminal transitions (synchronous: no event can follow them)
    # ------------------------------------------------------------------

    def _terminate_ok(self, pending: PendingExchange, content: str, tool_calls: int) -> None:
        self._state = ExchangeState.COMPLETED
        self._emit(AssistantMessageEvent(content=content))
        self._emit(SessionIdleEvent())
        self._state = ExchangeState.IDLE
        pending.resolve(ExchangeResult(
            exchange_id=pending.exchange_id, content=content, tool_calls=tool_calls,
        ))

    def _terminate_error(self, pending: PendingExchange, error: SessionError) -> None:
        self._state = ExchangeState.ERRORED
        logger.warning("session=%s exchange=%s error=%s", self.session_id, pending.exchange_id, error)
        self._emit(SessionErrorEvent(message=str(error)))
        self._state = ExchangeState.IDLE
        pending.fail(error)

    def _emit(self, event: SessionEvent) -> None:
        event.session_id = self.session_id
        self._dispatcher.emit(event)

    async def _trace_emit(self, trace_id: str, event_type: str, data: dict[str, Any]) -> None:
        if self._trace is not None:
            await self._trace.emit(trace_id, event_type, data)


class AgentClient:
    """Owns the backend connection and every session created from it."""

    def __init__(
        self,
        backend: AgentBackend,
        *,
        default_model: str = DEFAULT_MODEL,
        trace_collector: TraceCollector | None = None,
        exchange_timeout: float | None = None,
    ) -> None:
        self._backend = backend
        self.default_model = default_model
        self._trace = trace_collector
        self._exchange_timeout = exchange_timeout
        self._sessions: dict[str, AgentSession] = {}
        self._started = False
        self.sessions_created = 0

    @property
    def backend(self) -> AgentBackend:
        return self._backend

    @property
    def started(self) -> bool:
        return self._started

    @property
    def sessions(self) -> list[AgentSession]:
        return list(self._sessions.values())

    async def start(self) -> None:
        self._started = True
        logger.debug("Client started (backend=%s)", type(self._backend).__name__)

    async def stop(self) -> None:
        for session in list(self._sessions.values()):
            await session.aclose()
        if self._started:
            await self._backend.aclose()
        self._started = False

    async def create_session(self, config: SessionConfig | None = None) -> AgentSession:
        if not self._started:
            raise RuntimeError("Client is not started; call start() first")
        session = AgentSession(
            config or SessionConfig(),
            self._backend,
            model=self.default_model,
            trace_collector=self._trace,
            default_timeout=self._exchange_timeout,
            on_close=self._forget,
        )
        self._sessions[session.session_id] = session
        self.sessions_created += 1
        logger.info(
            "Created session %s (model=%s, streaming=%s, tools=%s)",
            session.session_id, session.model, session.config.streaming, session.tools.names,
        )
        return session

    def _forget(self, session: AgentSession) -> None:
        self._sessions.pop(session.session_id, None)

    async def __aenter__(self) -> AgentClient:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
