"""Event dispatcher — delivers lifecycle events to subscribed handlers in order."""

from __future__ import annotations

import logging
from typing import Callable, Union

from agent_samples.session.models import (
    AssistantMessageDeltaEvent,
    AssistantMessageEvent,
    SessionErrorEvent,
    SessionEvent,
    SessionEventType,
    SessionIdleEvent,
    ToolExecutionCompleteEvent,
    ToolExecutionStartEvent,
)

logger = logging.getLogger(__name__)

EventCallback = Callable[[SessionEvent], None]


class SessionEventHandler:
    """Handler base class with one method per event kind.

    Override only the kinds you care about; the rest are no-ops.
    ``HANDLER_METHODS`` must name a method for every ``SessionEventType``.
    """

    HANDLER_METHODS: dict[SessionEventType, str] = {
        SessionEventType.MESSAGE_DELTA: "on_message_delta",
        SessionEventType.MESSAGE: "on_message",
        SessionEventType.TOOL_START: "on_tool_start",
        SessionEventType.TOOL_COMPLETE: "on_tool_complete",
        SessionEventType.IDLE: "on_idle",
        SessionEventType.ERROR: "on_error",
    }

    def __call__(self, event: SessionEvent) -> None:
        method = self.HANDLER_METHODS.get(event.type)
        if method is None:
            raise LookupError(f"No handler method for event type {event.type!r}")
        getattr(self, method)(event)

    def on_message_delta(self, event: AssistantMessageDeltaEvent) -> None: ...

    def on_message(self, event: AssistantMessageEvent) -> None: ...

    def on_tool_start(self, event: ToolExecutionStartEvent) -> None: ...

    def on_tool_complete(self, event: ToolExecutionCompleteEvent) -> None: ...

    def on_idle(self, event: SessionIdleEvent) -> None: ...

    def on_error(self, event: SessionErrorEvent) -> None: ...


Handler = Union[EventCallback, SessionEventHandler]


class Subscription:
    """Returned by ``EventDispatcher.on``; dispose to stop delivery."""

    def __init__(self, dispatcher: EventDispatcher, handler: Handler) -> None:
        self._dispatcher = dispatcher
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        if self._active:
            self._active = False
            self._dispatcher._remove(self._handler)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


class EventDispatcher:
    """Synchronous pass-through sink: no buffering, arrival order preserved."""

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def on(self, handler: Handler) -> Subscription:
        self._handlers.append(handler)
        return Subscription(self, handler)

    def _remove(self, handler: Handler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def clear(self) -> None:
        self._handlers.clear()

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def emit(self, event: SessionEvent) -> None:
        # Snapshot so a handler may dispose its own subscription mid-dispatch.
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s", handler, event.type.value)
