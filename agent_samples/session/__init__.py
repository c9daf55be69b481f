from agent_samples.session.models import (
    AssistantMessageDeltaEvent,
    AssistantMessageEvent,
    BackendTurn,
    ExchangeResult,
    SessionConfig,
    SessionErrorEvent,
    SessionEvent,
    SessionEventType,
    SessionIdleEvent,
    SystemMessageConfig,
    SystemMessageMode,
    ToolCallRequest,
    ToolExecutionCompleteEvent,
    ToolExecutionStartEvent,
    ToolResult,
)
from agent_samples.session.errors import (
    AgentSessionError,
    ExchangeInProgressError,
    ExchangeStateError,
    ExchangeTimeoutError,
    SessionClosedError,
    SessionError,
)
from agent_samples.session.backend import AgentBackend, DemoBackend, OpenAIBackend, ScriptedBackend
from agent_samples.session.completion import PendingExchange
from agent_samples.session.dispatcher import EventDispatcher, SessionEventHandler, Subscription
from agent_samples.session.session import AgentClient, AgentSession, ExchangeState

__all__ = [
    "AgentBackend",
    "AgentClient",
    "AgentSession",
    "AgentSessionError",
    "AssistantMessageDeltaEvent",
    "AssistantMessageEvent",
    "BackendTurn",
    "DemoBackend",
    "EventDispatcher",
    "ExchangeInProgressError",
    "ExchangeResult",
    "ExchangeState",
    "ExchangeStateError",
    "ExchangeTimeoutError",
    "OpenAIBackend",
    "PendingExchange",
    "ScriptedBackend",
    "SessionClosedError",
    "SessionConfig",
    "SessionError",
    "SessionErrorEvent",
    "SessionEvent",
    "SessionEventHandler",
    "SessionEventType",
    "SessionIdleEvent",
    "Subscription",
    "SystemMessageConfig",
    "SystemMessageMode",
    "ToolCallRequest",
    "ToolExecutionCompleteEvent",
    "ToolExecutionStartEvent",
    "ToolResult",
]
