"""Core data models — no internal dependencies, only Pydantic + stdlib."""

from __future__ import annotations

import time
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "gpt-4o"

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant running inside a command-line sample. "
    "Answer concisely. Use the available tools when they help answer the request."
)


# ---------------------------------------------------------------------------
# Session configuration
# ---------------------------------------------------------------------------

class SystemMessageMode(str, Enum):
    APPEND = "append"
    REPLACE = "replace"


class SystemMessageConfig(BaseModel):
    mode: SystemMessageMode = SystemMessageMode.APPEND
    content: str

    def render(self, base: str = DEFAULT_SYSTEM_PROMPT) -> str:
        if self.mode is SystemMessageMode.REPLACE:
            return self.content
        return f"{base}\n\n{self.content.strip()}"


class SessionConfig(BaseModel):
    """Everything a session is created with. Tools are fixed for its lifetime."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: str | None = None  # None → the client default
    streaming: bool = False
    system_message: SystemMessageConfig | None = None
    tools: list[Any] = Field(default_factory=list)  # list[ToolDef]

    def system_prompt(self) -> str:
        if self.system_message is None:
            return DEFAULT_SYSTEM_PROMPT
        return self.system_message.render()


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------

class ToolResult(BaseModel):
    """The one result shape every tool returns to the model."""
    success: bool = True
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> ToolResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str, **data: Any) -> ToolResult:
        return cls(success=False, message=message or "unknown error", data=data)


# ---------------------------------------------------------------------------
# Lifecycle events (session → handlers)
# ---------------------------------------------------------------------------

class SessionEventType(str, Enum):
    MESSAGE_DELTA = "assistant.message_delta"
    MESSAGE = "assistant.message"
    TOOL_START = "tool.execution_start"
    TOOL_COMPLETE = "tool.execution_complete"
    IDLE = "session.idle"
    ERROR = "session.error"


TERMINAL_EVENT_TYPES = frozenset({SessionEventType.IDLE, SessionEventType.ERROR})


class _EventBase(BaseModel):
    session_id: str = ""
    timestamp: float = Field(default_factory=time.time)

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENT_TYPES  # type: ignore[attr-defined]


class AssistantMessageDeltaEvent(_EventBase):
    type: Literal[SessionEventType.MESSAGE_DELTA] = SessionEventType.MESSAGE_DELTA
    delta_content: str


class AssistantMessageEvent(_EventBase):
    type: Literal[SessionEventType.MESSAGE] = SessionEventType.MESSAGE
    content: str


class ToolExecutionStartEvent(_EventBase):
    type: Literal[SessionEventType.TOOL_START] = SessionEventType.TOOL_START
    tool_call_id: str
    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolExecutionCompleteEvent(_EventBase):
    type: Literal[SessionEventType.TOOL_COMPLETE] = SessionEventType.TOOL_COMPLETE
    tool_call_id: str
    tool_name: str
    result: ToolResult


class SessionIdleEvent(_EventBase):
    type: Literal[SessionEventType.IDLE] = SessionEventType.IDLE


class SessionErrorEvent(_EventBase):
    type: Literal[SessionEventType.ERROR] = SessionEventType.ERROR
    message: str


SessionEvent = Annotated[
    Union[
        AssistantMessageDeltaEvent,
        AssistantMessageEvent,
        ToolExecutionStartEvent,
        ToolExecutionCompleteEvent,
        SessionIdleEvent,
        SessionErrorEvent,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Backend helpers
# ---------------------------------------------------------------------------

class ToolCallRequest(BaseModel):
    """A single tool/function call requested by the model."""
    id: str
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class BackendTurn(BaseModel):
    """One aggregated backend response: final text or tool calls."""
    content: str | None = None
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)


class ExchangeResult(BaseModel):
    """What a successfully completed exchange resolves to."""
    exchange_id: str
    content: str = ""
    tool_calls: int = 0
