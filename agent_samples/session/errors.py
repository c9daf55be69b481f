"""Exceptions raised by the session driver."""

from __future__ import annotations


class AgentSessionError(Exception):
    """Base class for session driver failures."""


class SessionError(AgentSessionError):
    """The exchange ended with a ``session.error`` event."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ExchangeTimeoutError(SessionError):
    """No terminal event arrived within the allowed time."""


class ExchangeInProgressError(AgentSessionError):
    """A prompt was sent while the previous exchange is still pending."""


class SessionClosedError(AgentSessionError):
    """The session has been closed and cannot accept prompts."""


class ExchangeStateError(AgentSessionError):
    """A pending exchange was resolved more than once."""
