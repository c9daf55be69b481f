"""PendingExchange — one-shot completion signal for a sent prompt."""

from __future__ import annotations

import asyncio
import uuid

from agent_samples.session.errors import (
    ExchangeStateError,
    ExchangeTimeoutError,
    SessionError,
)
from agent_samples.session.models import ExchangeResult


class PendingExchange:
    """Resolved exactly once, either with a result or with an error.

    Resolving twice raises ``ExchangeStateError`` instead of being ignored.
    """

    def __init__(self, exchange_id: str | None = None) -> None:
        self.exchange_id = exchange_id or str(uuid.uuid4())
        self._future: asyncio.Future[ExchangeResult] = asyncio.get_running_loop().create_future()

    @property
    def done(self) -> bool:
        return self._future.done()

    @property
    def failed(self) -> bool:
        return self._future.done() and self._future.exception() is not None

    def exception(self) -> BaseException | None:
        """The failure of a resolved exchange, or ``None``. Marks it retrieved."""
        if not self._future.done():
            return None
        return self._future.exception()

    def resolve(self, result: ExchangeResult) -> None:
        if self._future.done():
            raise ExchangeStateError(f"Exchange {self.exchange_id} already resolved")
        self._future.set_result(result)

    def fail(self, error: SessionError) -> None:
        if self._future.done():
            raise ExchangeStateError(f"Exchange {self.exchange_id} already resolved")
        self._future.set_exception(error)

    async def wait(self, timeout: float | None = None) -> ExchangeResult:
        """Await the result; raises ``SessionError`` on failure.

        On timeout the exchange itself is left untouched; the owning session
        decides how to abort it.
        """
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout=timeout)
        except asyncio.TimeoutError:
            raise ExchangeTimeoutError(
                f"No response within {timeout}s (exchange {self.exchange_id})"
            ) from None

    def __await__(self):
        return self.wait().__await__()
