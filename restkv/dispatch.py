"""Dispatcher: runs built requests through the transport.

In serial mode every submitted request comes back as an awaitable that
performs exactly one round trip. Inside `batch()` submitted requests are
queued as Deferred placeholders instead, and all of them are sent together
when the batch block exits.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

from restkv.errors import BatchError
from restkv.request import Request
from restkv.transport import Outcome, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

Handler = Callable[[Outcome], Any]


class ExecutionMode(str, Enum):
    """How submitted requests are executed."""

    SERIAL = "serial"
    BATCH = "batch"


class Deferred:
    """A request queued in a batch, resolved when the batch completes."""

    def __init__(self, request: Request, handler: Handler | None = None) -> None:
        self.request = request
        self.handler = handler
        self.done = False
        self.result: Any = None
        self.error: Exception | None = None

    def __repr__(self) -> str:
        state = "done" if self.done else "pending"
        return f"<Deferred {self.request.method} {self.request.url} {state}>"


class Dispatcher:
    """Sends requests serially, or queues them while a batch is open.

    Not reentrant: one batch at a time per dispatcher.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport
        self.mode = ExecutionMode.SERIAL
        self._queue: list[Deferred] = []

    def submit(
        self, request: Request, handler: Callable[[Outcome], T] | None = None
    ) -> Awaitable[T] | Deferred:
        """Execute now (serial) or queue for the open batch."""
        if self.mode is ExecutionMode.BATCH:
            deferred = Deferred(request, handler)
            self._queue.append(deferred)
            return deferred
        return self.execute(request, handler)

    async def execute(
        self, request: Request, handler: Callable[[Outcome], T] | None = None
    ) -> T | Outcome:
        """Send one request and pass the outcome through the handler."""
        outcome = await self.transport.send(request)
        if handler is None:
            return outcome
        return handler(outcome)

    @asynccontextmanager
    async def batch(self) -> AsyncIterator[dict[str, Any]]:
        """Queue requests made inside the block and resolve them on exit.

        Yields the accumulator dict. Slots holding a Deferred are replaced by
        the resolved response once every queued request has completed. If a
        request failed its slot is removed and the first failure is raised
        after the others have resolved. If the block itself raises, nothing
        queued is sent.
        """
        if self.mode is ExecutionMode.BATCH:
            raise BatchError("a batch is already running on this client")
        previous = self.mode
        self.mode = ExecutionMode.BATCH
        accumulator: dict[str, Any] = {}
        try:
            yield accumulator
        finally:
            self.mode = previous
            queued, self._queue = self._queue, []

        logger.debug("batch: resolving %d queued requests", len(queued))
        await self._resolve(queued)
        self._fill(accumulator, queued)

    async def _resolve(self, queued: list[Deferred]) -> None:
        if not queued:
            return
        if self.transport.supports_parallel:
            await asyncio.gather(*(self._settle(deferred) for deferred in queued))
            return
        logger.warning(
            "%s does not support parallel requests; running %d batched requests sequentially",
            type(self.transport).__name__,
            len(queued),
        )
        for deferred in queued:
            await self._settle(deferred)

    async def _settle(self, deferred: Deferred) -> None:
        try:
            deferred.result = await self.execute(deferred.request, deferred.handler)
        except Exception as e:  # pylint: disable=broad-exception-caught  # re-raised by _fill once the whole batch resolved
            deferred.error = e
        deferred.done = True

    def _fill(self, accumulator: dict[str, Any], queued: list[Deferred]) -> None:
        for slot, value in list(accumulator.items()):
            if not isinstance(value, Deferred):
                continue
            if value.error is None:
                accumulator[slot] = value.result
            else:
                del accumulator[slot]

        failures = [deferred for deferred in queued if deferred.error is not None]
        if not failures:
            return
        for deferred in failures[1:]:
            logger.warning(
                "batched %s %s also failed: %r",
                deferred.request.method,
                deferred.request.url,
                deferred.error,
            )
        raise failures[0].error
