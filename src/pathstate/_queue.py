"""Serialized mutation dispatch.

Mutators are queued and executed strictly one at a time, in submission
order, by a single drain task on the running event loop. Submitting never
blocks; each submission gets a future resolved when its own cycle is done.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from pathstate.exceptions import StateError
from pathstate.toolset import Mutator

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _QueuedMutation:
    mutator: Mutator
    future: asyncio.Future[None]


def _mark_retrieved(future: asyncio.Future[None]) -> None:
    # Failures are reported through the error callback; awaiting the
    # submission future is optional, so do not warn about unretrieved errors.
    if not future.cancelled():
        future.exception()


class MutationQueue:
    """FIFO dispatcher running one mutation cycle at a time."""

    def __init__(
        self,
        dispatch: Callable[[Mutator], None],
        *,
        on_error: Callable[[Exception], None],
    ) -> None:
        self._dispatch = dispatch
        self._on_error = on_error
        self._pending: deque[_QueuedMutation] = deque()
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> int:
        """Number of mutators waiting to run."""
        return len(self._pending)

    @property
    def is_idle(self) -> bool:
        return not self._pending and (self._drain_task is None or self._drain_task.done())

    def append(self, mutator: Mutator) -> asyncio.Future[None]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise StateError("State mutations must be submitted from a running event loop") from exc

        future: asyncio.Future[None] = loop.create_future()
        future.add_done_callback(_mark_retrieved)
        self._pending.append(_QueuedMutation(mutator, future))
        _logger.debug("Mutation queued pending=%d", len(self._pending))

        if self._drain_task is None or self._drain_task.done():
            self._drain_task = loop.create_task(self._drain())
        return future

    async def wait_until_idle(self) -> None:
        """Wait until every queued mutator (including ones queued meanwhile) ran."""
        while self._drain_task is not None and not self._drain_task.done():
            await asyncio.shield(self._drain_task)

    async def _drain(self) -> None:
        while self._pending:
            entry = self._pending.popleft()
            try:
                self._dispatch(entry.mutator)
            except Exception as exc:
                _logger.debug("Mutation cycle failed", exc_info=True)
                self._on_error(exc)
                if not entry.future.done():
                    entry.future.set_exception(exc)
            else:
                if not entry.future.done():
                    entry.future.set_result(None)
            # Let other tasks run between cycles.
            await asyncio.sleep(0)
