"""Path-addressable state container.

:class:`State` owns a tree of mappings, lists and scalars. Reads are
synchronous (:meth:`State.get`); writes are queued through the mutation
queue and applied one cycle at a time. Subscribers listen on canonical
paths (or the wildcard) and are told about every cycle that touched their
path, an ancestor-visible change below it, or the subtree it lives in.

Usage::

    state = State({"posts": {"new": []}})
    state.on("posts/new", lambda event: print(event.payload))
    state.concat("posts/new", [{"id": 1}])
    await state.wait_for_mutations()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pathstate._fanout import PendingEmissions
from pathstate._navigator import lookup
from pathstate._queue import MutationQueue
from pathstate._summary import summarize_for_log
from pathstate.config import StateConfig
from pathstate.emitter import EventEmitter, Listener
from pathstate.paths import PathLike, resolve_path
from pathstate.toolset import MutationToolset, Mutator, ToolSet

_logger = logging.getLogger(__name__)


class State:
    """In-memory state tree with path-scoped change notifications."""

    def __init__(
        self,
        initial_state: dict[str, Any] | None = None,
        *,
        config: StateConfig | None = None,
        emitter: EventEmitter | None = None,
    ) -> None:
        self._config = config or StateConfig()
        self._tree: dict[str, Any] = initial_state if initial_state is not None else {}
        self._emitter = emitter or EventEmitter()
        self._pending = PendingEmissions(
            wildcard=self._config.wildcard_event,
            reserved=(self._config.error_event,),
        )
        self._toolset = MutationToolset(self._tree, self._pending)
        self._queue = MutationQueue(self._dispatch_mutation, on_error=self._handle_error)

    @property
    def state(self) -> dict[str, Any]:
        """The live root of the tree."""
        return self._tree

    @property
    def config(self) -> StateConfig:
        return self._config

    @staticmethod
    def resolve_path(path: PathLike) -> str:
        return resolve_path(path)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, path: PathLike = "", *, hard: bool | None = None) -> Any:
        """Return the live value at *path* (the whole tree for ``""``)."""
        strict = self._config.hard_get if hard is None else hard
        return lookup(self._tree, path, hard=strict)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def mutate(self, mutator: Mutator) -> asyncio.Future[None]:
        """Queue *mutator*; it runs with the toolset as one mutation cycle."""
        return self._queue.append(mutator)

    def set(self, path: PathLike, value: Any) -> asyncio.Future[None]:
        return self.mutate(lambda tools: tools.set(path, value))

    def remove(self, path: PathLike) -> asyncio.Future[None]:
        return self.mutate(lambda tools: tools.remove(path))

    def merge(self, path: PathLike, subject: Mapping[str, Any]) -> asyncio.Future[None]:
        return self.mutate(lambda tools: tools.merge(path, subject))

    def concat(self, path: PathLike, value: Any) -> asyncio.Future[None]:
        return self.mutate(lambda tools: tools.concat(path, value))

    def update(self, path: PathLike, transformer: Callable[[Any], Any]) -> asyncio.Future[None]:
        return self.mutate(lambda tools: tools.update(path, transformer))

    def clear(self) -> None:
        """Empty the tree immediately and notify every subscriber.

        Not serialized against queued mutations.
        """
        self._tree.clear()
        _logger.debug("State cleared")

        for name in self._emitter.event_names():
            if name == self._config.error_event:
                continue
            payload = self._tree if name == self._config.wildcard_event else None
            self._emitter.emit(name, payload)

    async def wait_for_mutations(self) -> None:
        """Wait until the mutation queue is drained."""
        await self._queue.wait_until_idle()

    @property
    def pending_mutations(self) -> int:
        return self._queue.pending

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def on(self, path: PathLike, listener: Listener) -> None:
        self._emitter.on(resolve_path(path), listener)

    def once(self, path: PathLike, listener: Listener) -> None:
        self._emitter.once(resolve_path(path), listener)

    def off(self, path: PathLike, listener: Listener | None = None) -> None:
        self._emitter.off(resolve_path(path), listener)

    def listener_count(self, path: PathLike) -> int:
        return self._emitter.listener_count(resolve_path(path))

    def event_names(self) -> list[str]:
        return self._emitter.event_names()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _dispatch_mutation(self, mutator: Mutator) -> None:
        toolset: ToolSet = self._toolset
        try:
            mutator(toolset)
        except Exception:
            self._pending.clear()
            raise

        emissions = self._pending.flush(self._emitter.event_names(), self._peek)
        if not emissions:
            _logger.debug("Mutation cycle produced no changes")
            return

        for name, payload in emissions.items():
            if self._config.trace_emissions:
                _logger.debug(
                    "Emit %s payload=%s",
                    name,
                    summarize_for_log(payload, max_string=self._config.log_max_string),
                )
            self._emitter.emit(name, payload)

    def _peek(self, path: str) -> Any:
        # Fanout re-reads never raise, whatever ``hard_get`` says.
        return lookup(self._tree, path)

    def _handle_error(self, exc: Exception) -> None:
        delivered = self._emitter.emit(self._config.error_event, exc)
        if not delivered:
            _logger.warning(
                "Mutation failed with no %r listener: %s",
                self._config.error_event,
                summarize_for_log(exc, max_string=self._config.log_max_string),
            )
