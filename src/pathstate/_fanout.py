"""Notification fanout.

A mutation cycle records what it touched while it runs; nothing is emitted
until the cycle finishes. Two kinds of records exist:

- explicit entries: ``path -> payload`` (the wildcard, the mutated path,
  every traversed ancestor with its live node);
- descendant scopes: "every subscriber strictly below ``path``", expanded
  only when the cycle is flushed, against the subscriptions that exist at
  that moment. Values are re-read from the tree at that point, or forced to
  ``None`` when the subtree was removed.

Records are replayed in order, so a later record wins for the same path.
Channel names (the wildcard and the error channel) are reserved: only the
wildcard record itself is emitted under one.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pathstate._navigator import PathTraverse
from pathstate.paths import is_strict_descendant


@dataclass(frozen=True, slots=True)
class _Entry:
    path: str
    payload: Any
    channel: bool = False


@dataclass(frozen=True, slots=True)
class _DescendantScope:
    path: str
    refetch: bool


class PendingEmissions:
    """Emissions accumulated during one mutation cycle."""

    def __init__(self, *, wildcard: str, reserved: Iterable[str] = ()) -> None:
        self._wildcard = wildcard
        self._reserved = frozenset({wildcard, *reserved})
        self._records: list[_Entry | _DescendantScope] = []

    def __bool__(self) -> bool:
        return bool(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def mark(self, path: str, payload: Any) -> None:
        self._records.append(_Entry(path, payload))

    def mark_wildcard(self, tree: Any) -> None:
        self._records.append(_Entry(self._wildcard, tree, channel=True))

    def mark_ancestors(self, traverse: Iterable[PathTraverse]) -> None:
        for step in traverse:
            self._records.append(_Entry(step.path, step.node))

    def mark_descendants(self, path: str, *, refetch: bool) -> None:
        self._records.append(_DescendantScope(path, refetch))

    def clear(self) -> None:
        self._records = []

    def resolve(self, subscribed: Iterable[str], fetch: Callable[[str], Any]) -> dict[str, Any]:
        """Expand the records into the final ``path -> payload`` mapping."""
        names = [name for name in subscribed if name not in self._reserved]
        emissions: dict[str, Any] = {}

        for record in self._records:
            if isinstance(record, _Entry):
                # Tree keys named like a channel are never emitted on it.
                if record.channel or record.path not in self._reserved:
                    emissions[record.path] = record.payload
                continue
            for name in names:
                if is_strict_descendant(name, record.path):
                    emissions[name] = fetch(name) if record.refetch else None

        return emissions

    def flush(self, subscribed: Iterable[str], fetch: Callable[[str], Any]) -> dict[str, Any]:
        """Resolve and clear in one step."""
        try:
            return self.resolve(subscribed, fetch)
        finally:
            self.clear()
