"""The five ways to mutate a state tree.

Mutators receive a :class:`ToolSet`; it is the only sanctioned way to
change the tree. Every operation validates its target before assigning
anything and records what it touched in the cycle's
:class:`~pathstate._fanout.PendingEmissions`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, Protocol, TypeVar

from pathstate._constants import (
    INVALID_MERGE_MESSAGE,
    INVALID_PATH_MESSAGE,
    NOT_AN_ARRAY_MESSAGE,
    ROOT_SET_MESSAGE,
)
from pathstate._fanout import PendingEmissions
from pathstate._navigator import (
    MISSING,
    NavigationResult,
    delete_child,
    navigate,
    NodeKind,
    classify,
    read_child,
    same_value,
    slot_writable,
    write_child,
)
from pathstate.exceptions import InvalidPathError, RootTargetError, TargetTypeError
from pathstate.paths import PathLike, join_path, resolve_path

_logger = logging.getLogger(__name__)

V = TypeVar("V")


class ToolSet(Protocol):
    """Operations available to a mutator."""

    def set(self, path: PathLike, value: Any) -> None: ...

    def remove(self, path: PathLike) -> None: ...

    def merge(self, path: PathLike, subject: Mapping[str, Any]) -> None: ...

    def concat(self, path: PathLike, value: Any) -> None: ...

    def update(self, path: PathLike, transformer: Callable[[Any], Any]) -> None: ...


Mutator = Callable[[ToolSet], None]


class MutationToolset:
    """:class:`ToolSet` bound to one tree and one pending emission set."""

    def __init__(self, tree: MutableMapping[str, Any], pending: PendingEmissions) -> None:
        self._tree = tree
        self._pending = pending

    def set(self, path: PathLike, value: Any) -> None:
        info = navigate(self._tree, path, build=True)

        if info.target_is_root:
            raise RootTargetError(ROOT_SET_MESSAGE, path=info.path)
        if info.error or not slot_writable(info.target_node, info.target_key):
            raise InvalidPathError(INVALID_PATH_MESSAGE, path=info.path, failed_path=info.failed_path)

        if same_value(read_child(info.target_node, info.target_key), value):
            _logger.debug("set %r is a no-op (unchanged value)", info.path)
            return

        write_child(info.target_node, info.target_key, value)
        self._mark_change(info, value)

    def remove(self, path: PathLike) -> None:
        info = navigate(self._tree, path)

        if info.target_is_root:
            raise RootTargetError(INVALID_PATH_MESSAGE, path=info.path)

        current = MISSING if info.error else read_child(info.target_node, info.target_key)
        # An emptied list slot counts as already removed.
        if current is MISSING or (current is None and not isinstance(info.target_node, MutableMapping)):
            _logger.debug("remove %r: nothing to delete", info.path)
            return

        delete_child(info.target_node, info.target_key)

        self._pending.mark_wildcard(self._tree)
        self._pending.mark(info.path, None)
        self._pending.mark_ancestors(info.traverse)
        # The container holding them is gone.
        self._pending.mark_descendants(info.path, refetch=False)

    def merge(self, path: PathLike, subject: Mapping[str, Any]) -> None:
        if not isinstance(subject, Mapping):
            raise TargetTypeError("Merge subject must be a mapping", path=resolve_path(path))

        canonical = resolve_path(path)
        if canonical == "":
            self._merge_into_root(subject)
            return

        info = navigate(self._tree, canonical, build=True, include_last=True)
        if info.error:
            raise InvalidPathError(INVALID_MERGE_MESSAGE, path=info.path, failed_path=info.failed_path)
        target = info.target_node
        if not isinstance(target, MutableMapping):
            raise TargetTypeError(INVALID_MERGE_MESSAGE, path=info.path)

        changed = self._assign_keys(target, subject)
        if not changed and not info.created_any:
            _logger.debug("merge %r is a no-op (no differing keys)", info.path)
            return

        self._pending.mark_wildcard(self._tree)
        # The traverse ends with the target container itself.
        self._pending.mark_ancestors(info.traverse)
        for key in changed:
            key_path = join_path(info.path, key)
            self._pending.mark(key_path, target[key])
            self._pending.mark_descendants(key_path, refetch=True)

    def concat(self, path: PathLike, value: Any) -> None:
        info = navigate(self._tree, path, build=True)

        if info.target_is_root:
            raise RootTargetError(INVALID_PATH_MESSAGE, path=info.path)
        if info.error or not slot_writable(info.target_node, info.target_key):
            raise InvalidPathError(INVALID_PATH_MESSAGE, path=info.path, failed_path=info.failed_path)

        current = read_child(info.target_node, info.target_key)

        # First write behaves like set: the raw value is stored as given.
        if current is MISSING or (not current and classify(current) is not NodeKind.CONTAINER):
            if same_value(current, value):
                _logger.debug("concat %r is a no-op (unchanged value)", info.path)
                return
            new_value = value
        elif isinstance(current, list):
            extra = list(value) if isinstance(value, (list, tuple)) else [value]
            new_value = current + extra
        else:
            raise TargetTypeError(NOT_AN_ARRAY_MESSAGE, path=info.path)

        write_child(info.target_node, info.target_key, new_value)
        self._mark_change(info, new_value)

    def update(self, path: PathLike, transformer: Callable[[V], V]) -> None:
        info = navigate(self._tree, path)

        if info.target_is_root:
            raise RootTargetError(INVALID_PATH_MESSAGE, path=info.path)
        if info.error or not slot_writable(info.target_node, info.target_key):
            raise InvalidPathError(INVALID_PATH_MESSAGE, path=info.path, failed_path=info.failed_path)

        current = read_child(info.target_node, info.target_key)
        new_value = transformer(None if current is MISSING else current)

        # No identity check: the transformer may mutate in place and hand
        # back the same object, which still counts as a change.
        write_child(info.target_node, info.target_key, new_value)
        self._mark_change(info, new_value)

    def _mark_change(self, info: NavigationResult, value: Any) -> None:
        self._pending.mark_wildcard(self._tree)
        self._pending.mark(info.path, value)
        self._pending.mark_ancestors(info.traverse)
        self._pending.mark_descendants(info.path, refetch=True)

    def _merge_into_root(self, subject: Mapping[str, Any]) -> None:
        changed = self._assign_keys(self._tree, subject)
        if not changed:
            _logger.debug("root merge is a no-op (no differing keys)")
            return

        self._pending.mark_wildcard(self._tree)
        for key in changed:
            key_path = resolve_path(key)
            self._pending.mark(key_path, self._tree[key])
            self._pending.mark_descendants(key_path, refetch=True)

    @staticmethod
    def _assign_keys(target: MutableMapping[str, Any], subject: Mapping[str, Any]) -> list[str]:
        changed: list[str] = []
        for key, value in subject.items():
            if not same_value(target.get(key, MISSING), value):
                target[key] = value
                changed.append(key)
        return changed
