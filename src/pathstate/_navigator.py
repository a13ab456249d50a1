"""Tree navigation.

Walks a state tree along a path, optionally creating missing intermediate
mappings. Every traversal step is classified as a container, a scalar or
an absent slot so the failure modes are explicit:

- absent slots can be created when building, otherwise traversal stops;
- scalars (``None`` included) can never be traversed.

Lists are containers too: a segment addresses a list element when it is a
non-negative decimal integer.
"""

from __future__ import annotations

from collections.abc import MutableMapping, MutableSequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Final

from pathstate._constants import INVALID_GET_MESSAGE
from pathstate.exceptions import InvalidPathError
from pathstate.paths import PathLike, resolve_path


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING: Final[Any] = _Missing()
"""Marker for a slot that holds no value at all (as opposed to ``None``)."""


class NodeKind(StrEnum):
    CONTAINER = "container"
    SCALAR = "scalar"
    ABSENT = "absent"


def classify(value: Any) -> NodeKind:
    if value is MISSING:
        return NodeKind.ABSENT
    if isinstance(value, MutableMapping):
        return NodeKind.CONTAINER
    if isinstance(value, MutableSequence) and not isinstance(value, (str, bytes, bytearray)):
        return NodeKind.CONTAINER
    return NodeKind.SCALAR


def _index(key: str) -> int | None:
    if key.isascii() and key.isdigit():
        return int(key)
    return None


def read_child(node: Any, key: str) -> Any:
    """Return ``node[key]`` or :data:`MISSING` when there is no such slot."""
    if isinstance(node, MutableMapping):
        return node.get(key, MISSING)
    if classify(node) is NodeKind.CONTAINER:
        index = _index(key)
        if index is None or index >= len(node):
            return MISSING
        return node[index]
    return MISSING


def slot_writable(node: Any, key: str) -> bool:
    """Whether ``node[key]`` can be assigned without leaving holes."""
    if isinstance(node, MutableMapping):
        return True
    if classify(node) is NodeKind.CONTAINER:
        index = _index(key)
        return index is not None and index <= len(node)
    return False


def write_child(node: Any, key: str, value: Any) -> None:
    if isinstance(node, MutableMapping):
        node[key] = value
        return
    index = _index(key)
    if index is None or index > len(node):
        raise InvalidPathError(f"Cannot assign list slot {key!r}", path=key)
    if index == len(node):
        node.append(value)
    else:
        node[index] = value


def delete_child(node: Any, key: str) -> None:
    if isinstance(node, MutableMapping):
        del node[key]
        return
    # List slots are emptied in place; sibling indices never move.
    index = _index(key)
    if index is not None and index < len(node):
        node[index] = None


def same_value(current: Any, new: Any) -> bool:
    """Whether assigning *new* over *current* leaves the slot unchanged.

    Containers compare by identity. Scalars compare by value, except that
    booleans only match booleans and NaN never matches anything.
    """
    if classify(current) is NodeKind.CONTAINER or classify(new) is NodeKind.CONTAINER:
        return current is new
    if current is MISSING or new is MISSING or current is None or new is None:
        return current is new
    if isinstance(current, bool) or isinstance(new, bool):
        return current is new
    try:
        return bool(current == new)
    except (TypeError, ValueError):
        return current is new


@dataclass(frozen=True, slots=True)
class PathTraverse:
    """One step taken while walking the tree."""

    path: str
    node: Any
    created: bool = False


@dataclass(slots=True)
class NavigationResult:
    """Outcome of :func:`navigate`.

    ``target_node`` is the deepest node reached and ``target_key`` the final
    segment, even when ``error`` is set; callers decide how to react.
    """

    segments: list[str]
    path: str
    traverse: list[PathTraverse] = field(default_factory=list)
    target_node: Any = None
    target_key: str = ""
    target_is_root: bool = False
    error: bool = False
    failed_path: str | None = None
    failure: NodeKind | None = None

    @property
    def created_any(self) -> bool:
        return any(step.created for step in self.traverse)


def _walk(root: Any, segments: list[str], path: str, limit: int, *, build: bool) -> NavigationResult:
    result = NavigationResult(
        segments=segments,
        path=path,
        target_key=segments[-1],
        target_is_root=path == "",
    )
    current_node = root
    current_path = ""

    for segment in segments[:limit]:
        current_path = f"{current_path}/{segment}" if current_path else segment
        child = read_child(current_node, segment)
        kind = classify(child)
        created = False

        if kind is NodeKind.ABSENT:
            # Only mappings and the append slot of a list can hold a new node.
            if not build or not slot_writable(current_node, segment):
                result.error = True
                result.failed_path = current_path
                result.failure = kind
                current_node = None
                break
            child = {}
            write_child(current_node, segment, child)
            created = True
        elif kind is NodeKind.SCALAR:
            result.error = True
            result.failed_path = current_path
            result.failure = kind
            break

        current_node = child
        result.traverse.append(PathTraverse(path=current_path, node=current_node, created=created))

    result.target_node = current_node
    return result


def navigate(
    root: Any,
    path: PathLike,
    *,
    build: bool = False,
    include_last: bool = False,
) -> NavigationResult:
    """Walk *root* along *path*.

    Parameters
    ----------
    build
        Create missing intermediate mappings. The walk is checked first
        without mutating, so a path that is broken further down never leaves
        half-built branches behind.
    include_last
        Also descend into the final segment (the target itself must be a
        container).
    """
    canonical = resolve_path(path)
    segments = canonical.split("/")
    if canonical == "":
        limit = 0
    else:
        limit = len(segments) if include_last else len(segments) - 1

    result = _walk(root, segments, canonical, limit, build=False)
    if build and result.failure is NodeKind.ABSENT:
        result = _walk(root, segments, canonical, limit, build=True)
    return result


def lookup(root: Any, path: PathLike, *, hard: bool = False) -> Any:
    """Read the value at *path*.

    Returns the root for an empty path and ``None`` when nothing is there.
    With ``hard``, a path that cannot be traversed raises
    :class:`InvalidPathError`.
    """
    result = navigate(root, path)
    if result.target_is_root:
        return root
    if result.error:
        if hard:
            raise InvalidPathError(INVALID_GET_MESSAGE, path=result.path, failed_path=result.failed_path)
        return None

    value = read_child(result.target_node, result.target_key)
    return None if value is MISSING else value
