"""Path normalization.

Paths are slash-delimited strings or ordered lists of segments. Their
canonical form has no leading/trailing slash and no repeated slashes.
Whitespace is never trimmed: ``"  /a/  "`` and ``"a"`` are different paths.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from pathstate._constants import PATH_SEPARATOR

PathLike = str | Sequence[str]
"""A path as a slash-delimited string or an ordered list of segments."""

_SEPARATOR_RUN = re.compile(r"/+")


def resolve_path(path: PathLike) -> str:
    """Return the canonical string form of *path*.

    >>> resolve_path("/posts//new/0/")
    'posts/new/0'
    >>> resolve_path(["posts", "more things"])
    'posts/more things'
    """
    if isinstance(path, str):
        joined = path
    else:
        segments = list(path)
        for segment in segments:
            if not isinstance(segment, str):
                raise TypeError(f"path segments must be strings, got {type(segment).__name__}")
        joined = PATH_SEPARATOR.join(segments)

    collapsed = _SEPARATOR_RUN.sub(PATH_SEPARATOR, f"{PATH_SEPARATOR}{joined}{PATH_SEPARATOR}")
    return collapsed[1:-1]


def split_path(path: PathLike) -> list[str]:
    """Split *path* into segments; the root path yields ``[""]``."""
    return resolve_path(path).split(PATH_SEPARATOR)


def join_path(*parts: str) -> str:
    """Join path fragments into one canonical path."""
    return resolve_path(list(parts))


def is_strict_descendant(candidate: str, path: str) -> bool:
    """Whether *candidate* lies strictly below *path*."""
    if not path:
        return bool(candidate)
    return candidate.startswith(f"{path}{PATH_SEPARATOR}")
