"""Shared constants."""

from __future__ import annotations

#: Path separator used by canonical paths.
PATH_SEPARATOR = "/"

#: Default subscription name notified whenever anything in the tree changes.
WILDCARD_EVENT = "@"

#: Default subscription name carrying mutation failures.
ERROR_EVENT = "error"

ROOT_SET_MESSAGE = "Root state should not be directly set"
INVALID_PATH_MESSAGE = "Invalid path to value"
INVALID_MERGE_MESSAGE = "Invalid path to value or target is not an object that can be merged"
NOT_AN_ARRAY_MESSAGE = "Target is not an array"
INVALID_GET_MESSAGE = "Can't get a value from an invalid path"
