"""Custom exception hierarchy for pathstate."""

from __future__ import annotations


class StateError(Exception):
    """Base exception for all pathstate errors."""


class StateConfigError(StateError):
    """Invalid configuration values."""


class StateMutationError(StateError):
    """A mutation operation rejected its target.

    Raised synchronously inside a toolset operation and surfaced by the
    mutation queue through the state's error channel.
    """

    def __init__(self, message: str, *, path: str = "", failed_path: str | None = None) -> None:
        self.path = path
        self.failed_path = failed_path
        super().__init__(message)


class RootTargetError(StateMutationError):
    """The operation is not allowed on the tree root."""


class InvalidPathError(StateMutationError):
    """The path cannot be resolved (e.g. it runs through a scalar).

    ``failed_path`` names the first segment prefix that could not be walked,
    when the failure happened during traversal.
    """


class TargetTypeError(StateMutationError):
    """The value found at the target has the wrong shape for the operation.

    Covers ``concat`` onto something that is not a list and ``merge`` into
    something that is not a mapping.
    """
