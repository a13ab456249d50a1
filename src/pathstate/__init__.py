"""pathstate - path-addressable in-memory state tree with change notifications."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pathstate")
except PackageNotFoundError:
    __version__ = "0+local"
from pathstate.config import StateConfig
from pathstate.emitter import EventEmitter, Listener
from pathstate.events import StateEvent
from pathstate.exceptions import (
    InvalidPathError,
    RootTargetError,
    StateConfigError,
    StateError,
    StateMutationError,
    TargetTypeError,
)
from pathstate.paths import PathLike, join_path, resolve_path, split_path
from pathstate.state import State
from pathstate.toolset import Mutator, ToolSet

__all__ = [
    "__version__",
    "EventEmitter",
    "InvalidPathError",
    "Listener",
    "Mutator",
    "PathLike",
    "RootTargetError",
    "State",
    "StateConfig",
    "StateConfigError",
    "StateError",
    "StateEvent",
    "StateMutationError",
    "TargetTypeError",
    "ToolSet",
    "join_path",
    "resolve_path",
    "split_path",
]
