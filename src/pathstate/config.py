"""State container configuration for pathstate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pathstate._constants import ERROR_EVENT, PATH_SEPARATOR, WILDCARD_EVENT
from pathstate.exceptions import StateConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _check_channel(name: str, field_name: str) -> None:
    if not name or not name.strip():
        raise StateConfigError(f"{field_name} must be non-empty")
    if PATH_SEPARATOR in name:
        raise StateConfigError(f"{field_name} must not contain {PATH_SEPARATOR!r}: {name!r}")


@dataclasses.dataclass(frozen=True)
class StateConfig:
    """State container configuration.

    Parameters
    ----------
    wildcard_event : str
        Subscription name notified with the whole tree after every cycle
        that changed something.
    error_event : str
        Subscription name receiving mutation failures.
    hard_get : bool
        Default for ``State.get(hard=...)``. When enabled, reading through a
        path that cannot be traversed raises instead of returning ``None``.
    trace_emissions : bool
        Log every emission of a mutation cycle at DEBUG level.
    log_max_string : int
        Maximum string length kept when payloads are summarized for logs.
    """

    wildcard_event: str = WILDCARD_EVENT
    error_event: str = ERROR_EVENT
    hard_get: bool = False
    trace_emissions: bool = False
    log_max_string: int = 256

    def __post_init__(self) -> None:
        _check_channel(self.wildcard_event, "wildcard_event")
        _check_channel(self.error_event, "error_event")
        if self.wildcard_event == self.error_event:
            raise StateConfigError("wildcard_event and error_event must differ")
        if self.log_max_string <= 0:
            raise StateConfigError("log_max_string must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> StateConfig:
        """Create configuration from environment variables.

        Reads optional ``PATHSTATE_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StateConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PATHSTATE_WILDCARD_EVENT": "wildcard_event",
            "PATHSTATE_ERROR_EVENT": "error_event",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "hard_get" not in overrides:
            config_kwargs["hard_get"] = _env_bool(env.get("PATHSTATE_HARD_GET"), False)

        if "trace_emissions" not in overrides:
            config_kwargs["trace_emissions"] = _env_bool(env.get("PATHSTATE_TRACE_EMISSIONS"), False)

        max_string_env = env.get("PATHSTATE_LOG_MAX_STRING")
        if max_string_env is not None and "log_max_string" not in overrides:
            try:
                config_kwargs["log_max_string"] = int(max_string_env)
            except ValueError as exc:
                raise StateConfigError(f"PATHSTATE_LOG_MAX_STRING is not an integer: {max_string_env!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
