"""Notification envelopes delivered to subscribers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StateEvent(BaseModel):
    """A single notification.

    ``payload`` is passed through untouched: for ancestors and the wildcard
    it is the live node in the tree, not a copy.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    event: str = Field(..., description="Canonical path (or channel name) that triggered the notification")
    payload: Any = None

    @property
    def error(self) -> BaseException | None:
        """The failure carried by an error-channel event."""
        return self.payload if isinstance(self.payload, BaseException) else None
