from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from pathstate import State, StateEvent


@dataclass
class Recorder:
    """Collects the events delivered to one subscription."""

    events: list[StateEvent] = field(default_factory=list)

    def __call__(self, event: StateEvent) -> None:
        self.events.append(event)

    @property
    def count(self) -> int:
        return len(self.events)

    @property
    def payloads(self) -> list[Any]:
        return [event.payload for event in self.events]

    @property
    def last(self) -> StateEvent:
        return self.events[-1]

    def reset(self) -> None:
        self.events.clear()


@pytest.fixture
def listen() -> Callable[[State, str], Recorder]:
    def _listen(state: State, path: str) -> Recorder:
        recorder = Recorder()
        state.on(path, recorder)
        return recorder

    return _listen


@pytest.fixture
def initial_state() -> dict[str, Any]:
    return {
        "posts": {"new": [{"id": 1}, {"id": 2}]},
        "users": {"old": [{"id": 3}, {"id": 4}]},
    }
