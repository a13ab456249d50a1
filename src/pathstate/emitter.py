"""Per-instance publish/subscribe.

Listeners are registered against exact event names. Emission iterates over
a snapshot of the listeners, so (un)registering from inside a listener only
affects later emissions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pathstate.events import StateEvent

_logger = logging.getLogger(__name__)

Listener = Callable[[StateEvent], None]


@dataclass(slots=True)
class _Registration:
    listener: Listener
    once: bool = False


class EventEmitter:
    """Named-event registry with synchronous fan-out."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[_Registration]] = {}

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(_Registration(listener))

    def once(self, event: str, listener: Listener) -> None:
        """Register *listener* for the next emission of *event* only."""
        self._listeners.setdefault(event, []).append(_Registration(listener, once=True))

    def off(self, event: str, listener: Listener | None = None) -> None:
        """Remove *listener* from *event*, or every listener when omitted."""
        if listener is None:
            self._listeners.pop(event, None)
            return
        registrations = self._listeners.get(event)
        if not registrations:
            return
        for index, registration in enumerate(registrations):
            if registration.listener == listener:
                del registrations[index]
                break
        if not registrations:
            self._listeners.pop(event, None)

    def emit(self, event: str, payload: Any = None) -> bool:
        """Deliver a :class:`StateEvent` to every listener of *event*.

        Returns whether any listener was registered. A failing listener is
        logged and does not prevent delivery to the others.
        """
        registrations = self._listeners.get(event)
        if not registrations:
            return False

        snapshot = list(registrations)
        for registration in snapshot:
            if registration.once:
                self._discard(event, registration)

        message = StateEvent(event=event, payload=payload)
        for registration in snapshot:
            try:
                registration.listener(message)
            except Exception:
                _logger.warning("Listener for %r failed", event, exc_info=True)
        return True

    def event_names(self) -> list[str]:
        return list(self._listeners)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def _discard(self, event: str, registration: _Registration) -> None:
        registrations = self._listeners.get(event)
        if registrations is None:
            return
        remaining = [cand for cand in registrations if cand is not registration]
        if remaining:
            self._listeners[event] = remaining
        else:
            self._listeners.pop(event, None)
