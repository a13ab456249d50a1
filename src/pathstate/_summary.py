"""Helpers for compact debug logging.

State trees and notification payloads can be arbitrarily large. This module
provides a small utility to bound them before emitting DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MAX_ITEMS = 20


def summarize_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a bounded copy of *value* suitable for debug logs."""
    if _depth > 6:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, BaseException):
        return f"<{type(value).__name__}: {value}>"

    if isinstance(value, Mapping):
        summary: dict[str, Any] = {}
        for index, (k, v) in enumerate(value.items()):
            if index >= _MAX_ITEMS:
                summary["…"] = f"<{len(value) - _MAX_ITEMS} more>"
                break
            summary[str(k)] = summarize_for_log(v, max_string=max_string, _depth=_depth + 1)
        return summary

    if isinstance(value, Sequence):
        items = [summarize_for_log(v, max_string=max_string, _depth=_depth + 1) for v in list(value)[:_MAX_ITEMS]]
        if len(value) > _MAX_ITEMS:
            items.append(f"<{len(value) - _MAX_ITEMS} more>")
        return items

    text = repr(value)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated>"
    return text
