from __future__ import annotations

from typing import Any

import pytest

from pathstate import InvalidPathError, State, StateConfig


def test_initial_state() -> None:
    state = State({"initial": "value"})

    assert state.get() == {"initial": "value"}
    assert state.get("initial") == "value"


def test_default_empty_state() -> None:
    assert State().get() == {}


def test_get_returns_live_values(initial_state: dict[str, Any]) -> None:
    state = State(initial_state)
    posts = initial_state["posts"]
    users = initial_state["users"]

    assert state.get() is initial_state
    assert state.state is initial_state
    assert state.get("") is initial_state
    assert state.get("/") is initial_state
    assert state.get("/posts") is posts
    assert state.get("/posts/new") is posts["new"]
    assert state.get("/posts//new/0") is posts["new"][0]
    assert state.get("/posts//new/1/id") == 2
    assert state.get(["users", "old", "1", "id"]) == 4
    assert state.get("/users//old/0") is users["old"][0]
    assert state.get("/not/a/path/to/something") is None


def test_get_hard_raises_on_invalid_path(initial_state: dict[str, Any]) -> None:
    state = State(initial_state)

    with pytest.raises(InvalidPathError, match="Can't get a value from an invalid path"):
        state.get("/users//cat/1/name", hard=True)


def test_get_hard_default_comes_from_config(initial_state: dict[str, Any]) -> None:
    state = State(initial_state, config=StateConfig(hard_get=True))

    with pytest.raises(InvalidPathError):
        state.get("/users//cat/1/name")
    assert state.get("/users//cat/1/name", hard=False) is None
