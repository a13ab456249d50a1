from __future__ import annotations

from typing import Any

import pytest

from pathstate import InvalidPathError, RootTargetError, State, StateEvent


@pytest.mark.asyncio
async def test_update_through_callback(initial_state: dict[str, Any], listen: Any) -> None:
    state = State(initial_state)
    on_all = listen(state, "@")
    on_posts = listen(state, "posts")
    on_new = listen(state, "posts/new")
    on_first = listen(state, "posts/new/0")
    everyone = [on_all, on_posts, on_new, on_first]

    def name_first(first: dict[str, Any]) -> dict[str, Any]:
        first["name"] = "yes"
        return first

    await state.update("/posts/new/0", name_first)

    assert state.get("posts") == {"new": [{"id": 1, "name": "yes"}, {"id": 2}]}
    assert on_all.count == 1
    assert on_posts.count == 1
    assert on_new.events == [StateEvent(event="posts/new", payload=[{"id": 1, "name": "yes"}, {"id": 2}])]
    assert on_first.events == [StateEvent(event="posts/new/0", payload={"id": 1, "name": "yes"})]

    for recorder in everyone:
        recorder.reset()

    def mark_updated(posts: dict[str, Any]) -> dict[str, Any]:
        posts["updated"] = "yes"
        return posts

    await state.update("/posts", mark_updated)

    assert state.get("posts") == {"new": [{"id": 1, "name": "yes"}, {"id": 2}], "updated": "yes"}
    assert on_all.count == 1
    assert on_posts.count == 1
    assert on_new.payloads == [[{"id": 1, "name": "yes"}, {"id": 2}]]
    assert on_first.payloads == [{"id": 1, "name": "yes"}]


@pytest.mark.asyncio
async def test_update_missing_key_receives_none() -> None:
    state = State({"counters": {}})
    seen: list[Any] = []

    def increment(value: int | None) -> int:
        seen.append(value)
        return (value or 0) + 1

    await state.update("counters/hits", increment)
    await state.update("counters/hits", increment)

    assert seen == [None, 1]
    assert state.get("counters/hits") == 2


@pytest.mark.asyncio
async def test_update_does_not_create_parents() -> None:
    state = State()

    with pytest.raises(InvalidPathError, match="Invalid path to value"):
        await state.update("missing/value", lambda value: 1)

    assert state.get() == {}


@pytest.mark.asyncio
async def test_update_root_fails(initial_state: dict[str, Any], listen: Any) -> None:
    state = State(initial_state)
    on_error = listen(state, "error")

    def touch_root(root: dict[str, Any]) -> dict[str, Any]:
        root["yes"] = "no"
        return root

    state.mutate(lambda tools: tools.update("/", touch_root))
    await state.wait_for_mutations()

    assert isinstance(on_error.last.error, RootTargetError)
    assert str(on_error.last.error) == "Invalid path to value"
    assert "yes" not in state.get()


@pytest.mark.asyncio
async def test_transformer_failure_is_reported(listen: Any) -> None:
    state = State({"a": 1})
    on_a = listen(state, "a")
    on_error = listen(state, "error")

    def explode(_value: Any) -> Any:
        raise ValueError("no thanks")

    with pytest.raises(ValueError, match="no thanks"):
        await state.update("a", explode)

    assert on_a.count == 0
    assert isinstance(on_error.last.error, ValueError)
    assert state.get("a") == 1
