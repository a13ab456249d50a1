from __future__ import annotations

from typing import Any

import pytest

from pathstate import RootTargetError, State


@pytest.mark.asyncio
async def test_remove_in_deep_path(initial_state: dict[str, Any], listen: Any) -> None:
    state = State(initial_state)
    on_all = listen(state, "@")
    on_posts = listen(state, "posts")
    on_new = listen(state, "posts/new")
    on_new_0 = listen(state, "posts/new/0")
    on_id = listen(state, "posts/new/0/id")
    everyone = [on_all, on_posts, on_new, on_new_0, on_id]

    await state.remove("/posts/new/0/id")

    assert state.get("posts") == {"new": [{}, {"id": 2}]}
    assert on_all.count == 1
    assert on_posts.count == 1
    assert on_new.count == 1
    assert on_new_0.payloads == [{}]
    assert on_id.payloads == [None]

    for recorder in everyone:
        recorder.reset()

    await state.remove("/posts/old/0/id")

    assert state.get("posts") == {"new": [{}, {"id": 2}]}
    assert all(recorder.count == 0 for recorder in everyone)

    await state.remove("/posts")

    assert state.get("posts") is None
    assert on_all.count == 1
    assert on_posts.payloads == [None]
    assert on_new.payloads == [None]
    assert on_new_0.payloads == [None]
    assert on_id.payloads == [None]


@pytest.mark.asyncio
async def test_remove_after_set_round_trip() -> None:
    state = State()

    await state.set("a/b", 1)
    await state.remove("a/b")

    assert state.get("a/b") is None
    assert state.get("a") == {}


@pytest.mark.asyncio
async def test_remove_missing_key_is_a_no_op(listen: Any) -> None:
    state = State({"a": {"b": 1}})
    on_all = listen(state, "@")

    await state.remove("a/c")
    await state.remove("a/b/c/d")

    assert on_all.count == 0
    assert state.get() == {"a": {"b": 1}}


@pytest.mark.asyncio
async def test_remove_list_element_keeps_sibling_indices(listen: Any) -> None:
    state = State({"items": ["a", "b", "c"]})
    on_items = listen(state, "items")
    on_first = listen(state, "items/0")
    on_second = listen(state, "items/1")

    await state.set("items/0", "x")
    await state.remove("items/0")

    assert state.get("items/0") is None
    assert state.get("items/1") == "b"
    assert state.get("items/2") == "c"
    assert state.get("items") == [None, "b", "c"]
    assert on_items.count == 2
    assert on_first.payloads == ["x", None]
    assert on_second.count == 0


@pytest.mark.asyncio
async def test_remove_emptied_list_slot_is_a_no_op(listen: Any) -> None:
    state = State({"items": ["a", "b"]})
    await state.remove("items/0")
    on_all = listen(state, "@")

    await state.remove("items/0")

    assert on_all.count == 0
    assert state.get("items") == [None, "b"]


@pytest.mark.asyncio
async def test_remove_root_fails(initial_state: dict[str, Any]) -> None:
    state = State(initial_state)

    with pytest.raises(RootTargetError, match="Invalid path to value"):
        await state.remove("")

    assert state.get() == {
        "posts": {"new": [{"id": 1}, {"id": 2}]},
        "users": {"old": [{"id": 3}, {"id": 4}]},
    }
