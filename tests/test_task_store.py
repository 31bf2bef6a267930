# tests/test_task_store.py

from __future__ import annotations

import json
import logging
import random

import pytest

from todo_keeper.storage.kv_store import MemoryStorage
from todo_keeper.tasks.task_models import Task, TaskFilter
from todo_keeper.tasks.task_store import (
    TaskStore,
    active_count,
    decode_tasks,
    encode_tasks,
    filtered_view,
    has_completed,
)

from .fakes import BrokenStorage, CountingIds, RecordingStorage


def _descriptions(tasks) -> list[str]:
    return [t.description for t in tasks]


def test_add_buy_milk(storage: RecordingStorage) -> None:
    store = TaskStore(storage)

    result = store.add("Buy milk")

    assert result.changed is True
    assert len(result.tasks) == 1
    assert result.tasks[0].description == "Buy milk"
    assert result.tasks[0].completed is False
    assert active_count(result.tasks) == 1
    assert store.tasks == result.tasks


def test_toggle_splits_filtered_views(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    store.add("A")
    store.add("B")
    a_id = store.tasks[0].id

    store.toggle(a_id)

    assert _descriptions(filtered_view(store.tasks, TaskFilter.COMPLETED)) == ["A"]
    assert _descriptions(filtered_view(store.tasks, TaskFilter.ACTIVE)) == ["B"]
    assert _descriptions(filtered_view(store.tasks, TaskFilter.ALL)) == ["A", "B"]


def test_toggle_twice_restores_completed_flag(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    tid = store.add("A").tasks[0].id

    before = store.tasks
    store.toggle(tid)
    assert store.get(tid).completed is True
    store.toggle(tid)

    assert store.tasks == before


def test_clear_completed_keeps_only_active(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    for text in ("one", "two", "three"):
        store.add(text)
    store.toggle(store.tasks[0].id)
    store.toggle(store.tasks[2].id)

    result = store.clear_completed()

    assert result.changed is True
    assert _descriptions(result.tasks) == ["two"]
    assert result.tasks[0].completed is False


def test_clear_completed_is_idempotent(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    store.add("x")
    store.add("y")
    store.toggle(store.tasks[1].id)

    once = store.clear_completed().tasks
    twice = store.clear_completed()

    assert twice.tasks == once
    assert twice.changed is False


def test_edit_replaces_description_without_validation(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    tid = store.add("old").tasks[0].id

    assert store.edit(tid, "new").tasks[0].description == "new"
    # The store accepts anything; empty text is rejected by the caller.
    assert store.edit(tid, "").tasks[0].description == ""


def test_add_accepts_empty_description(storage: RecordingStorage) -> None:
    store = TaskStore(storage)

    result = store.add("")

    assert result.tasks[0].description == ""


def test_unknown_id_commands_are_noops(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    store.add("keep")
    before = store.tasks

    for result in (store.toggle("missing"), store.edit("missing", "x"), store.delete("missing")):
        assert result.changed is False
        assert result.tasks == before


def test_every_command_writes_full_list_once(storage: RecordingStorage) -> None:
    store = TaskStore(storage, id_factory=CountingIds())
    assert storage.writes == []

    store.add("A")
    store.add("B")
    store.toggle("t1")
    store.edit("t2", "B2")
    store.delete("missing")
    store.clear_completed()
    store.delete("t2")

    assert len(storage.writes) == 7
    assert all(key == "tasks" for key, _ in storage.writes)
    assert json.loads(storage.writes[3][1]) == [
        {"id": "t1", "description": "A", "completed": True},
        {"id": "t2", "description": "B2", "completed": False},
    ]
    assert json.loads(storage.writes[-1][1]) == []


def test_filter_is_not_persisted(storage: RecordingStorage) -> None:
    store = TaskStore(storage)
    store.add("A")
    writes_before = len(storage.writes)

    assert store.set_filter("completed") is TaskFilter.COMPLETED
    assert store.visible_tasks() == []
    assert len(storage.writes) == writes_before

    assert TaskStore(storage).filter is TaskFilter.ALL


def test_random_command_sequences_keep_invariants() -> None:
    rng = random.Random(1234)
    store = TaskStore(MemoryStorage())

    for step in range(300):
        ids = [t.id for t in store.tasks]
        op = rng.choice(["add", "add", "toggle", "edit", "delete", "clear"])
        if op == "add" or not ids:
            store.add(f"task {step}")
        elif op == "toggle":
            store.toggle(rng.choice(ids))
        elif op == "edit":
            store.edit(rng.choice(ids), f"edited {step}")
        elif op == "delete":
            store.delete(rng.choice(ids))
        else:
            store.clear_completed()

        tasks = store.tasks
        ids_now = [t.id for t in tasks]
        assert len(ids_now) == len(set(ids_now))

        active = filtered_view(tasks, TaskFilter.ACTIVE)
        done = filtered_view(tasks, TaskFilter.COMPLETED)
        assert {t.id for t in active} | {t.id for t in done} == set(ids_now)
        assert not ({t.id for t in active} & {t.id for t in done})

        assert active_count(tasks) + sum(1 for t in tasks if t.completed) == len(tasks)
        assert has_completed(tasks) == bool(done)


def test_save_then_load_round_trip() -> None:
    storage = MemoryStorage()
    store = TaskStore(storage)
    store.add("first")
    store.add("second, with \"quotes\" and ünïcode")
    store.toggle(store.tasks[0].id)

    reloaded = TaskStore(storage)

    assert reloaded.tasks == store.tasks
    assert reloaded.load() == store.tasks


def test_explicit_save_overwrites_slot() -> None:
    storage = MemoryStorage()
    store = TaskStore(storage)
    tasks = (Task(id="a", description="x"), Task(id="b", description="y", completed=True))

    store.save(tasks)

    assert store.load() == tasks


def test_load_corrupted_text_starts_empty(caplog: pytest.LogCaptureFixture) -> None:
    storage = MemoryStorage()
    storage.set_item("tasks", "definitely not json {")

    with caplog.at_level(logging.ERROR, logger="todo_keeper.tasks.task_store"):
        store = TaskStore(storage)

    assert store.tasks == ()
    assert any("Failed to load tasks" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize(
    "raw",
    [
        '{"id": "a"}',
        "[1, 2]",
        '[{"id": "a", "description": "x"}]',
        '[{"id": "a", "description": "x", "completed": "yes"}]',
        '[{"id": 5, "description": "x", "completed": false}]',
        '[{"id": "a", "description": null, "completed": false}]',
        '[{"id": "a", "description": "x", "completed": false},'
        ' {"id": "a", "description": "y", "completed": true}]',
    ],
)
def test_load_wrong_shape_is_treated_as_absent(raw: str) -> None:
    storage = MemoryStorage()
    storage.set_item("tasks", raw)

    assert TaskStore(storage).tasks == ()


def test_load_ignores_other_keys() -> None:
    storage = MemoryStorage()
    storage.set_item("other", "garbage")

    store = TaskStore(storage, key="tasks")

    assert store.tasks == ()


def test_unreadable_storage_starts_empty() -> None:
    storage = BrokenStorage(fail_reads=True, fail_writes=False)

    store = TaskStore(storage)

    assert store.tasks == ()
    store.add("still works")
    assert storage.write_attempts == 1


def test_write_failure_is_swallowed(caplog: pytest.LogCaptureFixture) -> None:
    storage = BrokenStorage(fail_reads=False, fail_writes=True)
    store = TaskStore(storage)

    with caplog.at_level(logging.ERROR, logger="todo_keeper.tasks.task_store"):
        result = store.add("in memory only")

    assert _descriptions(result.tasks) == ["in memory only"]
    assert storage.items == {}
    assert any("Failed to save" in r.getMessage() for r in caplog.records)


def test_quota_exceeded_keeps_previous_saved_state() -> None:
    storage = MemoryStorage(quota_bytes=120)
    store = TaskStore(storage)
    store.add("short")
    saved = storage.get_item("tasks")

    store.add("x" * 200)

    assert len(store.tasks) == 2
    assert storage.get_item("tasks") == saved
    assert len(TaskStore(storage).tasks) == 1


def test_duplicate_id_from_factory_is_refused() -> None:
    store = TaskStore(MemoryStorage(), id_factory=lambda: "same")
    store.add("first")

    with pytest.raises(RuntimeError):
        store.add("second")
    assert len(store.tasks) == 1


def test_default_ids_are_unique_strings() -> None:
    store = TaskStore(MemoryStorage())
    for i in range(50):
        store.add(str(i))

    ids = [t.id for t in store.tasks]
    assert all(isinstance(i, str) and i for i in ids)
    assert len(set(ids)) == 50


def test_encode_decode_helpers() -> None:
    tasks = (Task(id="a", description="x"), Task(id="b", description="", completed=True))

    assert decode_tasks(encode_tasks(tasks)) == tasks
    assert decode_tasks("[]") == ()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("all", TaskFilter.ALL),
        ("Active", TaskFilter.ACTIVE),
        (" completed ", TaskFilter.COMPLETED),
        ("", TaskFilter.ALL),
        (None, TaskFilter.ALL),
        ("bogus", TaskFilter.ALL),
    ],
)
def test_task_filter_parse(raw, expected) -> None:
    assert TaskFilter.parse(raw) is expected


def test_filtered_view_does_not_mutate_input() -> None:
    tasks = [Task(id="a", description="x", completed=True), Task(id="b", description="y")]

    view = filtered_view(tasks, "active")

    assert [t.id for t in view] == ["b"]
    assert [t.id for t in tasks] == ["a", "b"]
    assert filtered_view(tasks, "all") == tasks


@pytest.mark.parametrize(
    "raw",
    ["[" + "1" * 5000 + "]", "[" * 200000],
    ids=["huge-int", "deep-nesting"],
)
def test_load_pathological_json_starts_empty(raw: str, caplog: pytest.LogCaptureFixture) -> None:
    storage = MemoryStorage()
    storage.set_item("tasks", raw)

    with caplog.at_level(logging.ERROR, logger="todo_keeper.tasks.task_store"):
        store = TaskStore(storage)

    assert store.tasks == ()
    assert any("Failed to load tasks" in r.getMessage() for r in caplog.records)


def test_lone_surrogate_description_fits_quota_storage() -> None:
    storage = MemoryStorage(quota_bytes=10_000)
    store = TaskStore(storage)

    result = store.add("bad \udcff")

    assert [t.description for t in result.tasks] == ["bad \udcff"]
    assert storage.get_item("tasks").isascii()
    assert TaskStore(storage).tasks == store.tasks


def test_encode_tasks_escapes_non_ascii() -> None:
    tasks = (Task(id="a", description="café \udcff"),)

    raw = encode_tasks(tasks)

    assert raw.isascii()
    assert decode_tasks(raw) == tasks
