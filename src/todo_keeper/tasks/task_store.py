# src/todo_keeper/tasks/task_store.py

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace

from ..core.ports import KeyValueStorage
from ..storage.errors import PersistenceError, PersistenceReadFailure, PersistenceWriteFailure
from .task_models import Task, TaskFilter

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


def new_task_id() -> str:
    return uuid.uuid4().hex


def filtered_view(tasks: Iterable[Task], task_filter: TaskFilter | str) -> list[Task]:
    """Tasks visible under the given filter, in insertion order."""
    task_filter = TaskFilter.parse(task_filter)
    if task_filter is TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if task_filter is TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def active_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if not t.completed)


def has_completed(tasks: Iterable[Task]) -> bool:
    return any(t.completed for t in tasks)


def encode_tasks(tasks: Sequence[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=True)


def decode_tasks(raw: str) -> tuple[Task, ...]:
    """
    Parse the stored JSON text.

    Raises PersistenceReadFailure for anything but a list of well-formed task
    objects with unique ids.
    """
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise PersistenceReadFailure(f"stored tasks are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceReadFailure(f"stored tasks must be a list, got {type(data).__name__}")

    out: list[Task] = []
    seen: set[str] = set()
    for item in data:
        try:
            task = Task.from_dict(item)
        except ValueError as e:
            raise PersistenceReadFailure(str(e)) from e
        if task.id in seen:
            raise PersistenceReadFailure(f"duplicate task id {task.id}")
        seen.add(task.id)
        out.append(task)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """New store state after a command; changed=False means the command was a no-op."""

    tasks: tuple[Task, ...]
    changed: bool


class TaskStore:
    """
    Ordered task collection mirrored into a key-value storage slot.

    Persistence is best-effort:
    - load() falls back to an empty list on absent or corrupted data
    - save() logs and swallows write failures
    The in-memory collection is the source of truth for the running process.

    Every command writes the full resulting list exactly once.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._storage = storage
        self._key = key
        self._id_factory = id_factory
        self._filter = TaskFilter.ALL
        self._tasks: tuple[Task, ...] = self.load()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- state ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def set_filter(self, task_filter: TaskFilter | str) -> TaskFilter:
        self._filter = TaskFilter.parse(task_filter)
        return self._filter

    def visible_tasks(self) -> list[Task]:
        return filtered_view(self._tasks, self._filter)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def active_count(self) -> int:
        return active_count(self._tasks)

    def has_completed(self) -> bool:
        return has_completed(self._tasks)

    # ---- persistence ----

    def load(self) -> tuple[Task, ...]:
        try:
            raw = self._storage.get_item(self._key)
            if raw is None:
                return ()
            tasks = decode_tasks(raw)
        except PersistenceError:
            logger.exception("Failed to load tasks from storage key=%s; starting empty.", self._key)
            return ()
        logger.debug("Loaded %d tasks from key=%s", len(tasks), self._key)
        return tasks

    def save(self, tasks: Sequence[Task]) -> None:
        try:
            self._storage.set_item(self._key, encode_tasks(tasks))
        except (PersistenceWriteFailure, OSError, ValueError):
            logger.exception("Failed to save %d tasks to storage key=%s.", len(tasks), self._key)

    def _commit(self, tasks: tuple[Task, ...], *, changed: bool) -> CommandResult:
        self._tasks = tasks
        self.save(tasks)
        return CommandResult(tasks=tasks, changed=changed)

    # ---- commands ----

    def add(self, description: str) -> CommandResult:
        task = Task(id=self._id_factory(), description=description, completed=False)
        if self.get(task.id) is not None:
            raise RuntimeError(f"id factory returned a duplicate id {task.id}")
        logger.debug("Task added id=%s", task.id)
        return self._commit((*self._tasks, task), changed=True)

    def toggle(self, task_id: str) -> CommandResult:
        changed = False
        out: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                t = replace(t, completed=not t.completed)
                changed = True
            out.append(t)
        logger.debug("Task toggle id=%s changed=%s", task_id, changed)
        return self._commit(tuple(out), changed=changed)

    def edit(self, task_id: str, new_description: str) -> CommandResult:
        changed = False
        out: list[Task] = []
        for t in self._tasks:
            if t.id == task_id:
                changed = t.description != new_description
                t = replace(t, description=new_description)
            out.append(t)
        logger.debug("Task edit id=%s changed=%s", task_id, changed)
        return self._commit(tuple(out), changed=changed)

    def delete(self, task_id: str) -> CommandResult:
        out = tuple(t for t in self._tasks if t.id != task_id)
        changed = len(out) != len(self._tasks)
        logger.debug("Task delete id=%s changed=%s", task_id, changed)
        return self._commit(out, changed=changed)

    def clear_completed(self) -> CommandResult:
        out = tuple(t for t in self._tasks if not t.completed)
        removed = len(self._tasks) - len(out)
        logger.debug("Cleared %d completed tasks", removed)
        return self._commit(out, changed=removed > 0)
