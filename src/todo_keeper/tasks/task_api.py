# src/todo_keeper/tasks/task_api.py

from __future__ import annotations

import logging

from .task_models import Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def normalize_description(text: str | None) -> str | None:
    """
    Caller-side rule for edits: trimmed text, or None when nothing is left.

    The store itself accepts any string; only the edit path goes through here.
    """
    if text is None:
        return None
    text = text.strip()
    return text or None


def task_at_position(store: TaskStore, raw: str) -> Task | None:
    """
    Resolve a 1-based position in the currently visible list to a task.

    Positions are what the console shows next to each task; ids are opaque.
    """
    try:
        pos = int(raw)
    except (TypeError, ValueError):
        return None

    visible = store.visible_tasks()
    if pos < 1 or pos > len(visible):
        return None
    return visible[pos - 1]


def edit_task(store: TaskStore, task_id: str, new_description: str) -> bool:
    """
    Apply an edit if the new text survives validation.

    Returns False (and leaves the store untouched) for empty or whitespace-only text.
    """
    clean = normalize_description(new_description)
    if clean is None:
        logger.debug("Rejected empty edit for task id=%s", task_id)
        return False
    store.edit(task_id, clean)
    return True
