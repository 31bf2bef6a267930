# src/todo_keeper/cli/render.py

from __future__ import annotations

from collections.abc import Sequence

from ..tasks.task_models import Task, TaskFilter

EMPTY_MESSAGES: dict[TaskFilter, str] = {
    TaskFilter.ALL: "No tasks yet. Add one to get started!",
    TaskFilter.ACTIVE: "No active tasks.",
    TaskFilter.COMPLETED: "No completed tasks yet.",
}


def render_task(pos: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"{pos:>3}. [{mark}] {task.description}"


def render_task_list(visible: Sequence[Task], task_filter: TaskFilter) -> str:
    if not visible:
        return EMPTY_MESSAGES[task_filter]
    return "\n".join(render_task(i, t) for i, t in enumerate(visible, start=1))


def render_footer(active: int, task_filter: TaskFilter, has_completed: bool) -> str:
    noun = "task" if active == 1 else "tasks"
    parts = [f"{active} {noun} remaining", f"filter: {task_filter.value}"]
    if has_completed:
        parts.append("/clear to remove completed")
    return " | ".join(parts)
