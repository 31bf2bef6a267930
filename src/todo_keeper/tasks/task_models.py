# src/todo_keeper/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskFilter(StrEnum):
    """Named view over the task list. Process-local, never persisted."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    description: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "description": self.description, "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Strict decoding of one stored item.

        Raises ValueError on any shape mismatch; the store treats that as
        "no saved state".
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task item must be an object, got {type(raw).__name__}")

        tid = raw.get("id")
        description = raw.get("description")
        completed = raw.get("completed")

        if not isinstance(tid, str) or not tid:
            raise ValueError("task id must be a non-empty string")
        if not isinstance(description, str):
            raise ValueError(f"task {tid}: description must be a string")
        if not isinstance(completed, bool):
            raise ValueError(f"task {tid}: completed must be a boolean")

        return cls(id=tid, description=description, completed=completed)
