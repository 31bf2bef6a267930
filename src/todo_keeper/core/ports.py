# src/todo_keeper/core/ports.py

"""
Ports (interfaces) used by the core.

The task store depends on a Protocol instead of a concrete storage backend.
This keeps storage swappable and makes testing easier.
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStorage(Protocol):
    """
    String key -> string value storage (localStorage-style).

    get_item raises PersistenceReadFailure when the backing data is unreadable;
    set_item raises PersistenceWriteFailure when the write cannot be done.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
