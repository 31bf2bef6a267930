# src/todo_keeper/storage/errors.py

from __future__ import annotations


class PersistenceError(RuntimeError):
    """Base class for storage failures. Never escapes the task store."""


class PersistenceReadFailure(PersistenceError):
    """Stored data is missing its expected shape or cannot be read."""


class PersistenceWriteFailure(PersistenceError):
    """Storage is unavailable or the write would exceed its quota."""
