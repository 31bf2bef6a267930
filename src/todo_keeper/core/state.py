# src/todo_keeper/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings are kept on the state so handlers can read them without a global lookup.
    settings: Any
    task_store: TaskStore

    lock: threading.Lock = field(default_factory=threading.Lock)
