# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_keeper.cli.bootstrap import create_initial_state
from todo_keeper.core.state import AppState

from .fakes import RecordingStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=data_dir,
        log_dir=data_dir,
        storage_path=data_dir / "storage.json",
        storage_key="tasks",
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState built by the real composition root.

    NOTE: We keep the real JSON file storage here because persistence is part
    of what we want to test.
    """
    return create_initial_state(settings=settings)


@pytest.fixture()
def storage() -> RecordingStorage:
    return RecordingStorage()
