# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from task_manager.config import Settings, get_settings
from task_manager.task_store import TaskStore


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's TASK_MANAGER_* variables out of the tests."""
    for name in ("TASK_MANAGER_FILE", "TASK_MANAGER_CATEGORIES", "TASK_MANAGER_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def tasks_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.json"


@pytest.fixture()
def settings(tasks_file: Path) -> Settings:
    return Settings(tasks_file=tasks_file)


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def populated_store(store: TaskStore) -> TaskStore:
    """Buy milk (Personal, 3) and Ship release (Work, 1)."""
    store.create("Personal", "Buy milk", "", 3)
    store.create("Work", "Ship release", "", 1)
    return store
