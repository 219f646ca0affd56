# tests/test_task.py

from __future__ import annotations

import pytest
from pydantic import ValidationError

from task_manager.task import Task


def test_new_task_defaults() -> None:
    task = Task(name="Buy milk")

    assert task.description == ""
    assert task.priority == 1
    assert task.completed is False
    assert task.completed_at is None


def test_identical_fields_are_distinct_tasks() -> None:
    a = Task(name="Buy milk", priority=3)
    b = Task(name="Buy milk", priority=3)

    assert a.id != b.id
    assert a != b


def test_id_cannot_be_reassigned() -> None:
    task = Task(name="Buy milk")
    other = Task(name="Other")

    with pytest.raises(ValidationError):
        task.id = other.id


def test_mark_completed_is_idempotent() -> None:
    task = Task(name="Buy milk")
    task.mark_completed()
    first_completed_at = task.completed_at

    task.mark_completed()

    assert task.completed is True
    assert task.completed_at == first_completed_at


def test_edit_replaces_fields() -> None:
    task = Task(name="Buy milk", description="2 litres", priority=3)

    task.edit("Buy oat milk", "1 litre", 5)

    assert (task.name, task.description, task.priority) == ("Buy oat milk", "1 litre", 5)
    assert task.updated_at >= task.created_at


def test_str_shows_status() -> None:
    task = Task(name="Buy milk")
    assert str(task) == "Buy milk - Pending"

    task.mark_completed()
    assert str(task) == "Buy milk - Completed"


def test_invalid_edit_changes_nothing() -> None:
    task = Task(name="Buy milk", description="2 litres", priority=3)
    updated_at = task.updated_at

    with pytest.raises(ValidationError):
        task.edit("Renamed", "1 litre", "not a number")

    assert (task.name, task.description, task.priority) == ("Buy milk", "2 litres", 3)
    assert task.updated_at == updated_at
