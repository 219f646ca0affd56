# tests/test_server.py

from __future__ import annotations

from pathlib import Path

from mcp import types

from task_manager.config import Settings
from task_manager.server import build_server, call_task_tool, task_tools
from task_manager.task_store import TaskStore


def call(store: TaskStore, settings: Settings, tool: str, **arguments) -> str:
    return call_task_tool(store, settings, tool, arguments)


def test_tool_names(settings: Settings) -> None:
    assert [tool.name for tool in task_tools(settings)] == [
        "add_task",
        "complete_task",
        "delete_task",
        "edit_task",
        "list_tasks",
        "search_tasks",
        "save_tasks",
        "load_tasks",
    ]


def test_add_task_uses_configured_categories(store: TaskStore, settings: Settings) -> None:
    text = call(store, settings, "add_task", name="Buy milk", priority=3, category="Personal")

    assert text.startswith("✅ Added task to Personal")
    assert [t.name for t in store.list_by_category("Personal")] == ["Buy milk"]

    text = call(store, settings, "add_task", name="Dig", category="Garden")
    assert text.startswith("Error:")
    assert len(store) == 1


def test_add_task_requires_name(store: TaskStore, settings: Settings) -> None:
    assert call(store, settings, "add_task").startswith("Error: missing argument")


def test_complete_edit_delete(populated_store: TaskStore, settings: Settings) -> None:
    milk = populated_store.list_by_category("Personal")[0]

    call(populated_store, settings, "complete_task", task_id=str(milk.id))
    assert milk.completed is True

    call(populated_store, settings, "edit_task", task_id=str(milk.id), priority=0)
    assert [t.name for t in populated_store.list_by_priority()] == ["Buy milk", "Ship release"]
    assert milk.name == "Buy milk"

    call(populated_store, settings, "delete_task", task_id=str(milk.id))
    assert milk not in populated_store


def test_bad_task_ids(populated_store: TaskStore, settings: Settings) -> None:
    assert call(populated_store, settings, "complete_task", task_id="nope").startswith("Error:")
    text = call(populated_store, settings, "delete_task", task_id="00000000-0000-0000-0000-000000000000")
    assert "not found" in text
    assert len(populated_store) == 2


def test_list_and_search(populated_store: TaskStore, settings: Settings) -> None:
    text = call(populated_store, settings, "list_tasks")
    assert text.index("Ship release") < text.index("Buy milk")

    text = call(populated_store, settings, "list_tasks", category="Personal")
    assert "Buy milk" in text and "Ship release" not in text

    assert call(populated_store, settings, "list_tasks", category="Other") == "No tasks found"

    text = call(populated_store, settings, "search_tasks", query="SHIP")
    assert "Ship release" in text and "Buy milk" not in text


def test_save_and_load(populated_store: TaskStore, settings: Settings, tasks_file: Path) -> None:
    assert call(populated_store, settings, "save_tasks").startswith("💾 Saved 2 tasks")
    assert tasks_file.exists()

    other = TaskStore()
    assert call(other, settings, "load_tasks", path=str(tasks_file)).startswith("📂 Loaded 2 tasks")
    assert [t.name for t in other.list_by_priority()] == ["Ship release", "Buy milk"]


def test_load_failure_keeps_store(populated_store: TaskStore, settings: Settings, tmp_path: Path) -> None:
    text = call(populated_store, settings, "load_tasks", path=str(tmp_path / "missing.json"))

    assert text.startswith("Error:")
    assert len(populated_store) == 2


def test_unknown_tool(store: TaskStore, settings: Settings) -> None:
    assert call(store, settings, "fly") == "Error: Unknown tool: fly"


def test_build_server_registers_tool_handlers(store: TaskStore, settings: Settings) -> None:
    server = build_server(store, settings)

    assert types.ListToolsRequest in server.request_handlers
    assert types.CallToolRequest in server.request_handlers


def test_malformed_arguments_become_error_text(populated_store: TaskStore, settings: Settings) -> None:
    milk = populated_store.list_by_category("Personal")[0]

    assert call(populated_store, settings, "edit_task", task_id=str(milk.id), priority=None).startswith("Error:")
    assert call(populated_store, settings, "complete_task", task_id=5).startswith("Error:")
    assert milk.priority == 3
    assert milk.completed is False


def test_rejected_edit_leaves_task_unchanged(populated_store: TaskStore, settings: Settings) -> None:
    milk = populated_store.list_by_category("Personal")[0]

    text = call(populated_store, settings, "edit_task", task_id=str(milk.id), name="Renamed", description=5)

    assert text.startswith("Error:")
    assert (milk.name, milk.description, milk.priority) == ("Buy milk", "", 3)
