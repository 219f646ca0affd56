"""
Task Manager MCP Server

Exposes the task store as MCP tools over stdio.
"""

import asyncio
import logging
import sys
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID

from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
from mcp.types import ServerCapabilities, TextContent, Tool

from . import __version__
from .config import Settings, get_settings
from .errors import TaskStoreError
from .task import Task
from .task_store import TaskStore

logger = logging.getLogger("task-manager-mcp")


def task_tools(settings: Settings) -> List[Tool]:
    """Tool definitions; the category enum comes from settings."""
    task_id = {"type": "string", "description": "Full task ID"}
    priority = {"type": "integer", "minimum": 1, "maximum": 10, "description": "Priority, 1 sorts first"}
    path = {"type": "string", "description": "Tasks file (defaults to the configured file)"}

    return [
        Tool(
            name="add_task",
            description="Add a task to a category",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Task name"},
                    "description": {"type": "string", "description": "Optional task description"},
                    "priority": priority,
                    "category": {"type": "string", "enum": list(settings.categories)},
                },
                "required": ["name"],
            },
        ),
        Tool(
            name="complete_task",
            description="Mark a task as completed",
            inputSchema={"type": "object", "properties": {"task_id": task_id}, "required": ["task_id"]},
        ),
        Tool(
            name="delete_task",
            description="Delete a task from every category",
            inputSchema={"type": "object", "properties": {"task_id": task_id}, "required": ["task_id"]},
        ),
        Tool(
            name="edit_task",
            description="Change a task's name, description or priority",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": task_id,
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "priority": priority,
                },
                "required": ["task_id"],
            },
        ),
        Tool(
            name="list_tasks",
            description="List tasks by priority, by category, or every category in turn",
            inputSchema={
                "type": "object",
                "properties": {
                    "category": {"type": "string", "description": "Only this category"},
                    "order": {"type": "string", "enum": ["priority", "all"], "default": "priority"},
                },
            },
        ),
        Tool(
            name="search_tasks",
            description="Find tasks whose name contains the query, ignoring case",
            inputSchema={
                "type": "object",
                "properties": {"query": {"type": "string", "default": ""}},
            },
        ),
        Tool(
            name="save_tasks",
            description="Save every task to a file",
            inputSchema={"type": "object", "properties": {"path": path}},
        ),
        Tool(
            name="load_tasks",
            description="Replace every task with the contents of a file",
            inputSchema={"type": "object", "properties": {"path": path}},
        ),
    ]


def format_task_for_display(task: Task) -> str:
    """Format a task for display in responses."""
    status_emoji = "✅" if task.completed else "⏳"
    result = f"{status_emoji} [{task.priority}] **{task.name}**"
    if task.description:
        result += f"\n   {task.description}"
    result += f"\n   🆔 ID: `{task.id}`"
    return result


def format_task_list(tasks: List[Task], heading: str) -> str:
    if not tasks:
        return "No tasks found"
    return f"📋 {heading} ({len(tasks)}):\n\n" + "\n\n".join(format_task_for_display(t) for t in tasks)


def _find_task(store: TaskStore, arguments: Dict[str, Any]) -> Task:
    task = store.get_task(UUID(arguments["task_id"]))
    if task is None:
        raise ValueError(f"Task {arguments['task_id']} not found")
    return task


def call_task_tool(store: TaskStore, settings: Settings, name: str, arguments: Dict[str, Any]) -> str:
    """Run one tool against the store and return the response text."""
    try:
        if name == "add_task":
            category = arguments.get("category") or settings.categories[0]
            if category not in settings.categories:
                raise ValueError(f"Unknown category {category!r}")

            task = store.create(
                category,
                arguments["name"],
                arguments.get("description", ""),
                int(arguments.get("priority", 1)),
            )
            return f"✅ Added task to {category}:\n\n{format_task_for_display(task)}"

        elif name == "complete_task":
            task = _find_task(store, arguments)
            store.complete(task)
            return f"✅ Completed task: {task.name}"

        elif name == "delete_task":
            task = _find_task(store, arguments)
            store.delete(task)
            return f"🗑️ Deleted task: {task.name}"

        elif name == "edit_task":
            task = _find_task(store, arguments)
            store.edit(
                task,
                arguments.get("name", task.name),
                arguments.get("description", task.description),
                int(arguments.get("priority", task.priority)),
            )
            return f"✏️ Updated task:\n\n{format_task_for_display(task)}"

        elif name == "list_tasks":
            category = arguments.get("category")
            if category is not None:
                return format_task_list(store.list_by_category(category), f"Tasks in {category}")
            if arguments.get("order", "priority") == "all":
                return format_task_list(store.list_all(), "All tasks")
            return format_task_list(store.list_by_priority(), "Tasks by priority")

        elif name == "search_tasks":
            query = arguments.get("query", "")
            return format_task_list(store.search(query), f"Tasks matching {query!r}")

        elif name == "save_tasks":
            path = Path(arguments.get("path") or settings.tasks_file)
            store.save(path)
            return f"💾 Saved {len(store)} tasks to {path}"

        elif name == "load_tasks":
            path = Path(arguments.get("path") or settings.tasks_file)
            store.load(path)
            return f"📂 Loaded {len(store)} tasks from {path}"

        else:
            return f"Error: Unknown tool: {name}"

    except KeyError as e:
        return f"Error: missing argument {e}"
    except Exception as e:
        logger.error(f"Error in tool {name}: {e}")
        return f"Error: {e}"


def build_server(store: TaskStore, settings: Optional[Settings] = None) -> Server:
    """Create an MCP server whose tools operate on ``store``."""
    settings = settings or get_settings()
    server = Server("task-manager")
    # The store is not safe for concurrent mutation.
    lock = threading.Lock()

    @server.list_tools()
    async def handle_list_tools() -> List[Tool]:
        """List available task management tools."""
        return task_tools(settings)

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """Handle tool calls for task management."""
        with lock:
            text = call_task_tool(store, settings, name, arguments or {})
        return [TextContent(type="text", text=text)]

    return server


async def serve(store: TaskStore, settings: Settings) -> None:
    """Run the MCP server on stdio."""
    server = build_server(store, settings)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="task-manager",
                server_version=__version__,
                capabilities=ServerCapabilities(tools={}),
            ),
        )


def main() -> None:
    settings = get_settings()
    # stdout carries the protocol
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    store = TaskStore()
    if settings.tasks_file.exists():
        try:
            store.load(settings.tasks_file)
        except TaskStoreError as e:
            logger.error(f"Starting with no tasks, could not load {settings.tasks_file}: {e}")
    logger.info(f"Using tasks file: {settings.tasks_file}")

    asyncio.run(serve(store, settings))


if __name__ == "__main__":
    main()
