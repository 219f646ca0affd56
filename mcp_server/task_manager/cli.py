"""Command-line interface for the task manager."""

import logging
from pathlib import Path
from typing import Dict, List, Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .config import get_settings
from .errors import TaskStoreError
from .task import Task
from .task_store import TaskStore

app = typer.Typer(help="Task Manager - categorized, prioritized tasks")
console = Console()
err_console = Console(stderr=True)

FILE_HELP = "Tasks file (defaults to TASK_MANAGER_FILE or tasks.json)"


def tasks_path(file: Optional[Path]) -> Path:
    return file or get_settings().tasks_file


def open_store(path: Path) -> TaskStore:
    """Load the tasks file into a new store; a missing file means no tasks yet."""
    store = TaskStore()
    if path.exists():
        try:
            store.load(path)
        except TaskStoreError as e:
            console.print(f"[red]Error loading tasks: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    return store


def persist(store: TaskStore, path: Path) -> None:
    try:
        store.save(path)
    except TaskStoreError as e:
        console.print(f"[red]Error saving tasks: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def resolve_task(store: TaskStore, ref: str) -> Task:
    """Find a task by full ID or unique ID prefix."""
    ref = ref.strip().lower()
    task = None

    try:
        task = store.get_task(UUID(ref))
    except ValueError:
        if ref:
            matches = [t for t in store.list_by_priority() if str(t.id).startswith(ref)]
            if len(matches) > 1:
                console.print(f"[red]Task ID prefix {escape(ref)} is ambiguous ({len(matches)} matches)[/red]")
                raise typer.Exit(1)
            if matches:
                task = matches[0]

    if task is None:
        console.print(f"[red]Task {escape(ref)} not found[/red]")
        raise typer.Exit(1)
    return task


def category_lookup(store: TaskStore) -> Dict[UUID, List[str]]:
    lookup: Dict[UUID, List[str]] = {}
    for name in store.categories():
        for task in store.list_by_category(name):
            names = lookup.setdefault(task.id, [])
            if name not in names:
                names.append(name)
    return lookup


def format_task_status(task: Task) -> Text:
    """Format task status with colors."""
    return Text(task.status_label.upper(), style="green" if task.completed else "yellow")


def format_task_priority(priority: int) -> Text:
    """Format task priority with colors."""
    if priority <= 3:
        style = "red bold"
    elif priority <= 6:
        style = "yellow"
    else:
        style = "dim"
    return Text(str(priority), style=style)


def render_tasks(store: TaskStore, tasks: List[Task], title: Optional[str] = None) -> None:
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    lookup = category_lookup(store)

    table = Table(show_header=True, header_style="bold magenta", title=title)
    table.add_column("ID", style="dim", width=8)
    table.add_column("Name", style="bold")
    table.add_column("Priority", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Category")

    for task in tasks:
        table.add_row(
            str(task.id)[:8],
            escape(task.name),
            format_task_priority(task.priority),
            format_task_status(task),
            escape(", ".join(lookup.get(task.id, []))),
        )

    console.print(table)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs")):
    """Configure logging before any command runs."""
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def add(
    name: str = typer.Argument(..., help="Task name"),
    description: str = typer.Option("", "--desc", "-d", help="Task description"),
    priority: int = typer.Option(1, "--priority", "-p", min=1, max=10, help="Priority, 1 sorts first"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Task category"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Add a new task."""
    settings = get_settings()
    category = category or settings.categories[0]
    if category not in settings.categories:
        console.print(
            f"[red]Unknown category {escape(category)}; choose one of: {escape(', '.join(settings.categories))}[/red]"
        )
        raise typer.Exit(1)

    path = tasks_path(file)
    store = open_store(path)
    task = store.create(category, name, description, priority)
    persist(store, path)

    console.print(f"[green]Added task: {task.id}[/green]")
    console.print(f"Name: {escape(task.name)} ({escape(category)}, priority {task.priority})")


@app.command()
def complete(
    task_ref: str = typer.Argument(..., help="Task ID or ID prefix"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Mark a task as completed."""
    path = tasks_path(file)
    store = open_store(path)
    task = resolve_task(store, task_ref)
    store.complete(task)
    persist(store, path)
    console.print(f"[green]Completed task: {escape(task.name)}[/green]")


@app.command()
def delete(
    task_ref: str = typer.Argument(..., help="Task ID or ID prefix"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Delete a task from every category."""
    path = tasks_path(file)
    store = open_store(path)
    task = resolve_task(store, task_ref)
    store.delete(task)
    persist(store, path)
    console.print(f"[green]Deleted task: {escape(task.name)}[/green]")


@app.command()
def edit(
    task_ref: str = typer.Argument(..., help="Task ID or ID prefix"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--desc", help="New description"),
    priority: Optional[int] = typer.Option(None, "--priority", min=1, max=10, help="New priority"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Edit a task. Fields not given keep their current value."""
    path = tasks_path(file)
    store = open_store(path)
    task = resolve_task(store, task_ref)

    store.edit(
        task,
        name if name is not None else task.name,
        description if description is not None else task.description,
        priority if priority is not None else task.priority,
    )
    persist(store, path)
    console.print(f"[green]Updated task {task.id}[/green]")


@app.command("list")
def list_tasks(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
    show_all: bool = typer.Option(False, "--all", "-a", help="Every category in turn"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """List tasks, by priority unless a category is given."""
    store = open_store(tasks_path(file))

    if category is not None:
        render_tasks(store, store.list_by_category(category), title=escape(category))
    elif show_all:
        render_tasks(store, store.list_all(), title="All tasks")
    else:
        render_tasks(store, store.list_by_priority(), title="By priority")


@app.command()
def search(
    query: str = typer.Argument("", help="Text to look for in task names"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Search task names, ignoring case."""
    store = open_store(tasks_path(file))
    render_tasks(store, store.search(query))


@app.command()
def categories(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Show categories and how many tasks each holds."""
    store = open_store(tasks_path(file))

    names = list(get_settings().categories)
    names.extend(name for name in store.categories() if name not in names)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Category", style="bold")
    table.add_column("Tasks", justify="right")
    for name in names:
        table.add_row(escape(name), str(len(store.list_by_category(name))))

    console.print(table)


@app.command()
def stats(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Show task statistics."""
    store = open_store(tasks_path(file))

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")
    for key, value in store.get_stats().items():
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)


@app.command()
def export(
    destination: Path = typer.Argument(..., help="File to write"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Save all tasks to another file."""
    store = open_store(tasks_path(file))
    persist(store, destination)
    console.print(f"[green]Tasks saved to {escape(str(destination))}[/green]")


@app.command("import")
def import_tasks(
    source: Path = typer.Argument(..., help="File to read"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help=FILE_HELP),
):
    """Replace all tasks with the contents of another file."""
    store = TaskStore()
    try:
        store.load(source)
    except TaskStoreError as e:
        console.print(f"[red]Error loading tasks: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    persist(store, tasks_path(file))
    console.print(f"[green]Loaded {len(store)} tasks from {escape(str(source))}[/green]")


if __name__ == "__main__":
    app()
