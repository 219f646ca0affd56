"""Task store: category grouping, priority ordering and file persistence."""

import bisect
import contextlib
import logging
import os
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from .errors import StoreCorruptError, StoreIOError
from .task import Task

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1

# (priority, insertion sequence, task id)
IndexKey = Tuple[int, int, UUID]


class StoreSnapshot(BaseModel):
    """On-disk shape of a task store."""

    format_version: Literal[1] = FORMAT_VERSION
    tasks: List[Task] = Field(default_factory=list, description="Distinct tasks in insertion order")
    categories: Dict[str, List[UUID]] = Field(
        default_factory=dict, description="Category name to ordered task ids"
    )


class TaskStore:
    """
    Owns every task, grouped by category and indexed by priority.

    Tasks are shared records: the category lists and the priority index
    point at the same ``Task`` objects, so completing or editing a task is
    visible from every view. Priority changes must go through ``edit`` so
    the index can reposition the task.

    Equal priorities are kept in insertion order.
    """

    def __init__(self) -> None:
        self._categories: Dict[str, List[Task]] = {}
        self._tasks: Dict[UUID, Task] = {}
        self._priority_index: List[IndexKey] = []
        self._index_keys: Dict[UUID, IndexKey] = {}
        self._next_sequence = 0

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task: object) -> bool:
        return isinstance(task, Task) and task.id in self._tasks

    def _index(self, task: Task, sequence: int) -> None:
        key = (task.priority, sequence, task.id)
        bisect.insort(self._priority_index, key)
        self._index_keys[task.id] = key

    def _unindex(self, task_id: UUID) -> IndexKey:
        key = self._index_keys.pop(task_id)
        position = bisect.bisect_left(self._priority_index, key)
        del self._priority_index[position]
        return key

    def add(self, category: str, task: Task) -> None:
        """Append a task to a category and to the priority index."""
        task = self._tasks.get(task.id, task)
        self._categories.setdefault(category, []).append(task)

        if task.id not in self._tasks:
            self._tasks[task.id] = task
            self._index(task, self._next_sequence)
            self._next_sequence += 1

        logger.debug("Added task %s to category %r", task.id, category)

    def create(self, category: str, name: str, description: str = "", priority: int = 1) -> Task:
        """Build a new task and add it to a category."""
        task = Task(name=name, description=description, priority=priority)
        self.add(category, task)
        return task

    def get_task(self, task_id: UUID) -> Optional[Task]:
        """Get a task by ID."""
        return self._tasks.get(task_id)

    def complete(self, task: Task) -> None:
        """Mark a task completed."""
        self._tasks.get(task.id, task).mark_completed()

    def delete(self, task: Task) -> bool:
        """
        Remove a task from the priority index and from every category.

        Returns False when the task was not in the store.
        """
        removed = False

        if task.id in self._tasks:
            self._unindex(task.id)
            del self._tasks[task.id]
            removed = True

        for name, tasks in self._categories.items():
            kept = [t for t in tasks if t.id != task.id]
            if len(kept) != len(tasks):
                self._categories[name] = kept
                removed = True

        if removed:
            logger.debug("Deleted task %s", task.id)
        return removed

    def edit(self, task: Task, name: str, description: str, priority: int) -> None:
        """Update a task in place, moving it in the priority index if needed."""
        target = self._tasks.get(task.id, task)
        old_priority = target.priority
        target.edit(name, description, priority)

        if target.priority != old_priority and target.id in self._index_keys:
            _, sequence, _ = self._unindex(target.id)
            self._index(target, sequence)
            logger.debug("Moved task %s from priority %d to %d", target.id, old_priority, target.priority)

    def list_by_category(self, category: str) -> List[Task]:
        return list(self._categories.get(category, []))

    def list_by_priority(self) -> List[Task]:
        return [self._tasks[task_id] for _, _, task_id in self._priority_index]

    def search(self, query: str) -> List[Task]:
        """Tasks whose name contains ``query``, ignoring case, in priority order."""
        query_lower = query.lower()
        return [task for task in self.list_by_priority() if query_lower in task.name.lower()]

    def list_all(self) -> List[Task]:
        """Every category's tasks, one after another."""
        all_tasks: List[Task] = []
        for tasks in self._categories.values():
            all_tasks.extend(tasks)
        return all_tasks

    def categories(self) -> List[str]:
        return list(self._categories)

    def get_stats(self) -> Dict[str, int]:
        """Get statistics about tasks in the store."""
        completed = sum(1 for task in self._tasks.values() if task.completed)
        return {
            "total": len(self._tasks),
            "completed": completed,
            "pending": len(self._tasks) - completed,
            "categories": len(self._categories),
        }

    def clear(self) -> None:
        self._replace_state(TaskStore())

    def snapshot(self) -> StoreSnapshot:
        """Capture the store as a serializable document."""
        keys_by_sequence = sorted(self._index_keys.values(), key=lambda key: key[1])
        return StoreSnapshot(
            tasks=[self._tasks[task_id] for _, _, task_id in keys_by_sequence],
            categories={name: [task.id for task in tasks] for name, tasks in self._categories.items()},
        )

    @classmethod
    def from_snapshot(cls, snapshot: StoreSnapshot, path: Union[str, Path, None] = None) -> "TaskStore":
        """Rebuild a store, checking that categories and tasks agree."""
        store = cls()

        by_id: Dict[UUID, Task] = {}
        for task in snapshot.tasks:
            if task.id in by_id:
                raise StoreCorruptError(f"Duplicate task id {task.id}", path)
            by_id[task.id] = task

        referenced = set()
        for name, task_ids in snapshot.categories.items():
            bucket = store._categories.setdefault(name, [])
            for task_id in task_ids:
                task = by_id.get(task_id)
                if task is None:
                    raise StoreCorruptError(f"Category {name!r} refers to unknown task {task_id}", path)
                bucket.append(task)
                referenced.add(task_id)

        orphans = by_id.keys() - referenced
        if orphans:
            raise StoreCorruptError(f"{len(orphans)} task(s) belong to no category", path)

        for task in snapshot.tasks:
            store._tasks[task.id] = task
            store._index(task, store._next_sequence)
            store._next_sequence += 1

        return store

    def _replace_state(self, other: "TaskStore") -> None:
        self._categories = other._categories
        self._tasks = other._tasks
        self._priority_index = other._priority_index
        self._index_keys = other._index_keys
        self._next_sequence = other._next_sequence

    def save(self, path: Union[str, Path]) -> None:
        """Write the whole store to ``path`` through a temp file and rename."""
        path = Path(path)
        tmp_path = path.with_name(path.name + ".tmp")

        try:
            data = self.snapshot().model_dump_json(indent=2)
        except PydanticSerializationError as e:
            raise StoreIOError(f"Cannot serialize task store for {path}: {e}", path) from e

        try:
            tmp_path.write_text(data, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StoreIOError(f"Cannot write task store {path}: {e}", path) from e

        logger.info("Saved %d tasks in %d categories to %s", len(self._tasks), len(self._categories), path)

    def load(self, path: Union[str, Path]) -> None:
        """
        Replace the store with the contents of ``path``.

        Nothing changes unless the whole file reads and validates.

        Raises:
            StoreIOError: the file is missing or unreadable
            StoreCorruptError: the file is not a valid task store document
        """
        path = Path(path)

        try:
            raw = path.read_bytes()
        except OSError as e:
            raise StoreIOError(f"Cannot read task store {path}: {e}", path) from e

        try:
            snapshot = StoreSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise StoreCorruptError(f"Task store {path} is not valid ({e.error_count()} errors)", path) from e

        self._replace_state(self.from_snapshot(snapshot, path))
        logger.info("Loaded %d tasks in %d categories from %s", len(self._tasks), len(self._categories), path)
