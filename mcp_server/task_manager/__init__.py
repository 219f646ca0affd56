"""Task Manager - categorized, prioritized tasks with file persistence."""

__version__ = "0.1.0"

from .errors import StoreCorruptError, StoreIOError, TaskStoreError
from .task import Task
from .task_store import StoreSnapshot, TaskStore

__all__ = [
    "Task",
    "TaskStore",
    "StoreSnapshot",
    "TaskStoreError",
    "StoreIOError",
    "StoreCorruptError",
]
