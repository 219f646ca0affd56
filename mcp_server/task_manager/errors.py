"""Failures raised by task store persistence."""

from pathlib import Path
from typing import Union


class TaskStoreError(Exception):
    """Base class for task store failures."""

    def __init__(self, message: str, path: Union[str, Path, None] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class StoreIOError(TaskStoreError):
    """The store file is missing, unreadable or cannot be written."""


class StoreCorruptError(TaskStoreError):
    """The store file does not contain a valid task store document."""
