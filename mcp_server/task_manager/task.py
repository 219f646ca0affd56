"""Task data model."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Task(BaseModel):
    """
    A single unit of work.

    Identity is the generated ``id``: two tasks with the same name,
    description and priority are still distinct. The category a task
    belongs to is kept by the store, not on the task itself.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, frozen=True, description="Unique task identifier")
    name: str = Field(..., description="Short task name")
    description: str = Field(default="", description="Free-form task description")
    priority: int = Field(default=1, description="Lower values sort first (intended range 1-10)")
    completed: bool = Field(default=False, description="Whether the task is done")

    created_at: datetime = Field(default_factory=_utcnow, description="Task creation timestamp")
    updated_at: datetime = Field(default_factory=_utcnow, description="Last update timestamp")
    completed_at: Optional[datetime] = Field(None, description="Task completion timestamp")

    def mark_completed(self) -> None:
        """Mark task as completed. Calling it again changes nothing."""
        if not self.completed:
            now = _utcnow()
            self.completed = True
            self.completed_at = now
            self.updated_at = now

    def edit(self, name: str, description: str, priority: int) -> None:
        """
        Replace name, description and priority in place.

        All three values are validated first, so a bad value leaves the
        task untouched.
        """
        checked = Task.model_validate(
            {**self.model_dump(), "name": name, "description": description, "priority": priority}
        )
        self.name = checked.name
        self.description = checked.description
        self.priority = checked.priority
        self.updated_at = _utcnow()

    @property
    def status_label(self) -> str:
        return "Completed" if self.completed else "Pending"

    def __str__(self) -> str:
        return f"{self.name} - {self.status_label}"

    def __repr__(self) -> str:
        return f"Task(id={self.id}, name={self.name!r}, priority={self.priority}, completed={self.completed})"
