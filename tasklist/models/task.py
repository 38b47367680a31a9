"""Domain models for the task list."""

import math
from datetime import date, datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Task(BaseModel):
    """Task domain model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="Unique task identifier")
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="Task title")
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH, description="Task description")
    categories: List[str] = Field(default_factory=list, alias="category", description="Task categories")
    due_date: Optional[date] = Field(default=None, description="Date the task is due")
    completed: bool = Field(default=False, description="Whether the task is done")
    created_at: datetime = Field(default_factory=utcnow, description="Task creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Task last update timestamp")

    def touch(self, now: datetime) -> None:
        """Record a mutation."""
        self.updated_at = now


class TaskQuery(BaseModel):
    """Search, filter, sort and pagination criteria for listing tasks."""

    search: Optional[str] = None
    completed: Optional[bool] = None
    category: Optional[str] = None
    due_before: Optional[date] = None
    due_after: Optional[date] = None
    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    sort_order: str = "desc"


class TaskPage(BaseModel):
    """One page of a task listing plus pagination metadata."""

    items: List[Task]
    total: int
    current_page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)
