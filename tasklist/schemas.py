"""API request/response schemas for the task list."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt
from pydantic.alias_generators import to_camel

from .models.task import Task


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Task-related schemas
class TaskCreate(CamelModel):
    """Schema for creating a new task.

    Only the shape is checked here; length limits are enforced by the service.
    """
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    categories: Optional[List[str]] = Field(None, alias="category", description="Task categories")
    due_date: Optional[str] = Field(None, description="Due date, YYYY-MM-DD")


class TaskUpdate(TaskCreate):
    """Schema for updating an existing task; unset fields are left unchanged."""
    completed: Optional[StrictBool] = Field(None, description="Completion status")


class Pagination(CamelModel):
    """Pagination metadata for list responses."""
    total: int = Field(..., description="Number of tasks matching the query")
    pages: int = Field(..., description="Number of pages")
    current_page: int = Field(..., description="Page returned")
    limit: int = Field(..., description="Page size")


class TaskListResponse(CamelModel):
    """Schema for task list API responses."""
    items: List[Task] = Field(..., description="Tasks on this page")
    pagination: Pagination


class BulkDeleteRequest(CamelModel):
    """Schema for bulk task deletion."""
    ids: List[StrictInt] = Field(..., description="Ids of tasks to delete")


class BulkToggleRequest(CamelModel):
    """Schema for setting the completed flag on many tasks."""
    ids: List[StrictInt] = Field(..., description="Ids of tasks to update")
    completed: StrictBool = Field(..., description="New completion status")


# Health check schema
class HealthResponse(BaseModel):
    """Schema for health check responses."""
    status: str = Field(default="healthy", description="Service health status")
    version: str = Field(default="1.0.0", description="Application version")
    tasks: int = Field(default=0, description="Number of stored tasks")
