"""Dependency injection helpers for FastAPI."""

from functools import lru_cache

from fastapi import Request

from .config import Settings, settings
from .exceptions import InternalError
from .services.task_service import TaskService


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return settings


def get_task_service(request: Request) -> TaskService:
    """Get the task store owned by the running application."""
    task_service = getattr(request.app.state, "task_service", None)
    if task_service is None:
        raise InternalError("Task service not available")
    return task_service


def get_app_settings(request: Request) -> Settings:
    """Get the settings the running application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()
