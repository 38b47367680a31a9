"""Shared test fixtures and configuration for the test suite."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add the parent directory to the path for imports
import sys

sys.path.append(str(Path(__file__).parent.parent))

from tasklist.config import Settings
from tasklist.main import create_app
from tasklist.services.task_service import TaskService


class FakeClock:
    """Clock that moves forward one second every time it is read."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Create test settings with a temporary log directory."""
    return Settings(
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        environment="test",
        default_page_size=10,
    )


@pytest.fixture
def clock() -> FakeClock:
    """A deterministic clock for timestamp assertions."""
    return FakeClock()


@pytest.fixture
def task_service(clock) -> TaskService:
    """Create a task service instance for testing."""
    return TaskService(clock=clock)


@pytest.fixture
def client(test_settings) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


# Test data fixtures
@pytest.fixture
def sample_task_data():
    """Sample task data for testing."""
    return {
        "title": "Test Task",
        "description": "This is a test task description",
        "category": ["work", "urgent"],
        "dueDate": "2024-03-15",
    }


@pytest.fixture
def sample_tasks_bulk():
    """Sample bulk tasks data for testing."""
    return [
        {"title": "Task 1", "description": "Description 1"},
        {"title": "Task 2", "description": "Description 2"},
        {"title": "Task 3", "description": "Description 3"},
    ]
