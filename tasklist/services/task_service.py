"""Task service for CRUD operations and task queries."""

import itertools
import logging
from datetime import date, datetime
from threading import Lock
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..exceptions import NotFoundError, ValidationError
from ..models.task import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    TaskPage,
    TaskQuery,
    utcnow,
)

logger = logging.getLogger(__name__)

# Accepted sort names mapped to Task attributes
SORT_FIELDS = {
    "id": "id",
    "title": "title",
    "description": "description",
    "completed": "completed",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
    "dueDate": "due_date",
    "due_date": "due_date",
}

SORT_ORDERS = ("asc", "desc")

UPDATABLE_FIELDS = ("title", "description", "categories", "due_date", "completed")


def clean_title(title: Any) -> str:
    """Validate and trim a task title."""
    if title is None or not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def clean_description(description: Any) -> str:
    """Validate and trim a task description; None means empty."""
    if description is None:
        return ""
    if not isinstance(description, str):
        raise ValidationError("Description must be a string")
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return description


def clean_categories(categories: Any) -> List[str]:
    """Validate a category sequence, trimming entries and dropping blanks."""
    if categories is None:
        return []
    if not isinstance(categories, (list, tuple)):
        raise ValidationError("Categories must be a list of strings")
    cleaned = []
    for category in categories:
        if not isinstance(category, str):
            raise ValidationError("Categories must be a list of strings")
        if category.strip():
            cleaned.append(category.strip())
    return cleaned


def parse_due_date(value: Any) -> Optional[date]:
    """Parse a due date from a date, datetime or ISO-8601 string."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError("Invalid due date")

    value = value.strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise ValidationError(f"Invalid due date: {value}")


class TaskService:
    """Service for task CRUD operations with in-memory storage."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        """Initialize the task service.

        Args:
            clock: Source of timestamps for created_at/updated_at
        """
        self._tasks: Dict[int, Task] = {}
        self._ids = itertools.count(1)
        self._clock = clock
        self._lock = Lock()  # Thread-safe operations
        logger.info("Task service initialized with in-memory storage")

    def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        categories: Optional[Iterable[str]] = None,
        due_date: Any = None,
    ) -> Task:
        """Create a new task.

        Args:
            title: Task title
            description: Optional task description
            categories: Optional list of category names
            due_date: Optional due date (date or ISO-8601 string)

        Returns:
            Created task

        Raises:
            ValidationError: If any field is invalid
        """
        fields = {
            "title": clean_title(title),
            "description": clean_description(description),
            "categories": clean_categories(categories),
            "due_date": parse_due_date(due_date),
        }

        with self._lock:
            task = Task(id=next(self._ids), created_at=self._clock(), **fields)
            self._tasks[task.id] = task

            logger.info(f"Created task {task.id}: {task.title}")
            return task.model_copy(deep=True)

    def get_task(self, task_id: int) -> Task:
        """Get a task by ID.

        Raises:
            NotFoundError: If the task does not exist
        """
        with self._lock:
            task = self._require(task_id)
            logger.debug(f"Retrieved task {task_id}: {task.title}")
            return task.model_copy(deep=True)

    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> Task:
        """Update a task with the given fields.

        Only keys present in ``fields`` change. ``None`` clears the
        description, categories and due date.

        Args:
            task_id: Task ID
            fields: Mapping of field name to new value

        Returns:
            Updated task

        Raises:
            NotFoundError: If the task does not exist
            ValidationError: If any field is invalid
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        changes: Dict[str, Any] = {}
        if "title" in fields:
            changes["title"] = clean_title(fields["title"])
        if "description" in fields:
            changes["description"] = clean_description(fields["description"])
        if "categories" in fields:
            changes["categories"] = clean_categories(fields["categories"])
        if "due_date" in fields:
            changes["due_date"] = parse_due_date(fields["due_date"])
        if "completed" in fields:
            if not isinstance(fields["completed"], bool):
                raise ValidationError("Completed must be a boolean")
            changes["completed"] = fields["completed"]

        with self._lock:
            task = self._require(task_id)
            for name, value in changes.items():
                setattr(task, name, value)
            task.touch(self._clock())

            logger.info(f"Updated task {task_id}: {task.title}")
            return task.model_copy(deep=True)

    def delete_task(self, task_id: int) -> None:
        """Delete a task.

        Raises:
            NotFoundError: If the task does not exist
        """
        with self._lock:
            task = self._tasks.pop(task_id, None)
            if task is None:
                logger.warning(f"Task {task_id} not found for deletion")
                raise NotFoundError(task_id)
            logger.info(f"Deleted task {task_id}: {task.title}")

    def toggle_task(self, task_id: int) -> Task:
        """Flip a task's completed flag.

        Raises:
            NotFoundError: If the task does not exist
        """
        with self._lock:
            task = self._require(task_id)
            task.completed = not task.completed
            task.touch(self._clock())

            logger.info(f"Toggled task {task_id}: completed={task.completed}")
            return task.model_copy(deep=True)

    def bulk_delete(self, ids: Iterable[int]) -> int:
        """Delete every task whose id is in ``ids``; unknown ids are ignored.

        Returns:
            Number of tasks removed
        """
        with self._lock:
            removed = 0
            for task_id in set(ids):
                if self._tasks.pop(task_id, None) is not None:
                    removed += 1

            logger.info(f"Bulk deleted {removed} tasks")
            return removed

    def bulk_toggle(self, ids: Iterable[int], completed: bool) -> List[Task]:
        """Set ``completed`` on every task whose id is in ``ids``.

        Returns:
            Updated tasks in the order their ids were given
        """
        if not isinstance(completed, bool):
            raise ValidationError("Completed must be a boolean")

        with self._lock:
            now = self._clock()
            updated = []
            for task_id in dict.fromkeys(ids):
                task = self._tasks.get(task_id)
                if task is None:
                    continue
                task.completed = completed
                task.touch(now)
                updated.append(task.model_copy(deep=True))

            logger.info(f"Bulk set completed={completed} on {len(updated)} tasks")
            return updated

    def list_tasks(self, query: Optional[TaskQuery] = None) -> TaskPage:
        """List tasks matching the query, sorted and paginated.

        Args:
            query: Search, filter, sort and pagination criteria

        Returns:
            The requested page and pagination metadata

        Raises:
            ValidationError: If the sort or pagination criteria are invalid
        """
        query = query or TaskQuery()

        attribute = SORT_FIELDS.get(query.sort_by)
        if attribute is None:
            raise ValidationError(f"Cannot sort by {query.sort_by}")
        if query.sort_order not in SORT_ORDERS:
            raise ValidationError("Sort order must be 'asc' or 'desc'")
        if query.page < 1:
            raise ValidationError("Page must be at least 1")
        if query.limit < 1:
            raise ValidationError("Limit must be at least 1")

        with self._lock:
            tasks = list(self._tasks.values())

            # Apply search filter
            if query.search:
                needle = query.search.lower()
                tasks = [
                    task for task in tasks
                    if needle in task.title.lower() or needle in task.description.lower()
                ]

            # Apply completed filter
            if query.completed is not None:
                tasks = [task for task in tasks if task.completed == query.completed]

            # Apply category filter
            if query.category:
                tasks = [task for task in tasks if query.category in task.categories]

            # Apply due date range
            if query.due_before is not None or query.due_after is not None:
                tasks = [
                    task for task in tasks
                    if task.due_date is not None
                    and (query.due_after is None or task.due_date >= query.due_after)
                    and (query.due_before is None or task.due_date <= query.due_before)
                ]

            # Stable sort; tasks without a value go last either way
            present = [task for task in tasks if getattr(task, attribute) is not None]
            missing = [task for task in tasks if getattr(task, attribute) is None]
            present.sort(
                key=lambda t: getattr(t, attribute),
                reverse=query.sort_order == "desc",
            )
            tasks = present + missing

            # Apply pagination
            start = (query.page - 1) * query.limit
            page_items = [task.model_copy(deep=True) for task in tasks[start:start + query.limit]]

            logger.debug(
                f"Listed {len(page_items)} of {len(tasks)} tasks "
                f"(page={query.page}, limit={query.limit}, sort={query.sort_by} {query.sort_order})"
            )
            return TaskPage(
                items=page_items,
                total=len(tasks),
                current_page=query.page,
                limit=query.limit,
            )

    def list_categories(self) -> List[str]:
        """Distinct category names across all tasks, sorted."""
        with self._lock:
            return sorted({c for task in self._tasks.values() for c in task.categories})

    def count(self) -> int:
        """Number of stored tasks."""
        with self._lock:
            return len(self._tasks)

    def _require(self, task_id: int) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            logger.warning(f"Task {task_id} not found")
            raise NotFoundError(task_id)
        return task
