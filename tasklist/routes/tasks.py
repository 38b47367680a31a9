"""Task list CRUD, query and bulk routes."""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..config import Settings
from ..deps import get_app_settings, get_task_service
from ..exceptions import NotFoundError, ValidationError
from ..models.task import Task, TaskQuery
from ..schemas import (
    BulkDeleteRequest,
    BulkToggleRequest,
    Pagination,
    TaskCreate,
    TaskListResponse,
    TaskUpdate,
)
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Create a new task.

    Raises:
        HTTPException: 400 if the task data is invalid
    """
    try:
        logger.info(f"Creating new task: {task_data.title}")

        return task_service.create_task(
            title=task_data.title,
            description=task_data.description,
            categories=task_data.categories,
            due_date=task_data.due_date,
        )

    except ValidationError as e:
        logger.warning(f"Validation error creating task: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error creating task: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create item"
        )


@router.get("", response_model=TaskListResponse)
def list_tasks(
    search: Optional[str] = Query(None, description="Text to find in title or description"),
    completed: Optional[bool] = Query(None),
    category: Optional[str] = Query(None),
    due_before: Optional[date] = Query(None, alias="dueBefore"),
    due_after: Optional[date] = Query(None, alias="dueAfter"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    task_service: TaskService = Depends(get_task_service),
    settings: Settings = Depends(get_app_settings),
) -> TaskListResponse:
    """List tasks with search, filters, sorting and pagination."""
    try:
        if limit is None:
            limit = settings.default_page_size

        result = task_service.list_tasks(
            TaskQuery(
                search=search,
                completed=completed,
                category=category,
                due_before=due_before,
                due_after=due_after,
                page=page,
                limit=limit,
                sort_by=sort_by,
                sort_order=sort_order,
            )
        )

        return TaskListResponse(
            items=result.items,
            pagination=Pagination(
                total=result.total,
                pages=result.pages,
                current_page=result.current_page,
                limit=result.limit,
            ),
        )

    except ValidationError as e:
        logger.warning(f"Invalid task query: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Error listing tasks: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch items"
        )


@router.post("/bulk-delete", status_code=status.HTTP_204_NO_CONTENT)
def bulk_delete_tasks(
    payload: BulkDeleteRequest,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete several tasks; unknown ids are ignored."""
    try:
        task_service.bulk_delete(payload.ids)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except Exception as e:
        logger.error(f"Error bulk deleting tasks: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete items"
        )


@router.post("/bulk-toggle", response_model=List[Task])
def bulk_toggle_tasks(
    payload: BulkToggleRequest,
    task_service: TaskService = Depends(get_task_service)
) -> List[Task]:
    """Set the completed flag on several tasks; unknown ids are ignored."""
    try:
        return task_service.bulk_toggle(payload.ids, payload.completed)

    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Error bulk toggling tasks: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update items"
        )


@router.get("/{task_id}", response_model=Task)
def get_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Get a specific task by ID.

    Raises:
        HTTPException: 404 if the task is not found
    """
    try:
        return task_service.get_task(task_id)

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error getting task {task_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch item"
        )


@router.put("/{task_id}", response_model=Task)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Update a task. Fields missing from the body keep their value.

    Raises:
        HTTPException: 404 if the task is not found, 400 if the data is invalid
    """
    try:
        logger.info(f"Updating task: {task_id}")

        return task_service.update_task(task_id, task_data.model_dump(exclude_unset=True))

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except ValidationError as e:
        logger.warning(f"Validation error updating task {task_id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Unexpected error updating task {task_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update item"
        )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete a task.

    Raises:
        HTTPException: 404 if the task is not found
    """
    try:
        logger.info(f"Deleting task: {task_id}")

        task_service.delete_task(task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete item"
        )


@router.patch("/{task_id}/toggle", response_model=Task)
def toggle_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
) -> Task:
    """Flip a task's completion status.

    Raises:
        HTTPException: 404 if the task is not found
    """
    try:
        return task_service.toggle_task(task_id)

    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Error toggling task {task_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to toggle item status"
        )
