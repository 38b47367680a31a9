"""Category listing route."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_task_service
from ..services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[str])
def list_categories(
    task_service: TaskService = Depends(get_task_service)
) -> List[str]:
    """Distinct categories used by any task."""
    try:
        return task_service.list_categories()

    except Exception as e:
        logger.error(f"Error listing categories: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch categories"
        )
