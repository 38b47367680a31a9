"""FastAPI main application with app factory and route configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .deps import get_settings
from .exceptions import NotFoundError, TaskListError, ValidationError
from .routes import categories, tasks
from .schemas import HealthResponse
from .services.task_service import TaskService
from .utils.logging import configure_request_logging, setup_logging

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    setup_logging(app.state.settings)
    logger.info("Starting up task list application")
    logger.info(f"Environment: {app.state.settings.environment}")

    yield

    logger.info("Shutting down task list application")


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn the first request validation error into a one-line message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    if error.get("type") == "json_invalid":
        return "Invalid JSON body"
    location = ".".join(
        str(part) for part in error.get("loc", ())
        if part not in ("body", "query", "path")
    )
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; the cached environment settings by default

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Task List",
        description="An in-memory task list with search, filtering, sorting and bulk operations",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.task_service = TaskService()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(configure_request_logging())

    # Custom exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with proper logging."""
        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail} for {request.method} {request.url}"
        )

        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """Report malformed requests as 400 with a short message."""
        logger.warning(
            f"Validation error for {request.method} {request.url}: {exc.errors()}"
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": describe_validation_error(exc)},
        )

    @app.exception_handler(TaskListError)
    async def task_list_exception_handler(request: Request, exc: TaskListError):
        """Map store errors that escaped a route to their status codes."""
        if isinstance(exc, ValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        elif isinstance(exc, NotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        if status_code >= 500:
            logger.error(f"{exc.message} for {request.method} {request.url}")
        else:
            logger.warning(f"{exc.message} for {request.method} {request.url}")

        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            f"Unexpected error for {request.method} {request.url}: {str(exc)}",
            exc_info=True,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    # Health check endpoint
    @app.get("/healthz", response_model=HealthResponse, tags=["health"])
    def health_check() -> HealthResponse:
        """Health check endpoint for monitoring and load balancers."""
        return HealthResponse(version=VERSION, tasks=app.state.task_service.count())

    app.include_router(tasks.router, prefix="/api/items", tags=["items"])

    app.include_router(categories.router, prefix="/api/categories", tags=["categories"])

    if settings.static_dir is not None and settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        logger.info(f"Serving static files from {settings.static_dir}")
    else:
        @app.get("/", tags=["root"])
        def root():
            """Root endpoint with API information."""
            return {
                "name": "Task List API",
                "version": VERSION,
                "docs_url": "/docs",
                "health_check": "/healthz",
                "endpoints": {
                    "items": "/api/items",
                    "categories": "/api/categories",
                },
            }

    logger.info("FastAPI application created and configured")

    return app


def run() -> None:
    """Serve the module-level application with uvicorn."""
    settings = app.state.settings
    uvicorn.run(app, host=settings.app_host, port=settings.app_port)


# Create the app instance
app = create_app()


if __name__ == "__main__":
    run()
