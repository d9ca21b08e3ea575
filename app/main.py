"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.
It sets up all routes, middleware, and exception handlers.

Design Decisions:
- Use lifespan events for startup/shutdown
- The assignment service is attached to app.state so tests can inject one
- Service errors map to status codes by category, never by message text
- Expose health check endpoints
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.api import router as api_router
from app.config import get_settings
from app.errors import ErrorCategory, ServiceError
from app.logging_config import get_logger, setup_logging
from app.services.assignment import ReviewAssignmentService, get_assignment_service

# Initialize logging first
setup_logging()

logger = get_logger(__name__)

STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.STORAGE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events for the application.
    """
    settings = get_settings()
    logger.info(
        "Starting reviewer assignment service",
        host=settings.host,
        port=settings.port,
        reviewer_count=app.state.assignment_service.reviewer_count,
        seeded=settings.reviewer_seed is not None
    )

    yield

    logger.info("Shutting down reviewer assignment service")


def create_app(service: Optional[ReviewAssignmentService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Assignment service to serve; the process-wide singleton
            if omitted

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="PR Reviewer Assignment",
        description="Assigns and reassigns pull request reviewers within teams",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.assignment_service = service or get_assignment_service()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.exception_handler(ServiceError)
    async def service_error_handler(
        request: Request,
        exc: ServiceError
    ) -> JSONResponse:
        """Map service errors to their HTTP status."""
        status_code = STATUS_BY_CATEGORY[exc.category]
        log = logger.error if status_code >= 500 else logger.info
        log(
            "Request failed",
            path=request.url.path,
            method=request.method,
            code=exc.kind.value,
            status_code=status_code,
            operation=exc.operation
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.to_dict()}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "PR Reviewer Assignment",
            "version": __version__,
            "status": "running",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Returns basic health status for load balancers and monitors.
        """
        return {
            "status": "healthy",
            "service": get_settings().app_name,
            "version": __version__
        }

    return app


# Create the application instance
app = create_app()
