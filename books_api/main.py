"""
FastAPI main application for the Book Catalogue API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from books_api.config import APIConfig, config
from books_api.errors import BookAPIError
from books_api.models import ErrorResponse, HealthResponse
from books_api.routes import router as books_router
from books_api.service import BookService
from storage import create_store
from storage.base import BookStore

# Setup logging
logger = structlog.get_logger(__name__)


def create_app(settings: Optional[APIConfig] = None, store: Optional[BookStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; defaults to the environment-driven ``config``
        store: Record store; defaults to the backend named in ``settings``

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = config
    if store is None:
        store = create_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting Book Catalogue API", store_backend=type(store).__name__)

        try:
            await store.connect()
            logger.info("Database connection established")
        except Exception as e:
            logger.error("Failed to connect to database", error=str(e))
            raise

        yield

        logger.info("Shutting down Book Catalogue API")
        await store.disconnect()

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.book_service = BookService(
        store, empty_collection_not_found=settings.empty_collection_not_found
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.exception_handler(BookAPIError)
    async def book_error_handler(request: Request, exc: BookAPIError):
        """Render book errors with the status their kind maps to."""
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Book operation failed", error=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(message=exc.message, error=exc.error).model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400 instead of 422."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                message="Invalid request body",
                error="; ".join(
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ),
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                message="Internal server error",
                error=str(exc) if settings.debug else None,
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        health_info = await store.health_check()
        db_status = health_info.get("status", "unknown")
        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=settings.api_version,
            database_status=db_status,
        )

    app.include_router(books_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "books_api.main:app",
        host=config.host,
        port=config.port,
        reload=True,
        log_level="info"
    )
