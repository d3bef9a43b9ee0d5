"""
AudioStudio - AI Audio Studio Backend
FastAPI application serving projects, tracks, clips, effects and AI jobs
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.routes import clips, effects, jobs, mood_tags, projects, tracks
from .core.config import AudioStudioSettings, get_settings
from .core.errors import ConflictError, InvalidJobTransitionError, NotFoundError, RepositoryError
from .core.logging import setup_logging
from .database.schemas import HealthResponse
from .services.ai_providers import build_description_service
from .services.job_dispatcher import JobDispatcher
from .storage.base import StorageInterface
from .storage.factory import create_storage

logger = logging.getLogger("audiostudio")


def _validation_message(errors) -> str:
    """Readable one-line summary of pydantic errors"""
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: Optional[AudioStudioSettings] = None,
    storage: Optional[StorageInterface] = None
) -> FastAPI:
    """
    Build the application.

    The store is decided once before requests are served: an injected store is
    used as-is, otherwise the lifespan creates one (database with in-memory
    fallback).
    """
    settings = settings or get_settings()
    setup_logging(settings)

    def attach(app: FastAPI, store: StorageInterface) -> None:
        app.state.storage = store
        app.state.dispatcher = JobDispatcher(
            store,
            settings,
            description_service=build_description_service(settings)
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup and shutdown events"""
        logger.info("Starting AudioStudio backend...")
        owns_storage = storage is None
        if owns_storage:
            attach(app, await create_storage(settings))
        logger.info(f"AudioStudio started with {app.state.storage.backend} storage")

        yield

        logger.info("Shutting down AudioStudio backend...")
        try:
            await app.state.dispatcher.close()
            if owns_storage:
                await app.state.storage.close()
            logger.info("AudioStudio shutdown complete")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")

    app = FastAPI(
        title="AudioStudio API",
        description="AI audio studio: timeline editing with stem separation, voice cloning and music generation jobs",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings
    if storage is not None:
        attach(app, storage)

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Exception handlers
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(InvalidJobTransitionError)
    async def transition_handler(request: Request, exc: InvalidJobTransitionError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc.errors())})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(request: Request, exc: RepositoryError):
        logger.error(f"Storage error: {exc}")
        return JSONResponse(status_code=500, content={"message": "Storage error"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled exceptions"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        return HealthResponse(
            version=settings.APP_VERSION,
            storage_backend=request.app.state.storage.backend,
            pending_jobs=request.app.state.dispatcher.pending_count,
        )

    # API Routes
    for module in (projects, tracks, clips, effects, jobs, mood_tags):
        app.include_router(module.router, prefix="/api")

    # Static file serving for uploaded audio
    if settings.SERVE_UPLOADS:
        app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_PATH), name="uploads")

    return app


if __name__ == "__main__":
    # Development server
    uvicorn.run(
        "audiostudio.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=8000,
        reload=True,
        log_level="info"
    )
