"""
AudioStudio Logging Configuration
Structured logging setup with file rotation and job lifecycle monitoring
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from .config import AudioStudioSettings, get_settings


def setup_logging(settings: Optional[AudioStudioSettings] = None) -> logging.Logger:
    """Set up structured logging for AudioStudio"""
    settings = settings or get_settings()

    # Create logs directory
    log_dir = Path(settings.LOG_FILE_PATH).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers.clear()

    # Console handler with colored output for development
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)

    if settings.is_development:
        console_formatter = logging.Formatter(
            '\033[92m%(asctime)s\033[0m - '
            '\033[94m%(name)s\033[0m - '
            '%(levelname)s - '
            '%(message)s',
            datefmt='%H:%M:%S'
        )
    else:
        # JSON formatter for production
        console_formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # File handler with rotation
    file_handler = logging.handlers.RotatingFileHandler(
        settings.LOG_FILE_PATH,
        maxBytes=settings.LOG_MAX_SIZE,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(pathname)s %(lineno)d %(funcName)s %(message)s'
    ))
    root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if not settings.is_development
            else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Adjust third-party library log levels
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger("audiostudio.jobs").setLevel(logging.DEBUG)
    logging.getLogger("audiostudio.storage").setLevel(logging.INFO)

    logger = logging.getLogger("audiostudio")
    logger.info(f"Logging configured - Level: {settings.LOG_LEVEL}")

    return logger


class JobLogger:
    """Specialized logger for asynchronous job processing"""

    def __init__(self):
        self.logger = structlog.get_logger("audiostudio.jobs")

    def log_job_dispatched(self, job_kind: str, job_id: int, project_id: int) -> None:
        """Log a job handed to its processor"""
        self.logger.info(
            "Job dispatched",
            job_kind=job_kind,
            job_id=job_id,
            project_id=project_id
        )

    def log_job_started(self, job_kind: str, job_id: int, **kwargs: Any) -> None:
        """Log start of job processing"""
        self.logger.info(
            "Job processing started",
            job_kind=job_kind,
            job_id=job_id,
            **kwargs
        )

    def log_job_completed(
        self,
        job_kind: str,
        job_id: int,
        duration_ms: float,
        **kwargs: Any
    ) -> None:
        """Log completion of job processing"""
        self.logger.info(
            "Job processing completed",
            job_kind=job_kind,
            job_id=job_id,
            duration_ms=duration_ms,
            **kwargs
        )

    def log_job_failed(
        self,
        job_kind: str,
        job_id: int,
        error: str,
        duration_ms: float = None
    ) -> None:
        """Log a job that ended in the failed state"""
        self.logger.error(
            "Job processing failed",
            job_kind=job_kind,
            job_id=job_id,
            error=error,
            duration_ms=duration_ms
        )

    def log_dispatch_error(self, job_kind: str, job_id: int, error: str) -> None:
        """Log an error that escaped a detached job task"""
        self.logger.error(
            "Detached job task raised",
            job_kind=job_kind,
            job_id=job_id,
            error=error
        )

    def log_provider_error(self, provider: str, error: str) -> None:
        self.logger.warning(
            "AI provider call failed",
            provider=provider,
            error=error
        )


class StorageLogger:
    """Logger for entity store backend selection and failures"""

    def __init__(self):
        self.logger = structlog.get_logger("audiostudio.storage")

    def log_backend_selected(self, backend: str, **kwargs: Any) -> None:
        self.logger.info(
            "Entity store backend selected",
            backend=backend,
            **kwargs
        )

    def log_fallback(self, reason: str) -> None:
        """Log fallback from the database to the in-memory backend"""
        self.logger.warning(
            "Database unavailable, using in-memory storage",
            reason=reason
        )

    def log_seeded(self, backend: str, projects: int, tracks: int, clips: int) -> None:
        self.logger.info(
            "Demo data created",
            backend=backend,
            projects=projects,
            tracks=tracks,
            clips=clips
        )

    def log_database_error(self, operation: str, error: str) -> None:
        self.logger.error(
            "Database operation failed",
            operation=operation,
            error=error
        )


# Create global logger instances
job_logger = JobLogger()
storage_logger = StorageLogger()

# Export for convenience
__all__ = [
    "setup_logging",
    "JobLogger",
    "StorageLogger",
    "job_logger",
    "storage_logger"
]
