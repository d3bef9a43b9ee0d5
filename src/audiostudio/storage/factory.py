"""
Entity store selection: database when reachable, in-memory otherwise
"""

from typing import Optional

from ..core.config import AudioStudioSettings, get_settings
from ..core.logging import storage_logger
from ..database.connection import DatabaseManager
from .base import StorageInterface
from .database import DatabaseStorage
from .memory import MemoryStorage


async def create_storage(settings: Optional[AudioStudioSettings] = None) -> StorageInterface:
    """
    Build and initialize the store once, before the app serves requests.

    An unreachable database is not fatal: the failure is logged and an
    in-memory store is returned instead.
    """
    settings = settings or get_settings()

    if settings.USE_DATABASE:
        database = DatabaseManager(settings)
        try:
            await database.initialize()
            if not await database.check_health():
                raise ConnectionError(f"Database health check failed for {_safe_url(settings.DATABASE_URL)}")

            storage = DatabaseStorage(database)
            await storage.initialize(seed_demo_data=settings.SEED_DEMO_DATA)
            storage_logger.log_backend_selected(storage.backend, url=_safe_url(settings.DATABASE_URL))
            return storage

        except Exception as e:
            storage_logger.log_fallback(str(e))
            await database.close()

    storage = MemoryStorage()
    await storage.initialize(seed_demo_data=settings.SEED_DEMO_DATA)
    storage_logger.log_backend_selected(storage.backend)
    return storage


def _safe_url(url: str) -> str:
    """Database URL with the password masked"""
    scheme, sep, rest = url.partition("://")
    if "@" not in rest:
        return url
    credentials, _, host = rest.rpartition("@")
    user = credentials.split(":", 1)[0]
    return f"{scheme}{sep}{user}:***@{host}"
