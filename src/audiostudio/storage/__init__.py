"""
AudioStudio Entity Store
Interchangeable in-memory and database backends behind one interface
"""

from .base import StorageInterface, EntityTable, TABLES
from .memory import MemoryStorage
from .database import DatabaseStorage
from .factory import create_storage

__all__ = [
    "StorageInterface",
    "EntityTable",
    "TABLES",
    "MemoryStorage",
    "DatabaseStorage",
    "create_storage"
]
