"""
AudioStudio Repository Layer
Data access layer with async CRUD operations
"""

from .base import BaseRepository
from .mood_tag_repository import MoodTagRepository

__all__ = [
    "BaseRepository",
    "MoodTagRepository"
]
