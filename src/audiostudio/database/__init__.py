"""
AudioStudio Database Module
Exports database models, connection management, and Base
"""

from .connection import Base, DatabaseManager
from .models import (
    User,
    Project,
    Track,
    AudioClip,
    Effect,
    MoodTag,
    AudioClipMoodTag,
    StemSeparationJob,
    VoiceCloningJob,
    MusicGenerationJob
)

__all__ = [
    "Base",
    "DatabaseManager",
    "User",
    "Project",
    "Track",
    "AudioClip",
    "Effect",
    "MoodTag",
    "AudioClipMoodTag",
    "StemSeparationJob",
    "VoiceCloningJob",
    "MusicGenerationJob"
]
