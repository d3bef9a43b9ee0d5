"""
AudioStudio Services
Job processors, AI provider adapters and the job dispatcher
"""

from .ai_providers import MusicDescriptionService, build_description_service
from .job_dispatcher import JobDispatcher
from .job_processor import JobProcessor
from .music_generation_service import MusicGenerationProcessor
from .stem_separation_service import StemSeparationProcessor
from .voice_cloning_service import VoiceCloningProcessor

__all__ = [
    "MusicDescriptionService",
    "build_description_service",
    "JobDispatcher",
    "JobProcessor",
    "MusicGenerationProcessor",
    "StemSeparationProcessor",
    "VoiceCloningProcessor"
]
