"""
AudioStudio Job Dispatcher
Creates job rows and hands them to their processors as detached tasks
"""

import asyncio
from typing import Any, Dict, Optional, Set

from ..core.config import AudioStudioSettings, get_settings
from ..core.logging import job_logger
from ..database.schemas import (
    MusicGenerationJobResponse,
    StemSeparationJobResponse,
    VoiceCloningJobResponse,
)
from ..storage.base import StorageInterface
from .ai_providers import MusicDescriptionService
from .job_processor import JobProcessor
from .music_generation_service import MusicGenerationProcessor
from .stem_separation_service import StemSeparationProcessor
from .voice_cloning_service import VoiceCloningProcessor


class JobDispatcher:
    """
    Create-and-process entry points used by the HTTP layer.

    Each call returns the freshly created `pending` job without waiting for
    processing. Task failures are logged, never raised to the caller.
    """

    def __init__(
        self,
        storage: StorageInterface,
        settings: Optional[AudioStudioSettings] = None,
        description_service: Optional[MusicDescriptionService] = None
    ):
        self.storage = storage
        self.settings = settings or get_settings()
        self.description_service = description_service

        self.stem_separation = StemSeparationProcessor(storage, self.settings)
        self.voice_cloning = VoiceCloningProcessor(storage, self.settings)
        self.music_generation = MusicGenerationProcessor(
            storage, self.settings, description_service=description_service
        )

        # Strong references keep detached tasks alive until they finish
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def _spawn(self, processor: JobProcessor, job) -> asyncio.Task:
        task = asyncio.create_task(
            processor.process(job),
            name=f"{processor.kind}-{job.id}"
        )
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_done(t, processor.kind, job.id))
        job_logger.log_job_dispatched(processor.kind, job.id, job.project_id)
        return task

    def _on_done(self, task: asyncio.Task, kind: str, job_id: int) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            job_logger.log_dispatch_error(kind, job_id, "task cancelled")
            return
        error = task.exception()
        if error is not None:
            job_logger.log_dispatch_error(kind, job_id, str(error) or error.__class__.__name__)

    async def create_and_process_stem_separation_job(self, job: Dict[str, Any]) -> StemSeparationJobResponse:
        created = await self.storage.create_stem_separation_job(job)
        self._spawn(self.stem_separation, created)
        return created

    async def create_and_process_voice_cloning_job(self, job: Dict[str, Any]) -> VoiceCloningJobResponse:
        created = await self.storage.create_voice_cloning_job(job)
        self._spawn(self.voice_cloning, created)
        return created

    async def create_and_process_music_generation_job(self, job: Dict[str, Any]) -> MusicGenerationJobResponse:
        created = await self.storage.create_music_generation_job(job)
        self._spawn(self.music_generation, created)
        return created

    async def drain(self) -> None:
        """Wait for all in-flight jobs to settle"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        await self.drain()
        if self.description_service is not None:
            await self.description_service.aclose()
