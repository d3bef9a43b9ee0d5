"""
Music generation processor

Audio is a placeholder (the configured default sample, or silence). When a
description service is available the prompt is first described by an AI
provider and the text is stored next to the audio as JSON.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.config import AudioStudioSettings
from ..core.errors import ProcessingFailure
from ..database.schemas import MusicGenerationJobResponse
from ..storage.base import StorageInterface
from .ai_providers import MusicDescriptionService
from .job_processor import JobProcessor


def write_description(path: Path, document: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


class MusicGenerationProcessor(JobProcessor):
    kind = "music_generation"

    def __init__(
        self,
        storage: StorageInterface,
        settings: Optional[AudioStudioSettings] = None,
        description_service: Optional[MusicDescriptionService] = None
    ):
        super().__init__(storage, settings)
        self.description_service = description_service

    @property
    def delay_seconds(self) -> float:
        return self.settings.MUSIC_GENERATION_DELAY_SECONDS

    async def _update_job(self, job_id: int, fields: Dict[str, Any]) -> MusicGenerationJobResponse:
        return await self.storage.update_music_generation_job(job_id, fields)

    async def _process_internal(self, job: MusicGenerationJobResponse) -> Dict[str, Any]:
        audio_path = self.output_dir / f"ai_generated_{job.id}.wav"

        if self.description_service is not None:
            result = await self.description_service.describe(job.prompt)
            if result.is_err():
                raise ProcessingFailure(result.error)
            await self._run_blocking(
                write_description,
                audio_path.with_suffix(".json"),
                {"jobId": job.id, "prompt": job.prompt, "description": result.data}
            )

        output_path = await self._copy_or_placeholder(self.settings.DEFAULT_SAMPLE_PATH, audio_path)
        return {"output_path": output_path}
