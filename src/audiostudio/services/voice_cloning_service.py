"""
Voice cloning processor (simulated synthesis from a voice sample)
"""

from typing import Any, Dict

from ..database.schemas import VoiceCloningJobResponse
from .job_processor import JobProcessor


class VoiceCloningProcessor(JobProcessor):
    kind = "voice_cloning"

    @property
    def delay_seconds(self) -> float:
        return self.settings.VOICE_CLONING_DELAY_SECONDS

    async def _update_job(self, job_id: int, fields: Dict[str, Any]) -> VoiceCloningJobResponse:
        return await self.storage.update_voice_cloning_job(job_id, fields)

    async def _process_internal(self, job: VoiceCloningJobResponse) -> Dict[str, Any]:
        output_path = await self._copy_or_placeholder(
            job.sample_path,
            self.output_dir / f"cloned_voice_{job.id}.wav"
        )
        return {"output_path": output_path}
