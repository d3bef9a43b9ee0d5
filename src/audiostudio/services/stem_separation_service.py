"""
Stem separation processor

Splitting is simulated: every configured stem is a copy of the uploaded mix,
or a silent placeholder when the mix is not on disk.
"""

from typing import Any, Dict

from ..database.schemas import StemSeparationJobResponse
from .job_processor import JobProcessor


class StemSeparationProcessor(JobProcessor):
    kind = "stem_separation"

    @property
    def delay_seconds(self) -> float:
        return self.settings.STEM_SEPARATION_DELAY_SECONDS

    async def _update_job(self, job_id: int, fields: Dict[str, Any]) -> StemSeparationJobResponse:
        return await self.storage.update_stem_separation_job(job_id, fields)

    async def _process_internal(self, job: StemSeparationJobResponse) -> Dict[str, Any]:
        job_dir = self.output_dir / f"stem_separation_{job.id}"

        output_paths: Dict[str, str] = {}
        for stem in self.settings.STEM_TYPES:
            output_paths[stem] = await self._copy_or_placeholder(
                job.original_path,
                job_dir / f"{stem}.wav"
            )

        return {"output_paths": output_paths}
