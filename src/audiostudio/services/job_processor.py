"""
AudioStudio Job Processing
Base class driving a job through pending -> processing -> completed | failed
"""

import asyncio
import functools
import shutil
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import soundfile as sf
from pydantic import BaseModel

from ..core.config import AudioStudioSettings, get_settings
from ..core.job_status import JobStatus
from ..core.logging import job_logger
from ..storage.base import StorageInterface


def write_silent_wav(path: Path, duration_seconds: float, sample_rate: int) -> None:
    """Write a mono 16-bit WAV of silence"""
    path.parent.mkdir(parents=True, exist_ok=True)
    frames = max(1, int(duration_seconds * sample_rate))
    sf.write(str(path), np.zeros(frames, dtype=np.float32), sample_rate, subtype="PCM_16")


def copy_or_placeholder(
    source: Optional[str],
    target: Path,
    duration_seconds: float,
    sample_rate: int
) -> None:
    """Copy `source` to `target`, or write silence when there is nothing to copy"""
    target.parent.mkdir(parents=True, exist_ok=True)
    if source and Path(source).is_file():
        shutil.copyfile(source, target)
    else:
        write_silent_wav(target, duration_seconds, sample_rate)


class JobProcessor(ABC):
    """
    Base class for job processors.

    `process` never raises for a failure of the work itself: the error is
    written to the job instead. Only a failure to record that error escapes.
    There is no cancellation or timeout; a dispatched job always runs to a
    terminal state.
    """

    kind: str = "job"

    def __init__(self, storage: StorageInterface, settings: Optional[AudioStudioSettings] = None):
        self.storage = storage
        self.settings = settings or get_settings()
        self.output_dir = Path(self.settings.OUTPUT_PATH) / self.kind

    @property
    @abstractmethod
    def delay_seconds(self) -> float:
        """Simulated processing latency"""
        pass

    @abstractmethod
    async def _update_job(self, job_id: int, fields: Dict[str, Any]) -> BaseModel:
        """Persist a job update through the store"""
        pass

    @abstractmethod
    async def _process_internal(self, job: BaseModel) -> Dict[str, Any]:
        """Do the work and return the job's output fields"""
        pass

    async def process(self, job: BaseModel) -> BaseModel:
        """Run a pending job to completion or failure and return the final record"""
        start_time = time.time()
        try:
            await self._update_job(job.id, {"status": JobStatus.PROCESSING.value})
            job_logger.log_job_started(self.kind, job.id, project_id=job.project_id)

            await asyncio.sleep(self.delay_seconds)
            outputs = await self._process_internal(job)

            completed = await self._update_job(job.id, {
                "status": JobStatus.COMPLETED.value,
                "error": None,
                **outputs
            })
            job_logger.log_job_completed(
                self.kind,
                job.id,
                duration_ms=(time.time() - start_time) * 1000,
                **outputs
            )
            return completed

        except Exception as e:
            error = str(e) or e.__class__.__name__
            job_logger.log_job_failed(
                self.kind,
                job.id,
                error=error,
                duration_ms=(time.time() - start_time) * 1000
            )
            return await self._update_job(job.id, {
                "status": JobStatus.FAILED.value,
                "error": error
            })

    async def _run_blocking(self, func, *args) -> Any:
        """Run file-system work in the default executor"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    async def _copy_or_placeholder(self, source: Optional[str], target: Path) -> str:
        await self._run_blocking(
            copy_or_placeholder,
            source,
            target,
            self.settings.PLACEHOLDER_DURATION_SECONDS,
            self.settings.PLACEHOLDER_SAMPLE_RATE,
        )
        return str(target)
