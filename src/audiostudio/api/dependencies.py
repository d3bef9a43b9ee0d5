"""
Request-scoped accessors for the objects built at startup
"""

import random
import time
from pathlib import Path
from typing import Optional, TypeVar

from fastapi import HTTPException, Request, UploadFile

from ..core.config import AudioStudioSettings
from ..services.job_dispatcher import JobDispatcher
from ..storage.base import StorageInterface

T = TypeVar("T")


def get_storage(request: Request) -> StorageInterface:
    return request.app.state.storage


def get_dispatcher(request: Request) -> JobDispatcher:
    return request.app.state.dispatcher


def get_app_settings(request: Request) -> AudioStudioSettings:
    return request.app.state.settings


def found(record: Optional[T], message: str) -> T:
    """Return the record or answer 404 with `message`"""
    if record is None:
        raise HTTPException(status_code=404, detail=message)
    return record


def parse_id(value: Optional[str], message: str) -> int:
    """Parse an integer id from a form or query value, 400 when invalid"""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=message)


async def save_upload(upload: UploadFile, settings: AudioStudioSettings) -> str:
    """Store an uploaded audio file under a unique name and return its path"""
    if not settings.validate_audio_extension(upload.filename):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type. Allowed: {settings.SUPPORTED_AUDIO_EXTENSIONS}"
        )

    content = await upload.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail="Uploaded file is too large")

    suffix = Path(upload.filename).suffix.lower()
    filename = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"
    file_path = Path(settings.UPLOADS_PATH) / filename
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "wb") as buffer:
        buffer.write(content)

    return str(file_path)
