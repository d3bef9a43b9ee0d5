"""
AudioStudio AI Job API Routes
Submission and polling for stem separation, voice cloning and music generation
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from ...core.config import AudioStudioSettings
from ...database.schemas import (
    MusicGenerationJobResponse,
    StemSeparationJobResponse,
    VoiceCloningJobResponse,
)
from ...services.job_dispatcher import JobDispatcher
from ...storage.base import StorageInterface
from ..dependencies import (
    found,
    get_app_settings,
    get_dispatcher,
    get_storage,
    parse_id,
    save_upload,
)

router = APIRouter(tags=["AI Jobs"])


async def _existing_project_id(storage: StorageInterface, value: Any) -> int:
    project_id = parse_id(value, "Valid projectId is required")
    found(await storage.get_project(project_id), "Project not found")
    return project_id


# Stem separation

@router.post("/stem-separation", response_model=StemSeparationJobResponse, status_code=201)
async def create_stem_separation_job(
    file: Optional[UploadFile] = File(None),
    project_id: Optional[str] = Form(None, alias="projectId"),
    storage: StorageInterface = Depends(get_storage),
    dispatcher: JobDispatcher = Depends(get_dispatcher),
    settings: AudioStudioSettings = Depends(get_app_settings)
):
    """Upload a mix and split it into stems in the background"""
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="Audio file is required")
    project_id = await _existing_project_id(storage, project_id)

    original_path = await save_upload(file, settings)
    return await dispatcher.create_and_process_stem_separation_job({
        "project_id": project_id,
        "original_path": original_path,
    })


@router.get("/stem-separation/{job_id}", response_model=StemSeparationJobResponse)
async def get_stem_separation_job(job_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_stem_separation_job(job_id), "Stem separation job not found")


# Voice cloning

@router.post("/voice-cloning", response_model=VoiceCloningJobResponse, status_code=201)
async def create_voice_cloning_job(
    sample: Optional[UploadFile] = File(None),
    text: Optional[str] = Form(None),
    project_id: Optional[str] = Form(None, alias="projectId"),
    storage: StorageInterface = Depends(get_storage),
    dispatcher: JobDispatcher = Depends(get_dispatcher),
    settings: AudioStudioSettings = Depends(get_app_settings)
):
    """Upload a voice sample and synthesize `text` with it in the background"""
    if sample is None or not sample.filename:
        raise HTTPException(status_code=400, detail="Voice sample file is required")
    if not text or not text.strip():
        raise HTTPException(status_code=400, detail="Text content is required")
    project_id = await _existing_project_id(storage, project_id)

    sample_path = await save_upload(sample, settings)
    return await dispatcher.create_and_process_voice_cloning_job({
        "project_id": project_id,
        "sample_path": sample_path,
        "text": text,
    })


@router.get("/voice-cloning/{job_id}", response_model=VoiceCloningJobResponse)
async def get_voice_cloning_job(job_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_voice_cloning_job(job_id), "Voice cloning job not found")


# Music generation

async def _read_fields(request: Request) -> Dict[str, Any]:
    """Request fields from a JSON body or a form"""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Malformed JSON body")
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        return body
    return dict(await request.form())


@router.post("/music-generation", response_model=MusicGenerationJobResponse, status_code=201)
async def create_music_generation_job(
    request: Request,
    storage: StorageInterface = Depends(get_storage),
    dispatcher: JobDispatcher = Depends(get_dispatcher)
):
    """Generate music from a text prompt in the background"""
    fields = await _read_fields(request)

    prompt = fields.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    project_id = await _existing_project_id(storage, fields.get("projectId"))

    return await dispatcher.create_and_process_music_generation_job({
        "project_id": project_id,
        "prompt": prompt,
    })


@router.get("/music-generation/{job_id}", response_model=MusicGenerationJobResponse)
async def get_music_generation_job(job_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_music_generation_job(job_id), "Music generation job not found")
