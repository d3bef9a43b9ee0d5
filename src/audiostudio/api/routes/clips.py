"""
AudioStudio Audio Clips API Routes
"""

from fastapi import APIRouter, Depends, HTTPException, Response

from ...database.schemas import AudioClipCreate, AudioClipResponse, AudioClipUpdate
from ...storage.base import StorageInterface
from ..dependencies import found, get_storage

router = APIRouter(tags=["Clips"])


@router.get("/clips/{clip_id}", response_model=AudioClipResponse)
async def get_clip(clip_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_audio_clip(clip_id), "Audio clip not found")


@router.post("/clips", response_model=AudioClipResponse, status_code=201)
async def create_clip(clip: AudioClipCreate, storage: StorageInterface = Depends(get_storage)):
    return await storage.create_audio_clip(clip)


@router.put("/clips/{clip_id}", response_model=AudioClipResponse)
async def update_clip(
    clip_id: int,
    clip: AudioClipUpdate,
    storage: StorageInterface = Depends(get_storage)
):
    return await storage.update_audio_clip(clip_id, clip)


@router.delete("/clips/{clip_id}", status_code=204)
async def delete_clip(clip_id: int, storage: StorageInterface = Depends(get_storage)):
    if not await storage.delete_audio_clip(clip_id):
        raise HTTPException(status_code=404, detail="Audio clip not found")
    return Response(status_code=204)
