"""
AudioStudio Mood Tag API Routes
Mood tag management and weighted tagging of audio clips
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ...database.schemas import (
    AudioClipMoodTagAttach,
    AudioClipMoodTagDetail,
    AudioClipMoodTagResponse,
    AudioClipMoodTagWeight,
    AudioClipResponse,
    MoodTagCreate,
    MoodTagResponse,
    MoodTagUpdate,
)
from ...storage.base import StorageInterface
from ..dependencies import found, get_storage

router = APIRouter(tags=["Mood Tags"])


@router.get("/mood-tags", response_model=List[MoodTagResponse])
async def list_mood_tags(storage: StorageInterface = Depends(get_storage)):
    return await storage.get_all_mood_tags()


@router.post("/mood-tags", response_model=MoodTagResponse, status_code=201)
async def create_mood_tag(mood_tag: MoodTagCreate, storage: StorageInterface = Depends(get_storage)):
    return await storage.create_mood_tag(mood_tag)


@router.get("/mood-tags/{mood_tag_id}", response_model=MoodTagResponse)
async def get_mood_tag(mood_tag_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_mood_tag(mood_tag_id), "Mood tag not found")


@router.put("/mood-tags/{mood_tag_id}", response_model=MoodTagResponse)
async def update_mood_tag(
    mood_tag_id: int,
    mood_tag: MoodTagUpdate,
    storage: StorageInterface = Depends(get_storage)
):
    return await storage.update_mood_tag(mood_tag_id, mood_tag)


@router.delete("/mood-tags/{mood_tag_id}", status_code=204)
async def delete_mood_tag(mood_tag_id: int, storage: StorageInterface = Depends(get_storage)):
    """Delete a mood tag and detach it from every clip"""
    if not await storage.delete_mood_tag(mood_tag_id):
        raise HTTPException(status_code=404, detail="Mood tag not found")
    return Response(status_code=204)


@router.get("/mood-tags/{mood_tag_id}/clips", response_model=List[AudioClipResponse])
async def list_mood_tag_clips(mood_tag_id: int, storage: StorageInterface = Depends(get_storage)):
    found(await storage.get_mood_tag(mood_tag_id), "Mood tag not found")
    return await storage.get_audio_clips_by_mood_tag_id(mood_tag_id)


# Tags of a clip

@router.get("/clips/{clip_id}/mood-tags", response_model=List[AudioClipMoodTagDetail])
async def list_clip_mood_tags(clip_id: int, storage: StorageInterface = Depends(get_storage)):
    found(await storage.get_audio_clip(clip_id), "Audio clip not found")
    return await storage.get_audio_clip_mood_tags(clip_id)


@router.post("/clips/{clip_id}/mood-tags", response_model=AudioClipMoodTagResponse, status_code=201)
async def add_clip_mood_tag(
    clip_id: int,
    link: AudioClipMoodTagAttach,
    storage: StorageInterface = Depends(get_storage)
):
    return await storage.add_mood_tag_to_audio_clip({
        "audio_clip_id": clip_id,
        "mood_tag_id": link.mood_tag_id,
        "weight": link.weight,
    })


@router.put("/clips/{clip_id}/mood-tags/{mood_tag_id}", response_model=AudioClipMoodTagResponse)
async def update_clip_mood_tag_weight(
    clip_id: int,
    mood_tag_id: int,
    body: AudioClipMoodTagWeight,
    storage: StorageInterface = Depends(get_storage)
):
    return await storage.update_audio_clip_mood_tag_weight(clip_id, mood_tag_id, body.weight)


@router.delete("/clips/{clip_id}/mood-tags/{mood_tag_id}", status_code=204)
async def remove_clip_mood_tag(
    clip_id: int,
    mood_tag_id: int,
    storage: StorageInterface = Depends(get_storage)
):
    if not await storage.remove_mood_tag_from_audio_clip(clip_id, mood_tag_id):
        raise HTTPException(status_code=404, detail="Mood tag is not attached to this clip")
    return Response(status_code=204)
