"""
AudioStudio Tracks API Routes
REST endpoints for track management
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ...database.schemas import (
    AudioClipResponse,
    EffectResponse,
    TrackCreate,
    TrackResponse,
    TrackUpdate,
)
from ...storage.base import StorageInterface
from ..dependencies import found, get_storage, parse_id

router = APIRouter(tags=["Tracks"])


@router.get("/tracks/{track_id}", response_model=TrackResponse)
async def get_track(track_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_track(track_id), "Track not found")


@router.post("/tracks", response_model=TrackResponse, status_code=201)
async def create_track(track: TrackCreate, storage: StorageInterface = Depends(get_storage)):
    return await storage.create_track(track)


@router.put("/tracks/{track_id}", response_model=TrackResponse)
async def update_track(
    track_id: int,
    track: TrackUpdate,
    storage: StorageInterface = Depends(get_storage)
):
    return await storage.update_track(track_id, track)


@router.delete("/tracks/{track_id}", status_code=204)
async def delete_track(track_id: int, storage: StorageInterface = Depends(get_storage)):
    """Delete a track with its clips and effects"""
    if not await storage.delete_track(track_id):
        raise HTTPException(status_code=404, detail="Track not found")
    return Response(status_code=204)


# Registered before /tracks/{track_id}/clips so "all" is not read as an id
@router.get("/tracks/all/clips", response_model=List[AudioClipResponse])
async def list_all_clips(
    user_id: Optional[str] = Query("1", alias="userId"),
    storage: StorageInterface = Depends(get_storage)
):
    """Every clip on every track of every project of a user"""
    clips: List[AudioClipResponse] = []
    for project in await storage.get_projects_by_user_id(parse_id(user_id, "Valid userId is required")):
        for track in await storage.get_tracks_by_project_id(project.id):
            clips.extend(await storage.get_audio_clips_by_track_id(track.id))
    return clips


@router.get("/tracks/{track_id}/clips", response_model=List[AudioClipResponse])
async def list_track_clips(track_id: int, storage: StorageInterface = Depends(get_storage)):
    return await storage.get_audio_clips_by_track_id(track_id)


@router.get("/tracks/{track_id}/effects", response_model=List[EffectResponse])
async def list_track_effects(track_id: int, storage: StorageInterface = Depends(get_storage)):
    return await storage.get_effects_by_track_id(track_id)
