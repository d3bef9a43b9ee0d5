"""
AudioStudio Projects API Routes
REST endpoints for project management
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ...database.schemas import (
    ProjectCreate,
    ProjectJobsResponse,
    ProjectResponse,
    ProjectUpdate,
    TrackResponse,
)
from ...storage.base import StorageInterface
from ..dependencies import found, get_storage, parse_id

router = APIRouter(tags=["Projects"])


@router.get("/projects", response_model=List[ProjectResponse])
async def list_projects(
    user_id: Optional[str] = Query(None, alias="userId"),
    storage: StorageInterface = Depends(get_storage)
):
    """List the projects of a user"""
    return await storage.get_projects_by_user_id(parse_id(user_id, "Valid userId is required"))


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_project(project_id), "Project not found")


@router.post("/projects", response_model=ProjectResponse, status_code=201)
async def create_project(project: ProjectCreate, storage: StorageInterface = Depends(get_storage)):
    return await storage.create_project(project)


@router.put("/projects/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    project: ProjectUpdate,
    storage: StorageInterface = Depends(get_storage)
):
    return await storage.update_project(project_id, project)


@router.delete("/projects/{project_id}", status_code=204)
async def delete_project(project_id: int, storage: StorageInterface = Depends(get_storage)):
    """Delete a project with its tracks, clips, effects and jobs"""
    if not await storage.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return Response(status_code=204)


@router.get("/projects/{project_id}/tracks", response_model=List[TrackResponse])
async def list_project_tracks(project_id: int, storage: StorageInterface = Depends(get_storage)):
    return await storage.get_tracks_by_project_id(project_id)


@router.get("/projects/{project_id}/jobs", response_model=ProjectJobsResponse)
async def list_project_jobs(project_id: int, storage: StorageInterface = Depends(get_storage)):
    """All jobs of a project grouped by kind"""
    found(await storage.get_project(project_id), "Project not found")
    return ProjectJobsResponse(
        stem_separation=await storage.get_stem_separation_jobs_by_project_id(project_id),
        voice_cloning=await storage.get_voice_cloning_jobs_by_project_id(project_id),
        music_generation=await storage.get_music_generation_jobs_by_project_id(project_id),
    )
