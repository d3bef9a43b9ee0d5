"""
AudioStudio Effects API Routes
REST endpoints for track effects; settings are validated per effect type
"""

from fastapi import APIRouter, Depends, HTTPException, Response

from ...database.schemas import (
    EffectCreate,
    EffectResponse,
    EffectUpdate,
    normalize_effect_settings,
)
from ...storage.base import StorageInterface
from ..dependencies import found, get_storage

router = APIRouter(tags=["Effects"])


@router.get("/effects/{effect_id}", response_model=EffectResponse)
async def get_effect(effect_id: int, storage: StorageInterface = Depends(get_storage)):
    return found(await storage.get_effect(effect_id), "Effect not found")


@router.post("/effects", response_model=EffectResponse, status_code=201)
async def create_effect(effect: EffectCreate, storage: StorageInterface = Depends(get_storage)):
    effect.settings = normalize_effect_settings(effect.type, effect.settings)
    return await storage.create_effect(effect)


@router.put("/effects/{effect_id}", response_model=EffectResponse)
async def update_effect(
    effect_id: int,
    effect: EffectUpdate,
    storage: StorageInterface = Depends(get_storage)
):
    changes = effect.model_dump(exclude_unset=True)

    # Settings must fit the effect's type after the update, whichever side changes
    new_settings = changes.get("settings")
    if new_settings is not None or changes.get("type") is not None:
        current = found(await storage.get_effect(effect_id), "Effect not found")
        effect_type = changes.get("type") or current.type
        settings = new_settings if new_settings is not None else current.settings
        changes["settings"] = normalize_effect_settings(effect_type, settings)

    return await storage.update_effect(effect_id, changes)


@router.delete("/effects/{effect_id}", status_code=204)
async def delete_effect(effect_id: int, storage: StorageInterface = Depends(get_storage)):
    if not await storage.delete_effect(effect_id):
        raise HTTPException(status_code=404, detail="Effect not found")
    return Response(status_code=204)
