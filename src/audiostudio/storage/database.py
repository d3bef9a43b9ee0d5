"""
Database-backed entity store (SQLAlchemy async, one session per operation)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from ..core.errors import ConflictError
from ..database.connection import DatabaseManager
from ..database.models import (
    User,
    Project,
    Track,
    AudioClip,
    Effect,
    MoodTag,
    StemSeparationJob,
    VoiceCloningJob,
    MusicGenerationJob,
)
from ..database.repositories import BaseRepository, MoodTagRepository
from ..database.schemas import (
    AudioClipMoodTagResponse,
    AudioClipMoodTagDetail,
    AudioClipResponse,
)
from .base import EntityTable, StorageInterface

MODELS = {
    "users": User,
    "projects": Project,
    "tracks": Track,
    "audio_clips": AudioClip,
    "effects": Effect,
    "mood_tags": MoodTag,
    "stem_separation_jobs": StemSeparationJob,
    "voice_cloning_jobs": VoiceCloningJob,
    "music_generation_jobs": MusicGenerationJob,
}


class DatabaseStorage(StorageInterface):
    """
    Relational store. Ids come from autoincrement columns and deletes cascade
    through ON DELETE CASCADE foreign keys.
    """

    backend = "database"

    def __init__(self, database: DatabaseManager):
        self.database = database

    async def _setup(self) -> None:
        if self.database.settings.DATABASE_AUTO_MIGRATE:
            await self.database.create_tables()

    async def close(self) -> None:
        await self.database.close()

    async def _get(self, table: EntityTable, id: int) -> Optional[BaseModel]:
        async with self.database.get_session() as session:
            obj = await BaseRepository(MODELS[table.name], session).get(id)
            return table.record.model_validate(obj) if obj is not None else None

    async def _find(self, table: EntityTable, **filters: Any) -> List[BaseModel]:
        async with self.database.get_session() as session:
            objs = await BaseRepository(MODELS[table.name], session).find(**filters)
            return [table.record.model_validate(obj) for obj in objs]

    async def _insert(self, table: EntityTable, data: Dict[str, Any]) -> BaseModel:
        async with self.database.get_session() as session:
            obj = await BaseRepository(MODELS[table.name], session).create(data)
            await session.commit()
            return table.record.model_validate(obj)

    async def _update(self, table: EntityTable, id: int, fields: Dict[str, Any]) -> Optional[BaseModel]:
        async with self.database.get_session() as session:
            repository = BaseRepository(MODELS[table.name], session)
            obj = await repository.get(id)
            if obj is None:
                return None
            obj = await repository.update(obj, fields)
            await session.commit()
            return table.record.model_validate(obj)

    async def _delete(self, table: EntityTable, id: int) -> bool:
        async with self.database.get_session() as session:
            deleted = await BaseRepository(MODELS[table.name], session).delete(id)
            await session.commit()
            return deleted

    # Clip / mood tag links

    async def _insert_link(self, data: Dict[str, Any]) -> AudioClipMoodTagResponse:
        async with self.database.get_session() as session:
            repository = MoodTagRepository(session)
            if await repository.get_link(data["audio_clip_id"], data["mood_tag_id"]) is not None:
                raise ConflictError(
                    f"Mood tag {data['mood_tag_id']} is already attached to audio clip {data['audio_clip_id']}"
                )
            link = await repository.create(data)
            await session.commit()
            return AudioClipMoodTagResponse.model_validate(link)

    async def _find_links(self, audio_clip_id: int) -> List[AudioClipMoodTagDetail]:
        async with self.database.get_session() as session:
            links = await MoodTagRepository(session).get_links_for_clip(audio_clip_id)
            return [AudioClipMoodTagDetail.model_validate(link) for link in links]

    async def _update_link(
        self, audio_clip_id: int, mood_tag_id: int, weight: int
    ) -> Optional[AudioClipMoodTagResponse]:
        async with self.database.get_session() as session:
            repository = MoodTagRepository(session)
            link = await repository.get_link(audio_clip_id, mood_tag_id)
            if link is None:
                return None
            link = await repository.update(link, {"weight": weight})
            await session.commit()
            return AudioClipMoodTagResponse.model_validate(link)

    async def _delete_link(self, audio_clip_id: int, mood_tag_id: int) -> bool:
        async with self.database.get_session() as session:
            deleted = await MoodTagRepository(session).delete_link(audio_clip_id, mood_tag_id)
            await session.commit()
            return deleted

    async def _find_clips_by_mood_tag(self, mood_tag_id: int) -> List[AudioClipResponse]:
        async with self.database.get_session() as session:
            clips = await MoodTagRepository(session).get_clips_for_tag(mood_tag_id)
            return [AudioClipResponse.model_validate(clip) for clip in clips]
