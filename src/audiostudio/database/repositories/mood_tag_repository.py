"""
Mood Tag Repository
Queries over the clip/mood-tag junction table
"""

from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ...core.errors import RepositoryError
from ..models import AudioClip, AudioClipMoodTag
from .base import BaseRepository


class MoodTagRepository(BaseRepository[AudioClipMoodTag]):
    """Repository for clip/mood-tag links (keyed by the id pair)"""

    def __init__(self, session: AsyncSession):
        super().__init__(AudioClipMoodTag, session)

    async def get_link(self, audio_clip_id: int, mood_tag_id: int) -> Optional[AudioClipMoodTag]:
        try:
            result = await self.session.execute(
                select(self.model).where(
                    self.model.audio_clip_id == audio_clip_id,
                    self.model.mood_tag_id == mood_tag_id
                )
            )
            return result.scalar_one_or_none()
        except Exception as e:
            raise RepositoryError(f"Error getting mood tag link: {str(e)}")

    async def get_links_for_clip(self, audio_clip_id: int) -> List[AudioClipMoodTag]:
        """Get all links of a clip with their mood tags loaded"""
        try:
            result = await self.session.execute(
                select(self.model)
                .where(self.model.audio_clip_id == audio_clip_id)
                .options(selectinload(self.model.mood_tag))
                .order_by(self.model.mood_tag_id)
            )
            return list(result.scalars().all())
        except Exception as e:
            raise RepositoryError(f"Error getting clip mood tags: {str(e)}")

    async def get_clips_for_tag(self, mood_tag_id: int) -> List[AudioClip]:
        """Get all clips carrying a mood tag"""
        try:
            result = await self.session.execute(
                select(AudioClip)
                .join(self.model, self.model.audio_clip_id == AudioClip.id)
                .where(self.model.mood_tag_id == mood_tag_id)
                .order_by(AudioClip.id)
            )
            return list(result.scalars().all())
        except Exception as e:
            raise RepositoryError(f"Error getting clips for mood tag: {str(e)}")

    async def delete_link(self, audio_clip_id: int, mood_tag_id: int) -> bool:
        try:
            result = await self.session.execute(
                delete(self.model).where(
                    self.model.audio_clip_id == audio_clip_id,
                    self.model.mood_tag_id == mood_tag_id
                )
            )
            await self.session.flush()
            return result.rowcount > 0
        except Exception as e:
            await self.session.rollback()
            raise RepositoryError(f"Error deleting mood tag link: {str(e)}")
