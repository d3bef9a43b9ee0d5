"""
AudioStudio Entity Store
Backend-agnostic storage contract shared by the in-memory and database stores
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Type, Union

from pydantic import BaseModel

from ..core.errors import NotFoundError
from ..core.job_status import JobStatus, ensure_job_transition
from .demo_data import create_demo_data
from ..database.schemas import (
    UserCreate, UserUpdate, UserResponse,
    ProjectCreate, ProjectUpdate, ProjectResponse,
    TrackCreate, TrackUpdate, TrackResponse,
    AudioClipCreate, AudioClipUpdate, AudioClipResponse,
    EffectCreate, EffectUpdate, EffectResponse,
    MoodTagCreate, MoodTagUpdate, MoodTagResponse,
    AudioClipMoodTagCreate, AudioClipMoodTagResponse, AudioClipMoodTagDetail,
    StemSeparationJobCreate, StemSeparationJobUpdate, StemSeparationJobResponse,
    VoiceCloningJobCreate, VoiceCloningJobUpdate, VoiceCloningJobResponse,
    MusicGenerationJobCreate, MusicGenerationJobUpdate, MusicGenerationJobResponse,
)

Fields = Union[Dict[str, Any], BaseModel]

# Keys an update may never overwrite
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in TIMESTAMP columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class EntityTable:
    """Describes one entity type of the store"""
    name: str
    label: str
    record: Type[BaseModel]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    timestamped: bool = False
    unique: Tuple[str, ...] = ()
    # (foreign key field, parent table name)
    parents: Tuple[Tuple[str, str], ...] = ()
    nullable: FrozenSet[str] = frozenset()
    outputs: Tuple[str, ...] = ()

    @property
    def is_job(self) -> bool:
        return bool(self.outputs)

    @property
    def columns(self) -> FrozenSet[str]:
        return frozenset(self.record.model_fields)


USERS = EntityTable(
    "users", "User", UserResponse, UserCreate, UserUpdate,
    unique=("username",),
)
PROJECTS = EntityTable(
    "projects", "Project", ProjectResponse, ProjectCreate, ProjectUpdate,
    timestamped=True,
    parents=(("user_id", "users"),),
)
TRACKS = EntityTable(
    "tracks", "Track", TrackResponse, TrackCreate, TrackUpdate,
    parents=(("project_id", "projects"),),
)
AUDIO_CLIPS = EntityTable(
    "audio_clips", "AudioClip", AudioClipResponse, AudioClipCreate, AudioClipUpdate,
    parents=(("track_id", "tracks"),),
)
EFFECTS = EntityTable(
    "effects", "Effect", EffectResponse, EffectCreate, EffectUpdate,
    parents=(("track_id", "tracks"),),
)
MOOD_TAGS = EntityTable(
    "mood_tags", "MoodTag", MoodTagResponse, MoodTagCreate, MoodTagUpdate,
    unique=("name",),
    nullable=frozenset({"description"}),
)
STEM_SEPARATION_JOBS = EntityTable(
    "stem_separation_jobs", "StemSeparationJob",
    StemSeparationJobResponse, StemSeparationJobCreate, StemSeparationJobUpdate,
    timestamped=True,
    parents=(("project_id", "projects"),),
    nullable=frozenset({"error", "output_paths"}),
    outputs=("output_paths",),
)
VOICE_CLONING_JOBS = EntityTable(
    "voice_cloning_jobs", "VoiceCloningJob",
    VoiceCloningJobResponse, VoiceCloningJobCreate, VoiceCloningJobUpdate,
    timestamped=True,
    parents=(("project_id", "projects"),),
    nullable=frozenset({"error", "output_path"}),
    outputs=("output_path",),
)
MUSIC_GENERATION_JOBS = EntityTable(
    "music_generation_jobs", "MusicGenerationJob",
    MusicGenerationJobResponse, MusicGenerationJobCreate, MusicGenerationJobUpdate,
    timestamped=True,
    parents=(("project_id", "projects"),),
    nullable=frozenset({"error", "output_path"}),
    outputs=("output_path",),
)

TABLES: Dict[str, EntityTable] = {
    table.name: table
    for table in (
        USERS, PROJECTS, TRACKS, AUDIO_CLIPS, EFFECTS, MOOD_TAGS,
        STEM_SEPARATION_JOBS, VOICE_CLONING_JOBS, MUSIC_GENERATION_JOBS,
    )
}

# The clip/mood-tag junction, keyed by (audio_clip_id, mood_tag_id)
MOOD_TAG_LINKS = "audio_clip_mood_tags"

# Deleting a parent deletes these children: parent table -> [(child table, foreign key)]
CASCADES: Dict[str, List[Tuple[str, str]]] = {
    "projects": [
        ("tracks", "project_id"),
        ("stem_separation_jobs", "project_id"),
        ("voice_cloning_jobs", "project_id"),
        ("music_generation_jobs", "project_id"),
    ],
    "tracks": [
        ("audio_clips", "track_id"),
        ("effects", "track_id"),
    ],
    "audio_clips": [(MOOD_TAG_LINKS, "audio_clip_id")],
    "mood_tags": [(MOOD_TAG_LINKS, "mood_tag_id")],
}


class StorageInterface(ABC):
    """
    Entity store contract.

    Every public operation is implemented here once; backends supply only the
    primitives below, so callers never observe which backend is active.
    Records are returned as pydantic response models and never alias the
    backend's internal state.
    """

    backend: str = "abstract"

    # ------------------------------------------------------------------
    # Backend primitives
    # ------------------------------------------------------------------
    @abstractmethod
    async def _get(self, table: EntityTable, id: int) -> Optional[BaseModel]:
        raise NotImplementedError

    @abstractmethod
    async def _find(self, table: EntityTable, **filters: Any) -> List[BaseModel]:
        """Records matching equality filters, in id order"""
        raise NotImplementedError

    @abstractmethod
    async def _insert(self, table: EntityTable, data: Dict[str, Any]) -> BaseModel:
        """Persist a complete row; raises ConflictError on a unique key clash"""
        raise NotImplementedError

    @abstractmethod
    async def _update(self, table: EntityTable, id: int, fields: Dict[str, Any]) -> Optional[BaseModel]:
        """Merge fields into a row; None when the row does not exist"""
        raise NotImplementedError

    @abstractmethod
    async def _delete(self, table: EntityTable, id: int) -> bool:
        """Delete a row and its dependents (see CASCADES)"""
        raise NotImplementedError

    @abstractmethod
    async def _insert_link(self, data: Dict[str, Any]) -> AudioClipMoodTagResponse:
        """Add a clip/tag link; raises ConflictError when the pair exists"""
        raise NotImplementedError

    @abstractmethod
    async def _find_links(self, audio_clip_id: int) -> List[AudioClipMoodTagDetail]:
        raise NotImplementedError

    @abstractmethod
    async def _update_link(
        self, audio_clip_id: int, mood_tag_id: int, weight: int
    ) -> Optional[AudioClipMoodTagResponse]:
        raise NotImplementedError

    @abstractmethod
    async def _delete_link(self, audio_clip_id: int, mood_tag_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def _find_clips_by_mood_tag(self, mood_tag_id: int) -> List[AudioClipResponse]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def initialize(self, seed_demo_data: bool = True) -> None:
        """Prepare the backend and seed demo content into an empty store"""
        await self._setup()
        if seed_demo_data and await self.get_user_by_username("demo") is None:
            await create_demo_data(self)

    async def _setup(self) -> None:
        pass

    async def close(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------
    def _as_dict(self, fields: Fields, exclude_unset: bool) -> Dict[str, Any]:
        if isinstance(fields, BaseModel):
            return fields.model_dump(exclude_unset=exclude_unset)
        return dict(fields)

    async def _ensure_parents(self, table: EntityTable, data: Dict[str, Any]) -> None:
        for field, parent_name in table.parents:
            if field in data:
                parent = TABLES[parent_name]
                if await self._get(parent, data[field]) is None:
                    raise NotFoundError(parent.label, data[field])

    async def _create(self, table: EntityTable, fields: Fields) -> BaseModel:
        data = table.create_schema.model_validate(
            self._as_dict(fields, exclude_unset=False)
        ).model_dump()
        await self._ensure_parents(table, data)

        now = utcnow()
        if "created_at" in table.columns:
            data["created_at"] = now
        if table.timestamped:
            data["updated_at"] = now
        if table.is_job:
            data["status"] = JobStatus.PENDING.value
            data["error"] = None
            for output in table.outputs:
                data[output] = None
        return await self._insert(table, data)

    async def _modify(self, table: EntityTable, id: int, fields: Fields) -> BaseModel:
        if isinstance(fields, BaseModel):
            changes = fields.model_dump(exclude_unset=True)
        else:
            changes = table.update_schema.model_validate(
                {k: v for k, v in fields.items() if k not in IMMUTABLE_FIELDS}
            ).model_dump(exclude_unset=True)

        changes = {
            key: value for key, value in changes.items()
            if key in table.columns
            and key not in IMMUTABLE_FIELDS
            and (value is not None or key in table.nullable)
        }

        current = None
        if table.is_job or table.parents:
            current = await self._get(table, id)
            if current is None:
                raise NotFoundError(table.label, id)
        if table.is_job:
            ensure_job_transition(id, current.status, changes.get("status"))
        await self._ensure_parents(table, changes)

        if table.timestamped:
            changes["updated_at"] = utcnow()
        record = await self._update(table, id, changes)
        if record is None:
            raise NotFoundError(table.label, id)
        return record

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    async def get_user(self, id: int) -> Optional[UserResponse]:
        return await self._get(USERS, id)

    async def get_user_by_username(self, username: str) -> Optional[UserResponse]:
        users = await self._find(USERS, username=username)
        return users[0] if users else None

    async def create_user(self, user: Fields) -> UserResponse:
        return await self._create(USERS, user)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------
    async def get_project(self, id: int) -> Optional[ProjectResponse]:
        return await self._get(PROJECTS, id)

    async def get_projects_by_user_id(self, user_id: int) -> List[ProjectResponse]:
        return await self._find(PROJECTS, user_id=user_id)

    async def create_project(self, project: Fields) -> ProjectResponse:
        return await self._create(PROJECTS, project)

    async def update_project(self, id: int, project: Fields) -> ProjectResponse:
        return await self._modify(PROJECTS, id, project)

    async def delete_project(self, id: int) -> bool:
        return await self._delete(PROJECTS, id)

    # ------------------------------------------------------------------
    # Tracks
    # ------------------------------------------------------------------
    async def get_track(self, id: int) -> Optional[TrackResponse]:
        return await self._get(TRACKS, id)

    async def get_tracks_by_project_id(self, project_id: int) -> List[TrackResponse]:
        return await self._find(TRACKS, project_id=project_id)

    async def create_track(self, track: Fields) -> TrackResponse:
        return await self._create(TRACKS, track)

    async def update_track(self, id: int, track: Fields) -> TrackResponse:
        return await self._modify(TRACKS, id, track)

    async def delete_track(self, id: int) -> bool:
        return await self._delete(TRACKS, id)

    # ------------------------------------------------------------------
    # Audio clips
    # ------------------------------------------------------------------
    async def get_audio_clip(self, id: int) -> Optional[AudioClipResponse]:
        return await self._get(AUDIO_CLIPS, id)

    async def get_audio_clips_by_track_id(self, track_id: int) -> List[AudioClipResponse]:
        return await self._find(AUDIO_CLIPS, track_id=track_id)

    async def create_audio_clip(self, clip: Fields) -> AudioClipResponse:
        return await self._create(AUDIO_CLIPS, clip)

    async def update_audio_clip(self, id: int, clip: Fields) -> AudioClipResponse:
        return await self._modify(AUDIO_CLIPS, id, clip)

    async def delete_audio_clip(self, id: int) -> bool:
        return await self._delete(AUDIO_CLIPS, id)

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------
    async def get_effect(self, id: int) -> Optional[EffectResponse]:
        return await self._get(EFFECTS, id)

    async def get_effects_by_track_id(self, track_id: int) -> List[EffectResponse]:
        return await self._find(EFFECTS, track_id=track_id)

    async def create_effect(self, effect: Fields) -> EffectResponse:
        return await self._create(EFFECTS, effect)

    async def update_effect(self, id: int, effect: Fields) -> EffectResponse:
        return await self._modify(EFFECTS, id, effect)

    async def delete_effect(self, id: int) -> bool:
        return await self._delete(EFFECTS, id)

    # ------------------------------------------------------------------
    # Stem separation jobs
    # ------------------------------------------------------------------
    async def get_stem_separation_job(self, id: int) -> Optional[StemSeparationJobResponse]:
        return await self._get(STEM_SEPARATION_JOBS, id)

    async def get_stem_separation_jobs_by_project_id(self, project_id: int) -> List[StemSeparationJobResponse]:
        return await self._find(STEM_SEPARATION_JOBS, project_id=project_id)

    async def create_stem_separation_job(self, job: Fields) -> StemSeparationJobResponse:
        return await self._create(STEM_SEPARATION_JOBS, job)

    async def update_stem_separation_job(self, id: int, job: Fields) -> StemSeparationJobResponse:
        return await self._modify(STEM_SEPARATION_JOBS, id, job)

    # ------------------------------------------------------------------
    # Voice cloning jobs
    # ------------------------------------------------------------------
    async def get_voice_cloning_job(self, id: int) -> Optional[VoiceCloningJobResponse]:
        return await self._get(VOICE_CLONING_JOBS, id)

    async def get_voice_cloning_jobs_by_project_id(self, project_id: int) -> List[VoiceCloningJobResponse]:
        return await self._find(VOICE_CLONING_JOBS, project_id=project_id)

    async def create_voice_cloning_job(self, job: Fields) -> VoiceCloningJobResponse:
        return await self._create(VOICE_CLONING_JOBS, job)

    async def update_voice_cloning_job(self, id: int, job: Fields) -> VoiceCloningJobResponse:
        return await self._modify(VOICE_CLONING_JOBS, id, job)

    # ------------------------------------------------------------------
    # Music generation jobs
    # ------------------------------------------------------------------
    async def get_music_generation_job(self, id: int) -> Optional[MusicGenerationJobResponse]:
        return await self._get(MUSIC_GENERATION_JOBS, id)

    async def get_music_generation_jobs_by_project_id(self, project_id: int) -> List[MusicGenerationJobResponse]:
        return await self._find(MUSIC_GENERATION_JOBS, project_id=project_id)

    async def create_music_generation_job(self, job: Fields) -> MusicGenerationJobResponse:
        return await self._create(MUSIC_GENERATION_JOBS, job)

    async def update_music_generation_job(self, id: int, job: Fields) -> MusicGenerationJobResponse:
        return await self._modify(MUSIC_GENERATION_JOBS, id, job)

    # ------------------------------------------------------------------
    # Mood tags
    # ------------------------------------------------------------------
    async def get_mood_tag(self, id: int) -> Optional[MoodTagResponse]:
        return await self._get(MOOD_TAGS, id)

    async def get_mood_tag_by_name(self, name: str) -> Optional[MoodTagResponse]:
        tags = await self._find(MOOD_TAGS, name=name)
        return tags[0] if tags else None

    async def get_all_mood_tags(self) -> List[MoodTagResponse]:
        return await self._find(MOOD_TAGS)

    async def create_mood_tag(self, mood_tag: Fields) -> MoodTagResponse:
        return await self._create(MOOD_TAGS, mood_tag)

    async def update_mood_tag(self, id: int, mood_tag: Fields) -> MoodTagResponse:
        return await self._modify(MOOD_TAGS, id, mood_tag)

    async def delete_mood_tag(self, id: int) -> bool:
        return await self._delete(MOOD_TAGS, id)

    # ------------------------------------------------------------------
    # Clip / mood tag links
    # ------------------------------------------------------------------
    async def get_audio_clip_mood_tags(self, audio_clip_id: int) -> List[AudioClipMoodTagDetail]:
        """Links of a clip, each enriched with its full mood tag"""
        return await self._find_links(audio_clip_id)

    async def add_mood_tag_to_audio_clip(self, link: Fields) -> AudioClipMoodTagResponse:
        data = AudioClipMoodTagCreate.model_validate(
            self._as_dict(link, exclude_unset=False)
        ).model_dump()
        if await self._get(AUDIO_CLIPS, data["audio_clip_id"]) is None:
            raise NotFoundError(AUDIO_CLIPS.label, data["audio_clip_id"])
        if await self._get(MOOD_TAGS, data["mood_tag_id"]) is None:
            raise NotFoundError(MOOD_TAGS.label, data["mood_tag_id"])
        return await self._insert_link(data)

    async def update_audio_clip_mood_tag_weight(
        self, audio_clip_id: int, mood_tag_id: int, weight: int
    ) -> AudioClipMoodTagResponse:
        # Range check shared with the create schema
        AudioClipMoodTagCreate(audio_clip_id=audio_clip_id, mood_tag_id=mood_tag_id, weight=weight)
        link = await self._update_link(audio_clip_id, mood_tag_id, weight)
        if link is None:
            raise NotFoundError("AudioClipMoodTag", f"({audio_clip_id}, {mood_tag_id})")
        return link

    async def remove_mood_tag_from_audio_clip(self, audio_clip_id: int, mood_tag_id: int) -> bool:
        return await self._delete_link(audio_clip_id, mood_tag_id)

    async def get_audio_clips_by_mood_tag_id(self, mood_tag_id: int) -> List[AudioClipResponse]:
        return await self._find_clips_by_mood_tag(mood_tag_id)
