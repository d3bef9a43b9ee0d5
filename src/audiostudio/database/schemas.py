"""
AudioStudio Pydantic Schemas
Request/response models for API validation and serialization

Response schemas double as the entity store's record types: both backends
return them, and FastAPI serializes them with camelCase aliases.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Literal, Union
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from ..core.job_status import JobStatus


# Base configuration for all schemas
class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        use_enum_values=True,
        validate_assignment=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class TrackType(str, Enum):
    VOCALS = "vocals"
    DRUMS = "drums"
    BASS = "bass"
    SYNTH = "synth"
    AI_GENERATED = "ai-generated"
    OTHER = "other"


# User Schemas
class UserCreate(BaseSchema):
    """Schema for creating a user"""
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class UserUpdate(BaseSchema):
    username: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=1)


class UserResponse(UserCreate):
    """Schema for user records"""
    id: int
    created_at: datetime


# Project Schemas
class ProjectBase(BaseSchema):
    """Base project fields"""
    name: str = Field(..., min_length=1, max_length=255, description="Project name")
    bpm: int = Field(default=120, ge=1, le=999, description="Tempo in BPM")
    time_signature: str = Field(default="4/4", pattern=r"^\d+/\d+$", description="Time signature")


class ProjectCreate(ProjectBase):
    """Schema for creating a project"""
    user_id: int = Field(..., description="ID of the owning user")


class ProjectUpdate(BaseSchema):
    """Schema for updating a project"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    user_id: Optional[int] = None
    bpm: Optional[int] = Field(None, ge=1, le=999)
    time_signature: Optional[str] = Field(None, pattern=r"^\d+/\d+$")


class ProjectResponse(ProjectCreate):
    """Schema for project responses"""
    id: int
    created_at: datetime
    updated_at: datetime


# Track Schemas
class TrackBase(BaseSchema):
    """Base track fields"""
    name: str = Field(..., min_length=1, max_length=255, description="Track name")
    type: TrackType = Field(..., description="Track kind")
    color: str = Field(..., min_length=1, max_length=32, description="Display color")
    muted: bool = Field(default=False, description="Track mute state")
    solo: bool = Field(default=False, description="Track solo state")
    volume: int = Field(default=75, ge=0, le=100, description="Track volume (0-100)")


class TrackCreate(TrackBase):
    """Schema for creating a track"""
    project_id: int = Field(..., description="ID of the parent project")


class TrackUpdate(BaseSchema):
    """Schema for updating a track"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[TrackType] = None
    project_id: Optional[int] = None
    color: Optional[str] = Field(None, min_length=1, max_length=32)
    muted: Optional[bool] = None
    solo: Optional[bool] = None
    volume: Optional[int] = Field(None, ge=0, le=100)


class TrackResponse(TrackCreate):
    """Schema for track responses"""
    id: int
    created_at: datetime


# Audio Clip Schemas
class AudioClipBase(BaseSchema):
    """Base clip fields (times in milliseconds)"""
    name: str = Field(..., min_length=1, max_length=255, description="Clip name")
    path: str = Field(..., min_length=1, description="Path or URL of the audio file")
    start_time: int = Field(..., ge=0, description="Start time on timeline in ms")
    duration: int = Field(..., gt=0, description="Clip duration in ms")
    is_ai_generated: bool = Field(
        default=False,
        alias="isAIGenerated",
        description="Whether the clip came from an AI job"
    )


class AudioClipCreate(AudioClipBase):
    """Schema for creating a clip"""
    track_id: int = Field(..., description="ID of the parent track")


class AudioClipUpdate(BaseSchema):
    """Schema for updating a clip"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    track_id: Optional[int] = None
    path: Optional[str] = Field(None, min_length=1)
    start_time: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, gt=0)
    is_ai_generated: Optional[bool] = Field(None, alias="isAIGenerated")


class AudioClipResponse(AudioClipCreate):
    """Schema for clip responses"""
    id: int
    created_at: datetime


# Effect settings, keyed by effect type
class EQBand(BaseSchema):
    frequency: float = Field(..., gt=0, description="Band center frequency in Hz")
    gain: float = Field(..., ge=-48, le=48, description="Band gain in dB")


class EQSettings(BaseSchema):
    bands: List[EQBand] = Field(default_factory=list)


class ReverbSettings(BaseSchema):
    room_size: float = Field(..., ge=0, le=100)
    dampening: float = Field(..., ge=0, le=100)
    width: float = Field(..., ge=0, le=100)
    wet_dry: float = Field(..., ge=0, le=100)
    preset: Optional[str] = None


class CompressorSettings(BaseSchema):
    threshold: float = Field(..., le=0, description="Threshold in dBFS")
    ratio: float = Field(..., ge=1)
    attack: float = Field(..., ge=0, description="Attack in seconds")
    release: float = Field(..., ge=0, description="Release in seconds")
    knee: float = Field(default=0, ge=0)
    makeup_gain: float = Field(default=0)


class GenericEffectSettings(BaseSchema):
    """Settings for effect types without a dedicated schema"""
    model_config = ConfigDict(extra="allow")


EffectSettings = Union[EQSettings, ReverbSettings, CompressorSettings, GenericEffectSettings]

EFFECT_SETTINGS_SCHEMAS: Dict[str, type] = {
    "eq": EQSettings,
    "reverb": ReverbSettings,
    "compressor": CompressorSettings,
}


def parse_effect_settings(effect_type: str, settings: Any) -> EffectSettings:
    """Validate an effect settings document against the schema for its type"""
    schema = EFFECT_SETTINGS_SCHEMAS.get((effect_type or "").lower(), GenericEffectSettings)
    if isinstance(settings, BaseModel):
        settings = settings.model_dump(by_alias=True)
    return schema.model_validate(settings)


def normalize_effect_settings(effect_type: str, settings: Any) -> Dict[str, Any]:
    """Validate settings and return the camelCase document that gets stored"""
    return parse_effect_settings(effect_type, settings).model_dump(by_alias=True, exclude_none=True)


# Effect Schemas
class EffectBase(BaseSchema):
    """Base effect fields"""
    name: str = Field(..., min_length=1, max_length=255, description="Effect name")
    type: str = Field(..., min_length=1, max_length=64, description="Effect type (eq, reverb, compressor, ...)")
    settings: Dict[str, Any] = Field(default_factory=dict, description="Effect parameters")
    enabled: bool = Field(default=True, description="Effect enabled state")


class EffectCreate(EffectBase):
    """Schema for creating an effect; settings are stored as given"""
    track_id: int = Field(..., description="ID of the parent track")


class EffectUpdate(BaseSchema):
    """Schema for updating an effect"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=64)
    track_id: Optional[int] = None
    settings: Optional[Dict[str, Any]] = None
    enabled: Optional[bool] = None


class EffectResponse(EffectBase):
    """Schema for effect responses; settings are returned as stored"""
    id: int
    track_id: int
    created_at: datetime


# Mood Tag Schemas
class MoodTagBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    color: str = Field(..., min_length=1, max_length=32)


class MoodTagCreate(MoodTagBase):
    """Schema for creating a mood tag"""
    pass


class MoodTagUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, min_length=1, max_length=32)


class MoodTagResponse(MoodTagBase):
    id: int


class AudioClipMoodTagCreate(BaseSchema):
    """Schema for attaching a mood tag to a clip"""
    audio_clip_id: int
    mood_tag_id: int
    weight: int = Field(default=5, ge=1, le=10, description="Tag strength (1-10)")


class AudioClipMoodTagAttach(BaseSchema):
    """Request body for attaching a tag to a clip named in the URL"""
    mood_tag_id: int
    weight: int = Field(default=5, ge=1, le=10)


class AudioClipMoodTagWeight(BaseSchema):
    weight: int = Field(..., ge=1, le=10)


class AudioClipMoodTagResponse(AudioClipMoodTagCreate):
    pass


class AudioClipMoodTagDetail(AudioClipMoodTagResponse):
    """Clip/tag link enriched with the full mood tag"""
    mood_tag: MoodTagResponse


# Job Schemas
class JobResponse(BaseSchema):
    """Fields shared by all job records"""
    id: int
    project_id: int
    status: JobStatus = Field(default=JobStatus.PENDING)
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StemSeparationJobCreate(BaseSchema):
    project_id: int
    original_path: str = Field(..., min_length=1)


class StemSeparationJobUpdate(BaseSchema):
    status: Optional[JobStatus] = None
    error: Optional[str] = None
    output_paths: Optional[Dict[str, str]] = None


class StemSeparationJobResponse(JobResponse):
    original_path: str
    output_paths: Optional[Dict[str, str]] = None


class VoiceCloningJobCreate(BaseSchema):
    project_id: int
    sample_path: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class VoiceCloningJobUpdate(BaseSchema):
    status: Optional[JobStatus] = None
    error: Optional[str] = None
    output_path: Optional[str] = None


class VoiceCloningJobResponse(JobResponse):
    sample_path: str
    text: str
    output_path: Optional[str] = None


class MusicGenerationJobCreate(BaseSchema):
    project_id: int
    prompt: str = Field(..., min_length=1)


class MusicGenerationJobUpdate(BaseSchema):
    status: Optional[JobStatus] = None
    error: Optional[str] = None
    output_path: Optional[str] = None


class MusicGenerationJobResponse(JobResponse):
    prompt: str
    output_path: Optional[str] = None


class ProjectJobsResponse(BaseSchema):
    """All jobs of a project grouped by kind"""
    stem_separation: List[StemSeparationJobResponse] = Field(default_factory=list)
    voice_cloning: List[VoiceCloningJobResponse] = Field(default_factory=list)
    music_generation: List[MusicGenerationJobResponse] = Field(default_factory=list)


# Error Schemas
class ErrorResponse(BaseSchema):
    """Schema for error responses"""
    message: str = Field(..., description="Error message")


class HealthResponse(BaseSchema):
    status: Literal["healthy"] = "healthy"
    version: str
    storage_backend: str
    pending_jobs: int
