"""
AudioStudio Database Models
SQLAlchemy ORM models for all entities in the AudioStudio application
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy import (
    JSON,
    String,
    Integer,
    Boolean,
    Text,
    TIMESTAMP,
    ForeignKey,
    Index,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Mapped, mapped_column

from .connection import Base

# JSONB on PostgreSQL, plain JSON text elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")

# AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
_AUTOINCREMENT = {"sqlite_autoincrement": True}


class User(Base):
    """Studio user; owns projects"""
    __tablename__ = "users"
    __table_args__ = _AUTOINCREMENT

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class Project(Base):
    """Audio project model - root entity for all audio work"""
    __tablename__ = "projects"
    __table_args__ = _AUTOINCREMENT

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # No FK so users never cascade into projects; the store checks the user exists
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    bpm: Mapped[int] = mapped_column(Integer, nullable=False, default=120)
    time_signature: Mapped[str] = mapped_column(String(10), nullable=False, default="4/4")

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())

    tracks: Mapped[List["Track"]] = relationship(
        "Track",
        back_populates="project",
        passive_deletes=True,
        order_by="Track.id"
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}', bpm={self.bpm})>"


class Track(Base):
    """Timeline track belonging to a project"""
    __tablename__ = "tracks"
    __table_args__ = _AUTOINCREMENT

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False
    )
    color: Mapped[str] = mapped_column(String(32), nullable=False)
    muted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    solo: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    volume: Mapped[int] = mapped_column(Integer, nullable=False, default=75)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())

    project: Mapped["Project"] = relationship("Project", back_populates="tracks")
    clips: Mapped[List["AudioClip"]] = relationship(
        "AudioClip",
        back_populates="track",
        passive_deletes=True,
        order_by="AudioClip.start_time"
    )
    effects: Mapped[List["Effect"]] = relationship(
        "Effect",
        back_populates="track",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Track(id={self.id}, name='{self.name}', type='{self.type}')>"


class AudioClip(Base):
    """Audio region placed on a track (times in milliseconds)"""
    __tablename__ = "audio_clips"
    __table_args__ = _AUTOINCREMENT

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    track_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tracks.id", ondelete="CASCADE"),
        nullable=False
    )
    path: Mapped[str] = mapped_column(Text, nullable=False)
    start_time: Mapped[int] = mapped_column(Integer, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())

    track: Mapped["Track"] = relationship("Track", back_populates="clips")
    mood_tags: Mapped[List["AudioClipMoodTag"]] = relationship(
        "AudioClipMoodTag",
        back_populates="audio_clip",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<AudioClip(id={self.id}, start={self.start_time}ms, duration={self.duration}ms)>"


class Effect(Base):
    """Effect on a track; settings are stored as an opaque JSON document"""
    __tablename__ = "effects"
    __table_args__ = _AUTOINCREMENT

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(64), nullable=False)
    track_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tracks.id", ondelete="CASCADE"),
        nullable=False
    )
    settings: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())

    track: Mapped["Track"] = relationship("Track", back_populates="effects")

    def __repr__(self) -> str:
        return f"<Effect(id={self.id}, type='{self.type}', enabled={self.enabled})>"


class MoodTag(Base):
    """Named mood label that can be attached to clips"""
    __tablename__ = "mood_tags"
    __table_args__ = _AUTOINCREMENT

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(32), nullable=False)

    def __repr__(self) -> str:
        return f"<MoodTag(id={self.id}, name='{self.name}')>"


class AudioClipMoodTag(Base):
    """Weighted link between a clip and a mood tag"""
    __tablename__ = "audio_clip_mood_tags"

    audio_clip_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("audio_clips.id", ondelete="CASCADE"),
        primary_key=True
    )
    mood_tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("mood_tags.id", ondelete="CASCADE"),
        primary_key=True
    )
    weight: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    audio_clip: Mapped["AudioClip"] = relationship("AudioClip", back_populates="mood_tags")
    mood_tag: Mapped["MoodTag"] = relationship("MoodTag")

    def __repr__(self) -> str:
        return f"<AudioClipMoodTag(clip={self.audio_clip_id}, tag={self.mood_tag_id}, weight={self.weight})>"


class _JobColumns:
    """Columns shared by the three job tables"""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP, nullable=False, server_default=func.now())


class StemSeparationJob(_JobColumns, Base):
    """Split an uploaded mix into per-instrument stems"""
    __tablename__ = "stem_separation_jobs"
    __table_args__ = _AUTOINCREMENT

    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False
    )
    original_path: Mapped[str] = mapped_column(Text, nullable=False)
    output_paths: Mapped[Optional[Dict[str, str]]] = mapped_column(JSONType, nullable=True)

    def __repr__(self) -> str:
        return f"<StemSeparationJob(id={self.id}, status='{self.status}')>"


class VoiceCloningJob(_JobColumns, Base):
    """Synthesize text in the voice of an uploaded sample"""
    __tablename__ = "voice_cloning_jobs"
    __table_args__ = _AUTOINCREMENT

    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False
    )
    sample_path: Mapped[str] = mapped_column(Text, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    output_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<VoiceCloningJob(id={self.id}, status='{self.status}')>"


class MusicGenerationJob(_JobColumns, Base):
    """Generate a music clip from a text prompt"""
    __tablename__ = "music_generation_jobs"
    __table_args__ = _AUTOINCREMENT

    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False
    )
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    output_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<MusicGenerationJob(id={self.id}, status='{self.status}')>"


# Indexes for the by-parent lookups
Index("ix_tracks_project", Track.project_id)
Index("ix_audio_clips_track", AudioClip.track_id)
Index("ix_effects_track", Effect.track_id)
Index("ix_audio_clip_mood_tags_tag", AudioClipMoodTag.mood_tag_id)
Index("ix_stem_separation_jobs_project", StemSeparationJob.project_id)
Index("ix_voice_cloning_jobs_project", VoiceCloningJob.project_id)
Index("ix_music_generation_jobs_project", MusicGenerationJob.project_id)
