"""Initial AudioStudio schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(JSONB(), 'postgresql')


def _id_column() -> sa.Column:
    return sa.Column('id', sa.Integer, primary_key=True, autoincrement=True)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.TIMESTAMP, nullable=False, server_default=sa.func.now())


def _project_fk() -> sa.Column:
    return sa.Column(
        'project_id', sa.Integer,
        sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False
    )


def _job_columns() -> list:
    return [
        _id_column(),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('error', sa.Text, nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        _project_fk(),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        _id_column(),
        sa.Column('username', sa.String(255), nullable=False, unique=True),
        sa.Column('password', sa.Text, nullable=False),
        _timestamp('created_at'),
        sqlite_autoincrement=True
    )

    op.create_table(
        'projects',
        _id_column(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('user_id', sa.Integer, nullable=False),
        sa.Column('bpm', sa.Integer, nullable=False, server_default='120'),
        sa.Column('time_signature', sa.String(10), nullable=False, server_default='4/4'),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_projects_user_id', 'projects', ['user_id'])

    op.create_table(
        'tracks',
        _id_column(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        _project_fk(),
        sa.Column('color', sa.String(32), nullable=False),
        sa.Column('muted', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('solo', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('volume', sa.Integer, nullable=False, server_default='75'),
        _timestamp('created_at'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_tracks_project', 'tracks', ['project_id'])

    op.create_table(
        'audio_clips',
        _id_column(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('track_id', sa.Integer, sa.ForeignKey('tracks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('path', sa.Text, nullable=False),
        sa.Column('start_time', sa.Integer, nullable=False),
        sa.Column('duration', sa.Integer, nullable=False),
        sa.Column('is_ai_generated', sa.Boolean, nullable=False, server_default=sa.false()),
        _timestamp('created_at'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_audio_clips_track', 'audio_clips', ['track_id'])

    op.create_table(
        'effects',
        _id_column(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(64), nullable=False),
        sa.Column('track_id', sa.Integer, sa.ForeignKey('tracks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('settings', JSONType, nullable=False),
        sa.Column('enabled', sa.Boolean, nullable=False, server_default=sa.true()),
        _timestamp('created_at'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_effects_track', 'effects', ['track_id'])

    op.create_table(
        'mood_tags',
        _id_column(),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('color', sa.String(32), nullable=False),
        sqlite_autoincrement=True
    )

    op.create_table(
        'audio_clip_mood_tags',
        sa.Column(
            'audio_clip_id', sa.Integer,
            sa.ForeignKey('audio_clips.id', ondelete='CASCADE'), primary_key=True
        ),
        sa.Column(
            'mood_tag_id', sa.Integer,
            sa.ForeignKey('mood_tags.id', ondelete='CASCADE'), primary_key=True
        ),
        sa.Column('weight', sa.Integer, nullable=False, server_default='5')
    )
    op.create_index('ix_audio_clip_mood_tags_tag', 'audio_clip_mood_tags', ['mood_tag_id'])

    op.create_table(
        'stem_separation_jobs',
        *_job_columns(),
        sa.Column('original_path', sa.Text, nullable=False),
        sa.Column('output_paths', JSONType, nullable=True),
        sqlite_autoincrement=True
    )
    op.create_index('ix_stem_separation_jobs_project', 'stem_separation_jobs', ['project_id'])

    op.create_table(
        'voice_cloning_jobs',
        *_job_columns(),
        sa.Column('sample_path', sa.Text, nullable=False),
        sa.Column('text', sa.Text, nullable=False),
        sa.Column('output_path', sa.Text, nullable=True),
        sqlite_autoincrement=True
    )
    op.create_index('ix_voice_cloning_jobs_project', 'voice_cloning_jobs', ['project_id'])

    op.create_table(
        'music_generation_jobs',
        *_job_columns(),
        sa.Column('prompt', sa.Text, nullable=False),
        sa.Column('output_path', sa.Text, nullable=True),
        sqlite_autoincrement=True
    )
    op.create_index('ix_music_generation_jobs_project', 'music_generation_jobs', ['project_id'])


def downgrade() -> None:
    op.drop_table('music_generation_jobs')
    op.drop_table('voice_cloning_jobs')
    op.drop_table('stem_separation_jobs')
    op.drop_table('audio_clip_mood_tags')
    op.drop_table('mood_tags')
    op.drop_table('effects')
    op.drop_table('audio_clips')
    op.drop_table('tracks')
    op.drop_table('projects')
    op.drop_table('users')
