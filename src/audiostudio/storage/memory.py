"""
In-memory entity store (process lifetime, not persistent)
"""

import copy
import itertools
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from ..core.errors import ConflictError
from ..database.schemas import (
    AudioClipMoodTagResponse,
    AudioClipMoodTagDetail,
    AudioClipResponse,
)
from .base import (
    AUDIO_CLIPS,
    CASCADES,
    MOOD_TAG_LINKS,
    MOOD_TAGS,
    TABLES,
    EntityTable,
    StorageInterface,
)

LinkKey = Tuple[int, int]


class MemoryStorage(StorageInterface):
    """
    Dict-backed store.

    No primitive awaits between reading and writing its tables, so each one
    runs as a single step on the event loop: ids from the per-table counters
    are never handed out twice and merges never interleave.
    """

    backend = "memory"

    def __init__(self):
        self._tables: Dict[str, Dict[int, Dict[str, Any]]] = {name: {} for name in TABLES}
        self._ids = {name: itertools.count(1) for name in TABLES}
        self._links: Dict[LinkKey, Dict[str, Any]] = {}

    def _record(self, table: EntityTable, row: Dict[str, Any]) -> BaseModel:
        return table.record.model_validate(copy.deepcopy(row))

    def _check_unique(self, table: EntityTable, data: Dict[str, Any], id: Optional[int] = None) -> None:
        for field in table.unique:
            if field not in data:
                continue
            for row_id, row in self._tables[table.name].items():
                if row_id != id and row[field] == data[field]:
                    raise ConflictError(
                        f"{table.label} with {field} '{data[field]}' already exists"
                    )

    async def _get(self, table: EntityTable, id: int) -> Optional[BaseModel]:
        row = self._tables[table.name].get(id)
        return self._record(table, row) if row is not None else None

    async def _find(self, table: EntityTable, **filters: Any) -> List[BaseModel]:
        rows = self._tables[table.name]
        return [
            self._record(table, row)
            for _, row in sorted(rows.items())
            if all(row.get(field) == value for field, value in filters.items())
        ]

    async def _insert(self, table: EntityTable, data: Dict[str, Any]) -> BaseModel:
        self._check_unique(table, data)
        row = copy.deepcopy(data)
        row["id"] = next(self._ids[table.name])
        self._tables[table.name][row["id"]] = row
        return self._record(table, row)

    async def _update(self, table: EntityTable, id: int, fields: Dict[str, Any]) -> Optional[BaseModel]:
        row = self._tables[table.name].get(id)
        if row is None:
            return None
        self._check_unique(table, fields, id)
        row.update(copy.deepcopy(fields))
        return self._record(table, row)

    async def _delete(self, table: EntityTable, id: int) -> bool:
        if self._tables[table.name].pop(id, None) is None:
            return False
        self._cascade(table.name, id)
        return True

    def _cascade(self, parent: str, parent_id: int) -> None:
        for child, foreign_key in CASCADES.get(parent, []):
            if child == MOOD_TAG_LINKS:
                for key in [k for k, link in self._links.items() if link[foreign_key] == parent_id]:
                    del self._links[key]
                continue
            rows = self._tables[child]
            for child_id in [i for i, row in rows.items() if row[foreign_key] == parent_id]:
                del rows[child_id]
                self._cascade(child, child_id)

    # Clip / mood tag links

    async def _insert_link(self, data: Dict[str, Any]) -> AudioClipMoodTagResponse:
        key = (data["audio_clip_id"], data["mood_tag_id"])
        if key in self._links:
            raise ConflictError(
                f"Mood tag {key[1]} is already attached to audio clip {key[0]}"
            )
        self._links[key] = dict(data)
        return AudioClipMoodTagResponse.model_validate(dict(data))

    async def _find_links(self, audio_clip_id: int) -> List[AudioClipMoodTagDetail]:
        details = []
        for (clip_id, tag_id), link in sorted(self._links.items()):
            if clip_id != audio_clip_id:
                continue
            tag = self._tables[MOOD_TAGS.name][tag_id]
            details.append(AudioClipMoodTagDetail.model_validate(
                {**link, "mood_tag": copy.deepcopy(tag)}
            ))
        return details

    async def _update_link(
        self, audio_clip_id: int, mood_tag_id: int, weight: int
    ) -> Optional[AudioClipMoodTagResponse]:
        link = self._links.get((audio_clip_id, mood_tag_id))
        if link is None:
            return None
        link["weight"] = weight
        return AudioClipMoodTagResponse.model_validate(dict(link))

    async def _delete_link(self, audio_clip_id: int, mood_tag_id: int) -> bool:
        return self._links.pop((audio_clip_id, mood_tag_id), None) is not None

    async def _find_clips_by_mood_tag(self, mood_tag_id: int) -> List[AudioClipResponse]:
        clips = self._tables[AUDIO_CLIPS.name]
        clip_ids = sorted(clip_id for clip_id, tag_id in self._links if tag_id == mood_tag_id)
        return [self._record(AUDIO_CLIPS, clips[clip_id]) for clip_id in clip_ids if clip_id in clips]
