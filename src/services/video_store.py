"""
Video library persistence on top of the object store.

Every video is a pair of objects addressed by a generated id:

    videos/files/{id}-{sanitized filename}   the uploaded binary
    videos/meta/{id}.json                    the JSON metadata sidecar

A video exists only as long as its sidecar exists. The binary is written
first, so a failed sidecar write leaves an orphaned file behind;
find_orphaned_files() reports those.
"""

import logging
import re
from typing import List, Optional, Tuple
from uuid import uuid4

from src.core.errors import InvalidInputError, VideoNotFoundError
from src.database.schemas.metadata import (
    DEFAULT_CONTENT_TYPE,
    LibraryStats,
    PersistedVideoRecord,
    UpdateVideoPayload,
    VideoRecord,
    VideoUpload,
    utc_now,
)
from src.storage.object_store import ObjectStore, PUBLIC_ACCESS, StoredObject
from src.utils.record_codec import (
    decode_record,
    encode_record,
    matches_search,
    parse_tags,
    sanitize_file_name,
)

logger = logging.getLogger(__name__)

VIDEO_FILE_PREFIX = "videos/files/"
VIDEO_METADATA_PREFIX = "videos/meta/"
METADATA_CONTENT_TYPE = "application/json"

_FILE_KEY_ID = re.compile(
    r"^" + re.escape(VIDEO_FILE_PREFIX) + r"([0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})-"
)


def metadata_path_for(video_id: str) -> str:
    return f"{VIDEO_METADATA_PREFIX}{video_id}.json"


def storage_path_for(video_id: str, file_name: str) -> str:
    cleaned_name = sanitize_file_name(file_name) or f"{video_id}.mp4"
    return f"{VIDEO_FILE_PREFIX}{video_id}-{cleaned_name}"


class VideoStore:
    def __init__(self, object_store: ObjectStore):
        self.object_store = object_store

    def create(
        self,
        upload: Optional[VideoUpload],
        title: Optional[str] = None,
        description: Optional[str] = None,
        tags=None,
    ) -> VideoRecord:
        if upload is None or upload.size == 0:
            raise InvalidInputError("A non-empty video file is required.")

        video_id = str(uuid4())
        storage_path = storage_path_for(video_id, upload.file_name)
        content_type = upload.content_type or DEFAULT_CONTENT_TYPE
        now = utc_now()

        file_object = self.object_store.put(
            storage_path,
            upload.content,
            content_type=content_type,
            access=PUBLIC_ACCESS,
        )

        record = PersistedVideoRecord(
            id=video_id,
            title=(title or "").strip() or upload.file_name,
            description=(description or "").strip(),
            tags=parse_tags(tags),
            file_name=upload.file_name,
            file_url=file_object.url,
            content_type=content_type,
            size=upload.size,
            created_at=now,
            updated_at=now,
            storage_path=storage_path,
            metadata_path=metadata_path_for(video_id),
        )

        # no rollback: if this write fails the binary stays behind as an orphan
        metadata_object = self._write_metadata(record)

        logger.info("Created video %s (%s, %d bytes)", video_id, storage_path, upload.size)
        return VideoRecord.from_persisted(record, metadata_object.url)

    def list(self, search: Optional[str] = None) -> List[VideoRecord]:
        metadata_objects = self.object_store.list(VIDEO_METADATA_PREFIX)

        records = [self._read_metadata(obj) for obj in metadata_objects]
        records.sort(key=lambda record: record.updated_at, reverse=True)

        if search:
            records = [record for record in records if matches_search(record, search)]
        return records

    def lookup(self, video_id: str) -> Tuple[PersistedVideoRecord, StoredObject]:
        metadata_path = metadata_path_for(video_id)
        candidates = self.object_store.list(metadata_path)
        metadata_object = next((obj for obj in candidates if obj.key == metadata_path), None)
        if metadata_object is None:
            raise VideoNotFoundError(video_id)

        record = decode_record(self.object_store.fetch(metadata_object.url))
        return record, metadata_object

    def get(self, video_id: str) -> VideoRecord:
        record, metadata_object = self.lookup(video_id)
        return VideoRecord.from_persisted(record, metadata_object.url)

    def update(self, video_id: str, payload: UpdateVideoPayload) -> VideoRecord:
        record, metadata_object = self.lookup(video_id)

        changes = {"updated_at": utc_now()}
        title = (payload.title or "").strip()
        if title:
            changes["title"] = title
        if payload.description is not None:
            changes["description"] = payload.description.strip()
        if payload.tags is not None:
            changes["tags"] = parse_tags(payload.tags)

        updated = record.model_copy(update=changes)
        self._write_metadata(updated)

        logger.info("Updated video %s (%s)", video_id, ", ".join(sorted(changes)))
        return VideoRecord.from_persisted(updated, metadata_object.url)

    def delete(self, video_id: str):
        record, metadata_object = self.lookup(video_id)
        self.object_store.delete([record.storage_path, metadata_object.key])
        logger.info("Deleted video %s", video_id)

    def stats(self) -> LibraryStats:
        records = self.list()
        return LibraryStats(count=len(records), total_size=sum(record.size for record in records))

    def find_orphaned_files(self) -> List[StoredObject]:
        """File objects whose metadata sidecar no longer exists."""
        # files first: an upload finishing between the two listings must not look orphaned
        file_objects = self.object_store.list(VIDEO_FILE_PREFIX)
        known_ids = {
            obj.key[len(VIDEO_METADATA_PREFIX):-len(".json")]
            for obj in self.object_store.list(VIDEO_METADATA_PREFIX)
            if obj.key.endswith(".json")
        }

        orphans = []
        for obj in file_objects:
            match = _FILE_KEY_ID.match(obj.key)
            if match and match.group(1) not in known_ids:
                orphans.append(obj)
        return orphans

    def _write_metadata(self, record: PersistedVideoRecord) -> StoredObject:
        return self.object_store.put(
            record.metadata_path,
            encode_record(record),
            content_type=METADATA_CONTENT_TYPE,
            access=PUBLIC_ACCESS,
        )

    def _read_metadata(self, metadata_object: StoredObject) -> VideoRecord:
        record = decode_record(self.object_store.fetch(metadata_object.url))
        return VideoRecord.from_persisted(record, metadata_object.url)
