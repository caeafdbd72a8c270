"""Shared fixtures: an in-memory object store and record factories.

The fake store mirrors the ObjectStore surface (put/list/delete/fetch) so
the video store and the API can be exercised without S3.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.core.errors import StorageUnavailableError
from src.database.schemas.metadata import PersistedVideoRecord
from src.services.video_store import VideoStore, metadata_path_for, storage_path_for
from src.storage.object_store import StoredObject
from src.utils.record_codec import encode_record

BASE_URL = "https://videos.test"


class FakeObjectStore:
    """In-memory stand-in for ObjectStore that records every call."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.put_calls: list[str] = []
        self.delete_calls: list[list[str]] = []
        self.fail_put_on: set[str] = set()
        self.fail_fetch_on: set[str] = set()
        self.closed = False

    def url_for(self, key: str) -> str:
        return f"{BASE_URL}/{key}"

    def put(self, key, body, content_type, access="public"):
        self.put_calls.append(key)
        if any(key.startswith(prefix) for prefix in self.fail_put_on):
            raise StorageUnavailableError(f"put failed for {key}")
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.objects[key] = body
        self.content_types[key] = content_type
        return StoredObject(key=key, url=self.url_for(key))

    def list(self, prefix):
        return [
            StoredObject(key=key, url=self.url_for(key))
            for key in self.objects
            if key.startswith(prefix)
        ]

    def delete(self, keys):
        keys = list(keys)
        self.delete_calls.append(keys)
        for key in keys:
            self.objects.pop(key, None)

    def fetch(self, url):
        key = url[len(BASE_URL) + 1:]
        if key in self.fail_fetch_on or key not in self.objects:
            raise StorageUnavailableError(f"Failed to fetch {url} (404)")
        return self.objects[key]

    def close(self):
        self.closed = True


def make_record(
    video_id: str = "3f2b8c1e-0000-4000-8000-000000000001",
    *,
    title: str = "Holiday",
    description: str = "Beach trip",
    tags: list[str] | None = None,
    file_name: str = "holiday.mp4",
    size: int = 1024,
    updated_at: datetime | None = None,
) -> PersistedVideoRecord:
    created = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    storage_path = storage_path_for(video_id, file_name)
    return PersistedVideoRecord(
        id=video_id,
        title=title,
        description=description,
        tags=tags if tags is not None else ["beach", "summer"],
        file_name=file_name,
        file_url=f"{BASE_URL}/{storage_path}",
        content_type="video/mp4",
        size=size,
        created_at=created,
        updated_at=updated_at or created,
        storage_path=storage_path,
        metadata_path=metadata_path_for(video_id),
    )


def seed(fake: FakeObjectStore, record: PersistedVideoRecord, with_file: bool = True):
    """Write a record's objects straight into the fake store."""
    if with_file:
        fake.objects[record.storage_path] = b"\x00" * record.size
    fake.objects[record.metadata_path] = encode_record(record)


@pytest.fixture
def fake_store():
    return FakeObjectStore()


@pytest.fixture
def video_store(fake_store):
    return VideoStore(fake_store)
