from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional, Union
from datetime import datetime, timezone
from dataclasses import dataclass

DEFAULT_CONTENT_TYPE = "video/mp4"


def utc_now() -> datetime:
    # ISO timestamps are kept at millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


class PersistedVideoRecord(BaseModel):
    """JSON sidecar stored next to each uploaded video."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str = ""
    tags: List[str] = Field(default_factory=list, max_length=20)
    file_name: str
    file_url: str
    content_type: str = DEFAULT_CONTENT_TYPE
    size: int = Field(..., ge=0)  # bytes
    created_at: datetime
    updated_at: datetime
    storage_path: str
    metadata_path: str

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class VideoRecord(PersistedVideoRecord):
    """Persisted record plus the resolved sidecar URL, as returned to callers."""

    metadata_url: Optional[str] = None

    @classmethod
    def from_persisted(cls, record: PersistedVideoRecord, metadata_url: str) -> "VideoRecord":
        return cls(**record.model_dump(), metadata_url=metadata_url)

    def to_persisted(self) -> PersistedVideoRecord:
        return PersistedVideoRecord(**self.model_dump(exclude={"metadata_url"}))


class UpdateVideoPayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[Union[List[Any], str]] = None


class LibraryStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    count: int
    total_size: int


@dataclass
class VideoUpload:
    """An uploaded binary, independent of the web framework that received it."""

    file_name: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)
