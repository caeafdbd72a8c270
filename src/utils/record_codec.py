import re
from typing import Any, Iterable, List, Optional, Union

from pydantic import ValidationError

from src.core.errors import CorruptRecordError
from src.database.schemas.metadata import PersistedVideoRecord

MAX_TAGS = 20

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^a-z0-9.\-]")


def sanitize_file_name(file_name: str) -> str:
    """
    Builds the readable part of a storage key from a client filename.

    "My Video!!.MP4" -> "my-video.mp4"
    """
    name = _WHITESPACE.sub("-", file_name.lower())
    return _UNSAFE_CHARS.sub("", name)


def parse_tags(tags: Optional[Union[str, Iterable[Any]]]) -> List[str]:
    """
    Normalizes tag input into the canonical list form.

    Accepts either a comma-separated string or a sequence of values.
    Elements are trimmed, empty ones dropped, and only the first
    MAX_TAGS are kept.
    """
    if not tags:
        return []

    if isinstance(tags, str):
        values = tags.split(",")
    else:
        values = [str(tag) for tag in tags]

    cleaned = [value.strip() for value in values]
    return [tag for tag in cleaned if tag][:MAX_TAGS]


def encode_record(record: PersistedVideoRecord) -> bytes:
    # view-only fields such as metadataUrl never reach the store
    persisted = PersistedVideoRecord(**record.model_dump(include=set(PersistedVideoRecord.model_fields)))
    return persisted.model_dump_json(by_alias=True).encode("utf-8")


def decode_record(data: Union[bytes, str]) -> PersistedVideoRecord:
    try:
        return PersistedVideoRecord.model_validate_json(data)
    except ValidationError as e:
        raise CorruptRecordError(f"Invalid video metadata document: {e}") from e


def matches_search(record: PersistedVideoRecord, term: Optional[str]) -> bool:
    """Case-insensitive match of a search term against title, description and tags."""
    if not term or not term.strip():
        return True

    needle = term.strip().lower()
    return (
        needle in record.title.lower()
        or needle in record.description.lower()
        or any(needle in tag.lower() for tag in record.tags)
    )
