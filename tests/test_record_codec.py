"""Tests for filename sanitizing, tag parsing and sidecar (de)serialization."""

from __future__ import annotations

import json

import pytest

from conftest import make_record
from src.core.errors import CorruptRecordError
from src.database.schemas.metadata import VideoRecord
from src.utils.record_codec import (
    MAX_TAGS,
    decode_record,
    encode_record,
    matches_search,
    parse_tags,
    sanitize_file_name,
)


# ---------------------------------------------------------------------------
# sanitize_file_name
# ---------------------------------------------------------------------------


def test_sanitize_file_name():
    assert sanitize_file_name("My Video!!.MP4") == "my-video.mp4"


def test_sanitize_file_name_collapses_whitespace_runs():
    assert sanitize_file_name("a  \t b.mov") == "a-b.mov"


def test_sanitize_file_name_can_become_empty():
    assert sanitize_file_name("???") == ""


# ---------------------------------------------------------------------------
# parse_tags
# ---------------------------------------------------------------------------


def test_parse_tags_from_string():
    assert parse_tags("a, b ,, c") == ["a", "b", "c"]


def test_parse_tags_from_list_trims_and_drops_empty():
    assert parse_tags([" x ", "", "  ", "y"]) == ["x", "y"]


def test_parse_tags_stringifies_values():
    assert parse_tags([1, 2.5, "three"]) == ["1", "2.5", "three"]


def test_parse_tags_truncates_to_limit():
    tags = [f"tag{i}" for i in range(25)]
    result = parse_tags(tags)
    assert len(result) == MAX_TAGS == 20
    assert result == tags[:20]


def test_parse_tags_keeps_duplicates_in_order():
    assert parse_tags("b,a,b") == ["b", "a", "b"]


@pytest.mark.parametrize("value", [None, "", []])
def test_parse_tags_empty_input(value):
    assert parse_tags(value) == []


# ---------------------------------------------------------------------------
# encode / decode
# ---------------------------------------------------------------------------


def test_encode_uses_camel_case_keys():
    record = make_record()
    document = json.loads(encode_record(record))

    assert document["fileName"] == "holiday.mp4"
    assert document["metadataPath"] == f"videos/meta/{record.id}.json"
    assert "createdAt" in document and "updatedAt" in document
    assert "metadataUrl" not in document


def test_encode_drops_view_only_metadata_url():
    record = VideoRecord.from_persisted(make_record(), "https://videos.test/meta.json")
    document = json.loads(encode_record(record))
    assert "metadataUrl" not in document
    assert "metadata_url" not in document


def test_encode_then_decode_preserves_record():
    record = make_record(tags=["a", "b"])
    assert decode_record(encode_record(record)) == record


def test_decode_invalid_json_is_corrupt():
    with pytest.raises(CorruptRecordError):
        decode_record(b"{not json")


def test_decode_wrong_shape_is_corrupt():
    with pytest.raises(CorruptRecordError):
        decode_record(json.dumps({"id": "abc"}))


def test_decode_rejects_more_than_twenty_tags():
    document = json.loads(encode_record(make_record()))
    document["tags"] = [str(i) for i in range(21)]
    with pytest.raises(CorruptRecordError):
        decode_record(json.dumps(document))


# ---------------------------------------------------------------------------
# matches_search
# ---------------------------------------------------------------------------


def test_matches_search_on_title_description_and_tags():
    record = make_record(title="Holiday", description="Beach trip", tags=["Summer"])
    assert matches_search(record, "holi")
    assert matches_search(record, "BEACH")
    assert matches_search(record, "summer")
    assert not matches_search(record, "winter")


def test_blank_search_matches_everything():
    record = make_record()
    assert matches_search(record, None)
    assert matches_search(record, "   ")
