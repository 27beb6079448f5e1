"""
Tests for sighting models and transcript drafts
"""

from datetime import datetime, timedelta, timezone

import pydantic
import pytest

from roadkill.sighting import (
    SightingDraft,
    SightingRecord,
    SightingStatus,
    coerce_timestamp,
    draft_from_transcript,
)


class TestCoerceTimestamp:

    def test_naive_datetime_is_utc(self):
        dt = coerce_timestamp(datetime(2024, 5, 1, 8, 30))
        assert dt == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)

    def test_aware_datetime_converted_to_utc(self):
        eastern = timezone(timedelta(hours=-5))
        dt = coerce_timestamp(datetime(2024, 5, 1, 3, 30, tzinfo=eastern))
        assert dt == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
        assert dt.utcoffset() == timedelta(0)

    def test_iso_string_with_z(self):
        assert coerce_timestamp("2024-05-01T08:30:00.250Z") == datetime(
            2024, 5, 1, 8, 30, 0, 250000, tzinfo=timezone.utc
        )

    def test_unix_seconds(self):
        assert coerce_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", True, object()])
    def test_unparseable(self, value):
        assert coerce_timestamp(value) is None


class TestSightingRecord:

    def test_requires_animal(self):
        with pytest.raises(pydantic.ValidationError):
            SightingRecord(id="a1", animal="", timestamp="2024-05-01T00:00:00Z")

    def test_rejects_bad_timestamp(self):
        with pytest.raises(pydantic.ValidationError):
            SightingRecord(id="a1", animal="deer", timestamp="yesterday")

    def test_is_immutable(self):
        record = SightingRecord(id="a1", animal="deer", timestamp="2024-05-01T00:00:00Z")
        with pytest.raises(pydantic.ValidationError):
            record.animal = "elk"

    def test_defaults(self):
        record = SightingRecord(id="a1", animal="deer", timestamp="2024-05-01T00:00:00Z")
        assert record.status == SightingStatus.LIVE
        assert (record.latitude, record.longitude) == (0.0, 0.0)
        assert record.address is None
        assert record.notes is None


class TestDraftFromTranscript:

    def test_classifies_status_and_cleans_name(self):
        draft = draft_from_transcript("dead raccoon", latitude=40.7, longitude=-74.0)
        assert draft.status == SightingStatus.DEAD
        assert draft.animal == "raccoon"
        assert draft.latitude == 40.7
        assert draft.longitude == -74.0

    def test_keeps_original_text_when_cleanup_empties_it(self):
        draft = draft_from_transcript("  Roadkill ")
        assert draft.status == SightingStatus.DEAD
        assert draft.animal == "Roadkill"

    def test_blank_notes_and_address_become_none(self):
        draft = draft_from_transcript("hawk", address="", notes="   ")
        assert draft.address is None
        assert draft.notes is None

    def test_timestamp_left_for_repository(self):
        assert draft_from_transcript("hawk").timestamp is None

    def test_draft_parses_timestamp_strings(self):
        draft = SightingDraft(animal="owl", timestamp="2024-05-01T08:30:00Z")
        assert draft.timestamp == datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)
