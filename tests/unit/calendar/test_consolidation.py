# tests/unit/calendar/test_consolidation.py — v1
"""Tests for calendar/consolidation.py — grouping, part labels, catalog dedup."""

from __future__ import annotations

from datetime import date

import pytest

from examingest.calendar.consolidation import (
    build_existing_keys,
    consolidate,
    drop_known_events,
    extract_base_title,
    extract_section,
    grouping_key,
    is_known,
    materialize_topics,
)
from examingest.core.models import CalendarEvent, RawCalendarEntry


def _topic(title: str, when: date | None = None, week: int | None = None) -> RawCalendarEntry:
    return RawCalendarEntry(kind="topic", title=title, event_date=when, week_number=week)


class TestTitleHelpers:
    def test_extract_section(self):
        assert extract_section("13.1: Vectors") == "13.1"
        assert extract_section("  7: Review") == "7"
        assert extract_section("Vectors in 3D") is None

    @pytest.mark.parametrize("title,expected", [
        ("Vectors II", "Vectors"),
        ("Vectors - Part 2", "Vectors"),
        ("Integration Day 3", "Integration"),
        ("Limits (continued)", "Limits"),
        ("Limits (cont.)", "Limits"),
        ("Series III (continued)", "Series"),
        ("Vectors", "Vectors"),
    ])
    def test_extract_base_title(self, title, expected):
        assert extract_base_title(title) == expected

    def test_grouping_key_prefers_section(self):
        assert grouping_key("13.1: Vectors II") == "13.1"
        assert grouping_key("Review Day 1") == "review"

    def test_build_existing_keys_and_is_known(self):
        keys = build_existing_keys(["13.1: Vectors", "Review"])
        assert "13.1" in keys
        assert "review" in keys
        assert is_known("13.1: Vectors and Planes", keys)
        assert is_known("Review II", keys)
        assert not is_known("13.2: Lines", keys)


class TestConsolidate:
    def test_singletons_pass_through(self):
        result = consolidate([_topic("13.3: Arc Length", date(2024, 1, 17), 2)])
        assert len(result) == 1
        assert result[0].title == "13.3: Arc Length"
        assert result[0].part_number is None
        assert result[0].section == "13.3"

    def test_multi_day_topic_gets_parts_in_date_order(self):
        entries = [
            _topic("13.1: Vectors", date(2024, 1, 12), 1),
            _topic("13.1: Vectors", date(2024, 1, 10), 1),
        ]
        result = consolidate(entries)
        assert [t.title for t in result] == ["13.1: Vectors - Part 1", "13.1: Vectors - Part 2"]
        assert [t.part_number for t in result] == [1, 2]
        assert result[0].scheduled_date == date(2024, 1, 10)

    def test_dateless_members_sort_last(self):
        entries = [_topic("Review"), _topic("Review II", date(2024, 3, 1))]
        result = consolidate(entries)
        assert result[0].title == "Review II - Part 1"
        assert result[1].title == "Review - Part 2"
        assert result[1].scheduled_date is None

    def test_groups_in_first_appearance_order(self):
        entries = [
            _topic("14.1: Functions"),
            _topic("13.1: Vectors"),
            _topic("14.1: Functions"),
        ]
        result = consolidate(entries)
        assert [t.group_key for t in result] == ["14.1", "14.1", "13.1"]

    def test_exam_entries_appended_unchanged(self):
        entries = [
            RawCalendarEntry(kind="exam", title="Midterm 1", week_number=5),
            _topic("13.1: Vectors"),
            RawCalendarEntry(kind="quiz", title="Quiz 1"),
        ]
        result = consolidate(entries)
        assert [t.kind for t in result] == ["topic", "exam", "quiz"]
        assert result[1].title == "Midterm 1"
        assert result[1].group_key is None

    def test_known_topics_skipped(self):
        entries = [_topic("13.1: Vectors"), _topic("13.2: Lines")]
        result = consolidate(entries, existing_keys={"13.1"})
        assert [t.title for t in result] == ["13.2: Lines"]

    def test_empty_input(self):
        assert consolidate([]) == []


class TestMaterializeTopics:
    def test_one_topic_per_group_with_base_title(self):
        entries = consolidate([
            _topic("13.1: Vectors", date(2024, 1, 10), 1),
            _topic("13.1: Vectors", date(2024, 1, 12), 1),
            RawCalendarEntry(kind="exam", title="Midterm 1", week_number=5),
        ])
        topics = materialize_topics(entries, "course-1")
        assert len(topics) == 1
        assert topics[0].title == "13.1: Vectors"
        assert topics[0].section == "13.1"
        assert topics[0].scheduled_date == date(2024, 1, 10)
        assert topics[0].course_pack_id == "course-1"

    def test_skips_catalog_keys(self):
        entries = consolidate([_topic("13.1: Vectors"), _topic("13.2: Lines")])
        topics = materialize_topics(entries, "course-1", {"13.1"})
        assert [t.title for t in topics] == ["13.2: Lines"]


class TestDropKnownEvents:
    def test_drops_stored_exam_with_same_title_and_date(self):
        entries = consolidate([
            RawCalendarEntry(kind="exam", title="Midterm 1", event_date=date(2024, 2, 8)),
            RawCalendarEntry(kind="quiz", title="Quiz 1"),
            _topic("13.1: Vectors"),
        ])
        stored = [CalendarEvent(
            course_pack_id="c", event_type="exam", title="midterm 1", event_date=date(2024, 2, 8),
        )]
        kept = drop_known_events(entries, stored)
        assert [e.title for e in kept] == ["13.1: Vectors", "Quiz 1"]

    def test_different_date_is_kept(self):
        entries = consolidate([
            RawCalendarEntry(kind="exam", title="Midterm 1", event_date=date(2024, 2, 9)),
        ])
        stored = [CalendarEvent(
            course_pack_id="c", event_type="exam", title="Midterm 1", event_date=date(2024, 2, 8),
        )]
        assert len(drop_known_events(entries, stored)) == 1
