# src/calendar/consolidation.py — v1
"""Topic consolidation engine — pure functions, no I/O.

Raw per-day calendar rows referring to the same topic (same section code,
or same base title once multi-day suffixes are stripped) are grouped.
Singleton groups pass through unchanged; larger groups become
"<title> - Part k" entries ordered by date. The set of keys already in
the topic catalog is passed in explicitly; matching entries are skipped.
"""

from __future__ import annotations

import re
from datetime import date

from examingest.core.models import CalendarEvent, ConsolidatedTopic, RawCalendarEntry, Topic

_SECTION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*:")
_SUFFIX_RES = (
    re.compile(r"\s+(?:I{1,3}|IV|VI{0,3})\s*$", re.IGNORECASE),
    re.compile(r"\s+part\s*\d+\s*$", re.IGNORECASE),
    re.compile(r"\s+day\s*\d+\s*$", re.IGNORECASE),
    re.compile(r"\s*\(continued\)\s*$", re.IGNORECASE),
    re.compile(r"\s*\(cont\.?\)\s*$", re.IGNORECASE),
)
_TRAILING_SEPARATORS = " -–—:,"


def extract_section(title: str) -> str | None:
    """Section code of a "13.1: Vectors" style title."""
    match = _SECTION_RE.match(title.strip())
    return match.group(1) if match else None


def extract_base_title(title: str) -> str:
    """Title without multi-day/part suffixes (roman numerals, Part N, Day N, continued)."""
    base = title.strip()
    changed = True
    while changed:
        changed = False
        for suffix_re in _SUFFIX_RES:
            stripped = suffix_re.sub("", base).rstrip(_TRAILING_SEPARATORS)
            if stripped and stripped != base:
                base = stripped
                changed = True
    return base


def grouping_key(title: str) -> str:
    """Section code when present, else the lower-cased base title."""
    return extract_section(title) or extract_base_title(title).lower()


def build_existing_keys(titles: list[str]) -> set[str]:
    """Dedup keys (section codes and lower-cased base titles) of catalog titles."""
    keys: set[str] = set()
    for title in titles:
        keys.add(extract_base_title(title).lower())
        section = extract_section(title)
        if section:
            keys.add(section)
    return keys


def is_known(title: str, existing_keys: set[str]) -> bool:
    """True when a topic title already exists in the catalog."""
    section = extract_section(title)
    if section:
        return section in existing_keys
    return extract_base_title(title).lower() in existing_keys


def _date_sort_key(entry: RawCalendarEntry) -> tuple[bool, date]:
    return (entry.event_date is None, entry.event_date or date.max)


def _to_consolidated(entry: RawCalendarEntry, title: str, part: int | None = None) -> ConsolidatedTopic:
    return ConsolidatedTopic(
        title=title,
        kind=entry.kind,
        section=extract_section(entry.title) if entry.kind == "topic" else None,
        group_key=grouping_key(entry.title) if entry.kind == "topic" else None,
        part_number=part,
        dates=[entry.event_date] if entry.event_date else [],
        scheduled_week=entry.week_number,
        day_of_week=entry.day_of_week,
        description=entry.description,
    )


def consolidate(
    raw_entries: list[RawCalendarEntry],
    existing_keys: set[str] | None = None,
) -> list[ConsolidatedTopic]:
    """Group raw calendar rows into logical topics.

    Topic groups are emitted in order of first appearance, followed by
    exam/quiz entries unchanged.
    """
    known = existing_keys or set()
    groups: dict[str, list[RawCalendarEntry]] = {}
    others: list[RawCalendarEntry] = []

    for entry in raw_entries:
        if entry.kind != "topic":
            others.append(entry)
            continue
        title = entry.title.strip()
        if known and is_known(title, known):
            continue
        groups.setdefault(grouping_key(title), []).append(entry)

    result: list[ConsolidatedTopic] = []
    for members in groups.values():
        if len(members) == 1:
            result.append(_to_consolidated(members[0], members[0].title.strip()))
            continue
        # sorted() is stable, so dateless entries keep document order at the end
        for k, entry in enumerate(sorted(members, key=_date_sort_key), start=1):
            result.append(_to_consolidated(entry, f"{entry.title.strip()} - Part {k}", part=k))

    result.extend(_to_consolidated(entry, entry.title.strip()) for entry in others)
    return result


def materialize_topics(
    entries: list[ConsolidatedTopic],
    course_pack_id: str,
    existing_keys: set[str] | None = None,
) -> list[Topic]:
    """New catalog topics from consolidated topic entries.

    One topic per grouping key, titled with the base title; the earliest
    occurrence by week then date wins. Keys already in the catalog are
    skipped.
    """
    known = existing_keys or set()
    topic_entries = sorted(
        (e for e in entries if e.kind == "topic"),
        key=lambda e: (
            e.scheduled_week is None,
            e.scheduled_week or 0,
            e.scheduled_date is None,
            e.scheduled_date or date.max,
        ),
    )

    created: dict[str, Topic] = {}
    for entry in topic_entries:
        base_title = extract_base_title(entry.title)
        if is_known(base_title, known):
            continue
        key = entry.group_key or grouping_key(base_title)
        if key in created:
            continue
        created[key] = Topic(
            course_pack_id=course_pack_id,
            title=base_title,
            section=entry.section,
            description=entry.description or None,
            scheduled_week=entry.scheduled_week,
            scheduled_date=entry.scheduled_date,
            midterm_coverage=entry.midterm_coverage,
        )
    return list(created.values())


def event_key(kind: str, title: str, event_date: date | None) -> tuple[str, str, date | None]:
    return (kind, title.strip().lower(), event_date)


def drop_known_events(
    entries: list[ConsolidatedTopic],
    existing: list[CalendarEvent],
) -> list[ConsolidatedTopic]:
    """Remove exam/quiz entries already stored with the same title and date."""
    known = {
        event_key(e.event_type, e.title, e.event_date)
        for e in existing
        if e.event_type != "topic"
    }
    return [
        e for e in entries
        if e.kind == "topic" or event_key(e.kind, e.title, e.scheduled_date) not in known
    ]
