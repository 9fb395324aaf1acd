# src/calendar/coverage.py — v1
"""Midterm coverage assigner — pure functions, no I/O.

Each topic maps to the first exam period (sorted ascending) whose week,
or date when weeks are unavailable, is on or after the topic's. No match
means the topic belongs to the final (``None``).
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from examingest.core.exam_metadata import midterm_number_from_title
from examingest.core.models import CalendarEvent, ConsolidatedTopic, ExamPeriod, RawCalendarEntry


class Schedulable(Protocol):
    scheduled_week: int | None

    @property
    def scheduled_date(self) -> date | None: ...


def exam_period_from_title(
    title: str, week_number: int | None, event_date: date | None
) -> ExamPeriod | None:
    """Exam period for "Midterm N" / "Exam N" / "Final" titles, else None."""
    if "final" in title.lower():
        number = None
    else:
        number = midterm_number_from_title(title)
        if number is None:
            return None
    return ExamPeriod(
        midterm_number=number,
        week_number=week_number or None,
        event_date=event_date,
        title=title,
    )


def exam_periods_from_events(events: list[CalendarEvent]) -> list[ExamPeriod]:
    """Exam periods from stored calendar rows (week 0 means unknown)."""
    periods = []
    for event in events:
        if event.event_type != "exam":
            continue
        period = exam_period_from_title(event.title, event.week_number, event.event_date)
        if period is not None:
            periods.append(period)
    return periods


def exam_periods_from_entries(entries: list[RawCalendarEntry | ConsolidatedTopic]) -> list[ExamPeriod]:
    """Exam periods from freshly extracted or consolidated calendar entries."""
    periods = []
    for entry in entries:
        if entry.kind != "exam":
            continue
        if isinstance(entry, RawCalendarEntry):
            week, when = entry.week_number, entry.event_date
        else:
            week, when = entry.scheduled_week, entry.scheduled_date
        period = exam_period_from_title(entry.title, week, when)
        if period is not None:
            periods.append(period)
    return periods


def _uses_weeks(periods: list[ExamPeriod]) -> bool:
    return any(p.week_number is not None for p in periods)


def sort_exam_periods(periods: list[ExamPeriod]) -> list[ExamPeriod]:
    """Ascending by week when any period has one, else by date; unknowns last."""
    if _uses_weeks(periods):
        return sorted(
            periods,
            key=lambda p: (
                p.week_number is None,
                p.week_number or 0,
                p.event_date or date.max,
            ),
        )
    return sorted(periods, key=lambda p: (p.event_date is None, p.event_date or date.max))


def assign_coverage(topic: Schedulable, periods: list[ExamPeriod]) -> int | None:
    """Midterm number covering ``topic``; None for finals topics or no periods."""
    if not periods:
        return None
    ordered = sort_exam_periods(periods)
    topic_week = topic.scheduled_week
    topic_date = topic.scheduled_date
    by_week = topic_week is not None and _uses_weeks(ordered)

    for period in ordered:
        if by_week and period.week_number is not None:
            if topic_week <= period.week_number:  # type: ignore[operator]
                return period.midterm_number
        elif topic_date is not None and period.event_date is not None:
            if topic_date <= period.event_date:
                return period.midterm_number
    return None


def assign_all(topics: list[ConsolidatedTopic], periods: list[ExamPeriod]) -> list[ConsolidatedTopic]:
    """Copy of ``topics`` with midterm_coverage set on topic entries."""
    ordered = sort_exam_periods(periods)
    return [
        t.model_copy(update={"midterm_coverage": assign_coverage(t, ordered)}) if t.kind == "topic" else t
        for t in topics
    ]
