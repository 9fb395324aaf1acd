# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, model_validator

DocumentKind = Literal["exam", "calendar"]
JobStatus = Literal["pending", "processing", "completed", "failed"]
EntryKind = Literal["topic", "exam", "quiz"]
QuestionFormat = Literal["multiple_choice", "short_answer", "numeric"]
Semester = Literal["Spring", "Summer", "Fall", "Winter"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# === INGESTION JOB ===


class IngestionJob(BaseModel):
    """One row per uploaded document; mutated only by the job controller."""

    # --- Identity ---
    id: str
    course_pack_id: str
    kind: DocumentKind
    file_path: str
    file_name: str
    answer_key_path: str | None = None

    # --- Lifecycle ---
    status: JobStatus = "pending"
    current_step: str | None = None
    progress_pct: int = Field(default=0, ge=0, le=100)
    error_message: str | None = None

    # --- Derived exam metadata ---
    exam_year: int | None = None
    exam_semester: str | None = None
    exam_type: str | None = None
    is_final: bool | None = None

    # --- Counts ---
    questions_extracted: int = 0
    questions_mapped: int = 0
    questions_pending_review: int = 0

    # --- Timestamps ---
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    @model_validator(mode="after")
    def check_is_final(self) -> IngestionJob:
        """is_final must agree with exam_type when both are known."""
        if self.exam_type is not None and self.is_final is not None:
            if self.is_final != (self.exam_type == "f"):
                raise ValueError(
                    f"is_final={self.is_final} contradicts exam_type={self.exam_type!r}"
                )
        return self

    @property
    def has_answer_key(self) -> bool:
        return bool(self.answer_key_path)


# === EXAM QUESTIONS ===


class ExamMetadata(BaseModel):
    """Exam identity fields as extracted from a cover page."""

    year: int | None = None
    semester: Semester | None = None
    exam_type: str | None = None


class Choice(BaseModel):
    """Multiple-choice option. Correctness stays unset until analysis runs."""

    label: str
    text: str
    is_correct: bool | None = None


class Subpart(BaseModel):
    """Labelled part of a multi-part short-answer question."""

    label: str
    prompt: str
    points: float | None = None


class ExtractedQuestion(BaseModel):
    """One question found in an exam document."""

    prompt: str
    question_format: QuestionFormat = "multiple_choice"
    choices: list[Choice] = Field(default_factory=list)
    subparts: list[Subpart] = Field(default_factory=list)
    question_order: int | None = None

    # --- Identity / classification ---
    course_pack_id: str = ""
    source_exam: str = ""
    midterm_number: int | None = None

    # --- Review state ---
    needs_review: bool = True
    answer_key_answer: str | None = None
    answer_mismatch: bool = False


# === CALENDAR ===


class RawCalendarEntry(BaseModel):
    """One row extracted from a calendar image, before consolidation."""

    week_number: int | None = None
    day_of_week: str | None = None
    event_date: date | None = None
    kind: EntryKind
    title: str
    description: str | None = None


class ConsolidatedTopic(BaseModel):
    """Consolidation output: a (possibly part-labelled) calendar entry."""

    title: str
    kind: EntryKind = "topic"
    section: str | None = None
    group_key: str | None = None
    part_number: int | None = None
    dates: list[date] = Field(default_factory=list)
    scheduled_week: int | None = None
    day_of_week: str | None = None
    description: str | None = None
    midterm_coverage: int | None = None

    @property
    def scheduled_date(self) -> date | None:
        return self.dates[0] if self.dates else None


class CalendarEvent(BaseModel):
    """Persisted calendar row."""

    id: int | None = None
    course_pack_id: str
    ingestion_job_id: str | None = None
    week_number: int = 0
    day_of_week: str | None = None
    event_date: date | None = None
    event_type: EntryKind
    title: str
    description: str | None = None
    topics_covered: list[str] = Field(default_factory=list)
    needs_review: bool = False


class Topic(BaseModel):
    """Durable topic catalog entry."""

    id: int | None = None
    course_pack_id: str
    title: str
    section: str | None = None
    description: str | None = None
    scheduled_week: int | None = None
    scheduled_date: date | None = None
    midterm_coverage: int | None = None


class ExamPeriod(BaseModel):
    """Exam anchor used for coverage assignment; midterm None means final."""

    midterm_number: int | None = None
    week_number: int | None = None
    event_date: date | None = None
    title: str = ""
