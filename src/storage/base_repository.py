# src/storage/base_repository.py — v1
"""Abstract relational store interface.

CRUD over jobs, questions, calendar events and topics. Every query can
be filtered by course pack; questions also by derived exam identity.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from examingest.core.models import CalendarEvent, EntryKind, ExtractedQuestion, IngestionJob, Topic


class BaseRepository(ABC):
    """Unified interface for relational store backends."""

    # --- Jobs ---

    @abstractmethod
    async def create_job(self, job: IngestionJob) -> IngestionJob:
        """Insert a new job record."""

    @abstractmethod
    async def get_job(self, job_id: str) -> IngestionJob | None:
        """Fetch a job, or None when it does not exist."""

    @abstractmethod
    async def update_job(self, job_id: str, **fields: Any) -> IngestionJob:
        """Apply field updates to a job and return the validated result."""

    # --- Questions ---

    @abstractmethod
    async def replace_questions(
        self, course_pack_id: str, source_exam: str, questions: list[ExtractedQuestion]
    ) -> int:
        """Delete every question of (course_pack_id, source_exam), then insert
        ``questions``, in one transaction. Returns the inserted count."""

    @abstractmethod
    async def list_questions(
        self, course_pack_id: str, source_exam: str | None = None
    ) -> list[ExtractedQuestion]:
        """Questions of a course pack ordered by question order."""

    # --- Calendar ---

    @abstractmethod
    async def insert_calendar_events(self, events: list[CalendarEvent]) -> int:
        """Bulk-insert calendar rows. Returns the inserted count."""

    @abstractmethod
    async def list_calendar_events(
        self, course_pack_id: str, kind: EntryKind | None = None
    ) -> list[CalendarEvent]:
        """Calendar rows of a course pack, optionally filtered by kind."""

    # --- Topics ---

    @abstractmethod
    async def list_topics(self, course_pack_id: str) -> list[Topic]:
        """Topic catalog of a course pack."""

    @abstractmethod
    async def insert_topics(self, topics: list[Topic]) -> int:
        """Append topics to the catalog. Returns the inserted count."""

    def close(self) -> None:
        """Release backend resources."""
