# src/storage/sqlite_repository.py — v1
"""SQLite-based relational store (default backend).

Uses stdlib sqlite3. Jobs are stored as JSON documents next to their
indexed lookup columns; question choices/subparts and calendar topic
lists are JSON columns.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from examingest.core.errors import JobNotFoundError
from examingest.core.models import (
    CalendarEvent,
    EntryKind,
    ExtractedQuestion,
    IngestionJob,
    Topic,
    utcnow,
)
from examingest.storage.base_repository import BaseRepository

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ingestion_jobs (
    id TEXT PRIMARY KEY,
    course_pack_id TEXT NOT NULL,
    status TEXT NOT NULL,
    data TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_jobs_course ON ingestion_jobs(course_pack_id);

CREATE TABLE IF NOT EXISTS questions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    course_pack_id TEXT NOT NULL,
    source_exam TEXT NOT NULL,
    question_order INTEGER,
    question_format TEXT NOT NULL,
    prompt TEXT NOT NULL,
    choices TEXT NOT NULL DEFAULT '[]',
    subparts TEXT NOT NULL DEFAULT '[]',
    midterm_number INTEGER,
    needs_review INTEGER NOT NULL DEFAULT 1,
    answer_key_answer TEXT,
    answer_mismatch INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_questions_exam ON questions(course_pack_id, source_exam);

CREATE TABLE IF NOT EXISTS calendar_events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    course_pack_id TEXT NOT NULL,
    ingestion_job_id TEXT,
    week_number INTEGER NOT NULL DEFAULT 0,
    day_of_week TEXT,
    event_date TEXT,
    event_type TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    topics_covered TEXT NOT NULL DEFAULT '[]',
    needs_review INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_events_course ON calendar_events(course_pack_id, event_type);

CREATE TABLE IF NOT EXISTS topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    course_pack_id TEXT NOT NULL,
    title TEXT NOT NULL,
    section TEXT,
    description TEXT,
    scheduled_week INTEGER,
    scheduled_date TEXT,
    midterm_coverage INTEGER
);
CREATE INDEX IF NOT EXISTS idx_topics_course ON topics(course_pack_id);
"""

_QUESTION_COLUMNS = (
    "course_pack_id, source_exam, question_order, question_format, prompt, choices, "
    "subparts, midterm_number, needs_review, answer_key_answer, answer_mismatch"
)
_EVENT_COLUMNS = (
    "course_pack_id, ingestion_job_id, week_number, day_of_week, event_date, event_type, "
    "title, description, topics_covered, needs_review"
)
_TOPIC_COLUMNS = (
    "course_pack_id, title, section, description, scheduled_week, scheduled_date, midterm_coverage"
)


class SqliteRepository(BaseRepository):
    """SQLite-backed repository; ``:memory:`` gives a throwaway database."""

    def __init__(self, db_path: Path | str) -> None:
        if str(db_path) == ":memory:":
            target = ":memory:"
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        if target != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    # --- Jobs ---

    async def create_job(self, job: IngestionJob) -> IngestionJob:
        with self._conn:
            self._conn.execute(
                "INSERT INTO ingestion_jobs (id, course_pack_id, status, data) VALUES (?, ?, ?, ?)",
                (job.id, job.course_pack_id, job.status, job.model_dump_json()),
            )
        return job

    async def get_job(self, job_id: str) -> IngestionJob | None:
        row = self._conn.execute(
            "SELECT data FROM ingestion_jobs WHERE id = ?", (job_id,)
        ).fetchone()
        if row is None:
            return None
        return IngestionJob.model_validate_json(row["data"])

    async def update_job(self, job_id: str, **fields: Any) -> IngestionJob:
        job = await self.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        updated = IngestionJob.model_validate(
            {**job.model_dump(), **fields, "updated_at": utcnow()}
        )
        with self._conn:
            self._conn.execute(
                "UPDATE ingestion_jobs SET status = ?, data = ? WHERE id = ?",
                (updated.status, updated.model_dump_json(), job_id),
            )
        return updated

    # --- Questions ---

    async def replace_questions(
        self, course_pack_id: str, source_exam: str, questions: list[ExtractedQuestion]
    ) -> int:
        rows = [
            (
                course_pack_id,
                source_exam,
                q.question_order,
                q.question_format,
                q.prompt,
                json.dumps([c.model_dump() for c in q.choices]),
                json.dumps([s.model_dump() for s in q.subparts]),
                q.midterm_number,
                int(q.needs_review),
                q.answer_key_answer,
                int(q.answer_mismatch),
            )
            for q in questions
        ]
        with self._conn:
            deleted = self._conn.execute(
                "DELETE FROM questions WHERE course_pack_id = ? AND source_exam = ?",
                (course_pack_id, source_exam),
            ).rowcount
            self._conn.executemany(
                f"INSERT INTO questions ({_QUESTION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
        logger.debug("Replaced %d questions with %d for %r", deleted, len(rows), source_exam)
        return len(rows)

    async def list_questions(
        self, course_pack_id: str, source_exam: str | None = None
    ) -> list[ExtractedQuestion]:
        sql = f"SELECT {_QUESTION_COLUMNS} FROM questions WHERE course_pack_id = ?"
        params: list[Any] = [course_pack_id]
        if source_exam is not None:
            sql += " AND source_exam = ?"
            params.append(source_exam)
        sql += " ORDER BY source_exam, question_order, id"
        return [
            ExtractedQuestion(
                course_pack_id=row["course_pack_id"],
                source_exam=row["source_exam"],
                question_order=row["question_order"],
                question_format=row["question_format"],
                prompt=row["prompt"],
                choices=json.loads(row["choices"]),
                subparts=json.loads(row["subparts"]),
                midterm_number=row["midterm_number"],
                needs_review=bool(row["needs_review"]),
                answer_key_answer=row["answer_key_answer"],
                answer_mismatch=bool(row["answer_mismatch"]),
            )
            for row in self._conn.execute(sql, params).fetchall()
        ]

    # --- Calendar ---

    async def insert_calendar_events(self, events: list[CalendarEvent]) -> int:
        rows = [
            (
                e.course_pack_id,
                e.ingestion_job_id,
                e.week_number,
                e.day_of_week,
                e.event_date.isoformat() if e.event_date else None,
                e.event_type,
                e.title,
                e.description,
                json.dumps(e.topics_covered),
                int(e.needs_review),
            )
            for e in events
        ]
        with self._conn:
            self._conn.executemany(
                f"INSERT INTO calendar_events ({_EVENT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    async def list_calendar_events(
        self, course_pack_id: str, kind: EntryKind | None = None
    ) -> list[CalendarEvent]:
        sql = f"SELECT id, {_EVENT_COLUMNS} FROM calendar_events WHERE course_pack_id = ?"
        params: list[Any] = [course_pack_id]
        if kind is not None:
            sql += " AND event_type = ?"
            params.append(kind)
        sql += " ORDER BY week_number, event_date, id"
        return [
            CalendarEvent(
                id=row["id"],
                course_pack_id=row["course_pack_id"],
                ingestion_job_id=row["ingestion_job_id"],
                week_number=row["week_number"],
                day_of_week=row["day_of_week"],
                event_date=row["event_date"],
                event_type=row["event_type"],
                title=row["title"],
                description=row["description"],
                topics_covered=json.loads(row["topics_covered"]),
                needs_review=bool(row["needs_review"]),
            )
            for row in self._conn.execute(sql, params).fetchall()
        ]

    # --- Topics ---

    async def list_topics(self, course_pack_id: str) -> list[Topic]:
        cursor = self._conn.execute(
            f"SELECT id, {_TOPIC_COLUMNS} FROM topics WHERE course_pack_id = ? ORDER BY id",
            (course_pack_id,),
        )
        return [Topic(**dict(row)) for row in cursor.fetchall()]

    async def insert_topics(self, topics: list[Topic]) -> int:
        rows = [
            (
                t.course_pack_id,
                t.title,
                t.section,
                t.description,
                t.scheduled_week,
                t.scheduled_date.isoformat() if t.scheduled_date else None,
                t.midterm_coverage,
            )
            for t in topics
        ]
        with self._conn:
            self._conn.executemany(
                f"INSERT INTO topics ({_TOPIC_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)", rows,
            )
        return len(rows)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
