# src/jobs/controller.py — v1
"""Ingestion job controller: runs one job end to end.

Exam documents: download → encode → extract → (answer key) → replace
questions. Calendar images: download → encode → extract → consolidate →
coverage → insert calendar rows and new catalog topics. Every step is
persisted before it starts; any failure marks the job failed with a
readable message and leaves progress at its last value.
"""

from __future__ import annotations

import logging

from examingest.calendar.consolidation import (
    build_existing_keys,
    consolidate,
    drop_known_events,
    materialize_topics,
)
from examingest.calendar.coverage import (
    assign_all,
    exam_periods_from_entries,
    exam_periods_from_events,
)
from examingest.config.settings import Settings
from examingest.core.errors import (
    DocumentTooLargeError,
    IngestionError,
    JobNotFoundError,
)
from examingest.core.models import (
    CalendarEvent,
    ConsolidatedTopic,
    ExtractedQuestion,
    IngestionJob,
    JobStatus,
)
from examingest.extraction.adapter import ExtractionAdapter, mime_type_for
from examingest.extraction.answer_key import AnswerKeyCrossValidator, apply_answer_key
from examingest.jobs.progress import JobProgressTracker
from examingest.jobs.state import StepCode
from examingest.llm.models import DocumentInput
from examingest.logging.context import clear_context, set_job_context
from examingest.questions.replacement_store import QuestionReplacementStore
from examingest.storage.base_object_store import BaseObjectStore
from examingest.storage.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class IngestionJobController:
    """Orchestrates extraction, persistence and progress for ingestion jobs."""

    def __init__(
        self,
        repository: BaseRepository,
        object_store: BaseObjectStore,
        adapter: ExtractionAdapter,
        settings: Settings | None = None,
    ) -> None:
        self._repository = repository
        self._store = object_store
        self._adapter = adapter
        self._settings = settings or Settings(_env_file=None)  # type: ignore[call-arg]
        self._answer_keys = AnswerKeyCrossValidator(
            adapter, temperature=self._settings.answer_key_temperature,
        )
        self._questions = QuestionReplacementStore(repository)

    async def run(self, job_id: str) -> JobStatus:
        """Run a pending job to a terminal status.

        Raises:
            JobNotFoundError: No job with this id exists.
            InvalidTransitionError: The job is not pending.
        """
        job = await self._repository.get_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        set_job_context(job.id, job.course_pack_id)
        try:
            tracker = JobProgressTracker(self._repository, job)
            await tracker.start()
            logger.info("Processing %s job: %s", job.kind, job.file_name)
            try:
                if job.kind == "exam":
                    await self._run_exam(job, tracker)
                else:
                    await self._run_calendar(job, tracker)
            except IngestionError as e:
                logger.error("Job %s failed: %s", job.id, e.message, exc_info=True)
                await tracker.fail(e.message)
                return "failed"
            except Exception as e:
                logger.exception("Job %s failed unexpectedly", job.id)
                await tracker.fail(f"Unexpected error: {type(e).__name__}: {e}")
                return "failed"
            logger.info("Job %s completed", job.id)
            return "completed"
        finally:
            clear_context()

    # --- Shared steps ---

    async def _load_document(self, job: IngestionJob, tracker: JobProgressTracker) -> DocumentInput:
        """A1 download (already marked) then A2 encode."""
        data = await self._download(job.file_path)
        logger.info("Downloaded %s (%d bytes)", job.file_path, len(data))

        await tracker.advance(StepCode.ENCODE)
        document = DocumentInput(
            data=data,
            mime_type=mime_type_for(job.file_name, job.kind),
            filename=job.file_name,
            chunk_size=self._settings.encode_chunk_size,
        )
        document.base64()
        return document

    async def _download(self, path: str) -> bytes:
        data = await self._store.download(path)
        if len(data) > self._settings.max_document_bytes:
            raise DocumentTooLargeError(
                f"Document {path} is {len(data)} bytes; limit is "
                f"{self._settings.max_document_size_mb} MB"
            )
        return data

    # --- Exam documents ---

    async def _run_exam(self, job: IngestionJob, tracker: JobProgressTracker) -> None:
        document = await self._load_document(job, tracker)

        await tracker.advance(StepCode.EXTRACT)
        result = await self._adapter.extract_exam(
            document, job.course_pack_id, fallback_identity=job.file_name,
        )

        await tracker.advance(StepCode.PARSE)
        if job.has_answer_key:
            await self._cross_check(job, result.questions)

        await tracker.advance(StepCode.PERSIST, questions_extracted=len(result.questions))
        inserted = await self._questions.replace(
            job.course_pack_id, result.source_exam, result.questions,
        )

        await tracker.complete(
            questions_extracted=inserted,
            questions_mapped=0,
            questions_pending_review=inserted,
            exam_year=result.metadata.year,
            exam_semester=result.metadata.semester,
            exam_type=result.metadata.exam_type,
            is_final=result.is_final,
        )

    async def _cross_check(self, job: IngestionJob, questions: list[ExtractedQuestion]) -> None:
        """Attach answer-key answers; any failure only degrades to no key."""
        try:
            data = await self._download(job.answer_key_path or "")
            document = DocumentInput(
                data=data,
                mime_type="application/pdf",
                filename=job.answer_key_path,
                chunk_size=self._settings.encode_chunk_size,
            )
            answers = await self._answer_keys.cross_check(document)
        except IngestionError as e:
            logger.warning("Answer key skipped, continuing without it: %s", e.message)
            return
        matched = apply_answer_key(questions, answers)
        logger.info("Answer key matched %d of %d questions", matched, len(questions))

    # --- Calendar images ---

    async def _run_calendar(self, job: IngestionJob, tracker: JobProgressTracker) -> None:
        document = await self._load_document(job, tracker)

        await tracker.advance(StepCode.EXTRACT)
        catalog = await self._repository.list_topics(job.course_pack_id)
        titles = [t.title for t in catalog]
        raw_entries = await self._adapter.extract_calendar(document, titles)

        await tracker.advance(StepCode.PARSE)
        existing_keys = build_existing_keys(titles)
        entries = consolidate(raw_entries, existing_keys)

        stored = await self._repository.list_calendar_events(job.course_pack_id)
        periods = exam_periods_from_events(stored) + exam_periods_from_entries(raw_entries)
        if periods:
            entries = assign_all(entries, periods)
        else:
            logger.info("No exam periods known; coverage left unassigned")
        entries = drop_known_events(entries, stored)

        await tracker.advance(StepCode.PERSIST)
        events = [self._to_event(job, e) for e in entries]
        inserted = await self._repository.insert_calendar_events(events)
        needs_review = sum(1 for e in events if e.needs_review)
        topics = materialize_topics(entries, job.course_pack_id, existing_keys)
        created = await self._repository.insert_topics(topics)
        logger.info(
            "Inserted %d calendar events (%d need review), %d new topics",
            inserted, needs_review, created,
        )

        await tracker.complete(
            questions_extracted=inserted,
            questions_pending_review=needs_review,
        )

    @staticmethod
    def _to_event(job: IngestionJob, entry: ConsolidatedTopic) -> CalendarEvent:
        return CalendarEvent(
            course_pack_id=job.course_pack_id,
            ingestion_job_id=job.id,
            week_number=entry.scheduled_week or 0,
            day_of_week=entry.day_of_week,
            event_date=entry.scheduled_date,
            event_type=entry.kind,
            title=entry.title,
            description=entry.description,
            topics_covered=[entry.title] if entry.kind == "topic" else [],
            needs_review=entry.kind == "exam" or entry.scheduled_date is None,
        )
