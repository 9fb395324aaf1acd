# src/extraction/adapter.py — v1
"""Extraction adapter: one schema-constrained call per document.

Wraps a BaseExtractionClient, classifies provider failures, and only
accepts output that parses against the declared schema. No retries are
performed here; a failed call surfaces as an ExtractionError subclass.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from examingest.calendar.dates import parse_event_date
from examingest.config.settings import Settings
from examingest.core.errors import EmptyExtractionError, ExtractionError, MalformedExtraction
from examingest.core.exam_metadata import (
    derive_exam_identity,
    midterm_number,
    normalize_semester,
    parse_exam_name,
    parse_exam_type,
)
from examingest.core.models import DocumentKind, ExamMetadata, ExtractedQuestion, RawCalendarEntry
from examingest.extraction.normalizer import normalize_question
from examingest.extraction.prompts import EXAM_PROMPT, build_calendar_prompt
from examingest.extraction.schemas import (
    CALENDAR_SCHEMA,
    CALENDAR_SCHEMA_NAME,
    EXAM_SCHEMA,
    EXAM_SCHEMA_NAME,
    CalendarExtraction,
    ExamExtraction,
)
from examingest.llm.base_client import BaseExtractionClient
from examingest.llm.errors import classify_error
from examingest.llm.models import DocumentInput

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".png": "image/png",
}


def mime_type_for(file_name: str, kind: DocumentKind) -> str:
    """Exam documents are PDFs; calendar images default to PNG."""
    if kind == "exam":
        return "application/pdf"
    return _IMAGE_MIME_TYPES.get(PurePosixPath(file_name).suffix.lower(), "image/png")


@dataclass
class ExamExtractionResult:
    """Normalized outcome of an exam extraction."""

    metadata: ExamMetadata
    source_exam: str
    questions: list[ExtractedQuestion] = field(default_factory=list)

    @property
    def is_final(self) -> bool:
        return self.metadata.exam_type == "f"


class ExtractionAdapter:
    """Schema-constrained extraction over a pluggable client."""

    def __init__(self, client: BaseExtractionClient, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or Settings(_env_file=None)  # type: ignore[call-arg]

    @property
    def provider(self) -> str:
        return self._client.provider_name

    async def extract(
        self,
        document: DocumentInput,
        schema_name: str,
        schema: dict[str, Any],
        response_model: type[T],
        instructions: str,
        temperature: float | None = None,
    ) -> T:
        """Run one extraction call and validate its payload.

        Raises:
            ExtractionError: Classified provider failure or unparseable output.
        """
        try:
            response = await self._client.extract_structured(
                document=document,
                instructions=instructions,
                schema_name=schema_name,
                schema=schema,
                temperature=(
                    self._settings.extraction_temperature if temperature is None else temperature
                ),
                max_tokens=self._settings.extraction_max_tokens,
            )
        except ExtractionError:
            raise
        except Exception as e:
            raise classify_error(e, self.provider) from e

        logger.info(
            "%s via %s: %d in / %d out tokens, %d ms",
            schema_name, response.provider, response.input_tokens,
            response.output_tokens, response.latency_ms,
        )
        return self._parse(response.content, schema_name, response_model)

    @staticmethod
    def _parse(content: str, schema_name: str, response_model: type[T]) -> T:
        if not content.strip():
            raise MalformedExtraction(f"Extraction service did not return {schema_name} output")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedExtraction(f"{schema_name} output is not valid JSON: {e}") from e
        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            raise MalformedExtraction(
                f"{schema_name} output does not match schema: {e.error_count()} error(s)"
            ) from e

    # --- Document-specific flows ---

    async def extract_exam(
        self,
        document: DocumentInput,
        course_pack_id: str,
        fallback_identity: str = "",
    ) -> ExamExtractionResult:
        """Extract and normalize all questions of an exam document.

        Raises:
            EmptyExtractionError: The document yielded zero questions.
        """
        payload = await self.extract(
            document, EXAM_SCHEMA_NAME, EXAM_SCHEMA, ExamExtraction, EXAM_PROMPT,
        )
        exam_type = parse_exam_type(payload.examType)
        semester = normalize_semester(payload.examSemester)
        year = payload.examYear
        if fallback_identity and not (year and semester and exam_type):
            # Uploads are often named after the exam ("Fall 2023 Midterm 1.pdf").
            parsed = parse_exam_name(PurePosixPath(fallback_identity).stem)
            year = year or parsed.year
            semester = semester or parsed.semester
            exam_type = exam_type or parsed.exam_type_code
            logger.info("Exam metadata completed from file name: %s", parsed.display_label)
        metadata = ExamMetadata(year=year, semester=semester, exam_type=exam_type)
        source_exam = derive_exam_identity(
            metadata.semester, metadata.year, exam_type, fallback=fallback_identity,
        )
        logger.info(
            "Extracted %d questions - year=%s semester=%s type=%s",
            len(payload.questions), metadata.year, metadata.semester, exam_type,
        )
        if not payload.questions:
            raise EmptyExtractionError(
                "No questions extracted from PDF. Please check the PDF format."
            )

        questions = [
            normalize_question(
                raw,
                course_pack_id=course_pack_id,
                source_exam=source_exam,
                midterm_number=midterm_number(exam_type),
            )
            for raw in payload.questions
        ]
        return ExamExtractionResult(metadata=metadata, source_exam=source_exam, questions=questions)

    async def extract_calendar(
        self,
        document: DocumentInput,
        existing_titles: list[str] | None = None,
    ) -> list[RawCalendarEntry]:
        """Extract raw per-day calendar rows, dates parsed."""
        payload = await self.extract(
            document,
            CALENDAR_SCHEMA_NAME,
            CALENDAR_SCHEMA,
            CalendarExtraction,
            build_calendar_prompt(existing_titles or []),
        )
        default_year = self._settings.calendar_default_year
        entries = [
            RawCalendarEntry(
                week_number=event.week_number,
                day_of_week=event.day_of_week or None,
                event_date=parse_event_date(event.event_date, default_year),
                kind=event.event_type,
                title=event.title.strip(),
                description=event.description or None,
            )
            for event in payload.events
            if event.title.strip()
        ]
        logger.info("Extracted %d calendar events", len(entries))
        return entries
