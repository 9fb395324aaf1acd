# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a fake extraction client returning canned payloads, canned
exam/calendar/answer-key payloads, an in-memory SQLite repository and a
temp-dir object store. No external services are contacted.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from examingest.config.settings import Settings
from examingest.core.models import IngestionJob
from examingest.extraction.adapter import ExtractionAdapter
from examingest.llm.base_client import BaseExtractionClient
from examingest.llm.models import DocumentInput, LLMResponse
from examingest.storage.local_store import LocalObjectStore
from examingest.storage.sqlite_repository import SqliteRepository


# === FAKES ===


class FakeExtractionClient(BaseExtractionClient):
    """Returns canned payloads keyed by schema name.

    A payload may be a dict (serialized to JSON), a raw string, or an
    exception instance to raise.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[dict[str, Any]] = []

    async def extract_structured(
        self,
        document: DocumentInput,
        instructions: str,
        schema_name: str,
        schema: dict[str, Any],
        temperature: float = 0.2,
        max_tokens: int = 16384,
    ) -> LLMResponse:
        self.calls.append({
            "schema_name": schema_name,
            "instructions": instructions,
            "temperature": temperature,
            "mime_type": document.mime_type,
            "size": document.size_bytes,
        })
        payload = self.responses.get(schema_name, "")
        if isinstance(payload, Exception):
            raise payload
        content = payload if isinstance(payload, str) else json.dumps(payload)
        return LLMResponse(
            content=content,
            input_tokens=100,
            output_tokens=50,
            model="fake-model",
            provider="fake",
            latency_ms=1,
        )

    @property
    def provider_name(self) -> str:
        return "fake"


class RecordingRepository(SqliteRepository):
    """SQLite repository that records every persisted job update."""

    def __init__(self, db_path: str = ":memory:") -> None:
        super().__init__(db_path)
        self.updates: list[IngestionJob] = []

    async def update_job(self, job_id: str, **fields: Any) -> IngestionJob:
        job = await super().update_job(job_id, **fields)
        self.updates.append(job)
        return job


# === FIXTURES: Canned payloads ===


@pytest.fixture
def exam_payload() -> dict[str, Any]:
    """Extraction payload for a three-question midterm."""
    return {
        "examYear": 2024,
        "examSemester": "Spring",
        "examType": "1",
        "questions": [
            {
                "questionOrder": 1,
                "questionFormat": "multiple_choice",
                "prompt": "1. (5 points) Evaluate \\(\\lim_{x \\to 0} \\frac{\\sin x}{x}\\).",
                "choices": [
                    {"id": "a", "text": "$0$"},
                    {"id": "B)", "text": "$1$"},
                    {"id": "PARADOX c", "text": "$\\infty$"},
                ],
            },
            {
                "questionOrder": 2,
                "questionFormat": "multiple_choice",
                "prompt": "2. Which vector is orthogonal to ~ı?",
                "choices": [
                    {"id": "a", "text": "~ı"},
                    {"id": "b", "text": "$\\mathbf{j}$"},
                ],
            },
            {
                "questionOrder": 3,
                "questionFormat": "short_answer",
                "prompt": "3. (12 points) Let $f(x) = 2x$ on $[0, 1]$.",
                "subparts": [
                    {"id": "A", "prompt": "(4 points) Find $E[X]$."},
                    {"id": "b", "prompt": "Find $P(X > 0.5)$.", "points": 8},
                ],
            },
        ],
    }


@pytest.fixture
def answer_key_payload() -> dict[str, Any]:
    return {
        "answers": [
            {"questionNumber": "1", "questionType": "mcq", "answer": "b"},
            {"questionNumber": "2", "questionType": "mcq", "answer": "(B)"},
            {
                "questionNumber": "3",
                "questionType": "short_answer",
                "subparts": [{"id": "a", "answer": "2/3"}],
            },
        ],
    }


@pytest.fixture
def calendar_payload() -> dict[str, Any]:
    """Calendar payload: a two-day topic, singletons, a quiz and two exams."""
    return {
        "events": [
            {"week_number": 1, "day_of_week": "MON", "event_date": "2024-01-10",
             "event_type": "topic", "title": "13.1: Vectors"},
            {"week_number": 1, "day_of_week": "WED", "event_date": "2024-01-12",
             "event_type": "topic", "title": "13.1: Vectors"},
            {"week_number": 2, "day_of_week": "MON", "event_date": "2024-01-17",
             "event_type": "topic", "title": "13.3: Dot Products"},
            {"week_number": 3, "day_of_week": "FRI", "event_date": "TBD",
             "event_type": "quiz", "title": "Quiz 1"},
            {"week_number": 5, "day_of_week": "THU", "event_date": "2024-02-08",
             "event_type": "exam", "title": "Midterm 1"},
            {"week_number": 7, "day_of_week": "MON", "event_date": "2024-02-19",
             "event_type": "topic", "title": "14.1: Functions of Several Variables"},
            {"week_number": 15, "day_of_week": "MON", "event_date": "2024-04-29",
             "event_type": "exam", "title": "Final Exam"},
        ],
    }


# === FIXTURES: Infrastructure ===


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        object_store_root=tmp_path / "objects",
        database_path=":memory:",
        calendar_default_year=2024,
    )


@pytest.fixture
def repository():
    repo = RecordingRepository()
    yield repo
    repo.close()


@pytest.fixture
def object_store(tmp_path) -> LocalObjectStore:
    return LocalObjectStore(tmp_path / "objects")


@pytest.fixture
def fake_client() -> FakeExtractionClient:
    return FakeExtractionClient()


@pytest.fixture
def adapter(fake_client, settings) -> ExtractionAdapter:
    return ExtractionAdapter(fake_client, settings)


@pytest.fixture
def pdf_document() -> DocumentInput:
    return DocumentInput(data=b"%PDF-1.4 fake", mime_type="application/pdf", filename="exam.pdf")
