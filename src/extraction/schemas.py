# src/extraction/schemas.py — v1
"""Output schemas declared to the extraction service, and the pydantic
models used to validate what comes back.

The dict schemas use the OpenAPI subset accepted by both Gemini function
declarations and Anthropic tool input schemas.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

EXAM_SCHEMA_NAME = "extract_questions"
CALENDAR_SCHEMA_NAME = "extract_calendar_events"
ANSWER_KEY_SCHEMA_NAME = "extract_answer_key"

CHOICE_LABELS = ("a", "b", "c", "d", "e")
SUBPART_LABELS = ("a", "b", "c", "d", "e", "f", "g", "h")
DAYS_OF_WEEK = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")


# === DECLARED SCHEMAS ===

EXAM_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": (
        "Extract questions from an exam PDF with proper LaTeX math delimiters "
        "and structured exam metadata"
    ),
    "properties": {
        "examYear": {"type": "integer", "description": "The year of the exam (e.g., 2024)"},
        "examSemester": {
            "type": "string",
            "enum": ["Spring", "Summer", "Fall", "Winter"],
            "description": "The semester of the exam",
        },
        "examType": {
            "type": "string",
            "enum": ["1", "2", "3", "f"],
            "description": "'1', '2', '3' for Midterm 1/2/3, or 'f' for Final",
        },
        "questions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "questionOrder": {
                        "type": "integer",
                        "description": "The order of this question in the exam",
                    },
                    "questionFormat": {
                        "type": "string",
                        "enum": ["multiple_choice", "short_answer", "numeric"],
                    },
                    "prompt": {
                        "type": "string",
                        "description": "Question text. $$...$$ for display math, $...$ for inline math.",
                    },
                    "choices": {
                        "type": "array",
                        "description": "Answer choices, only for multiple_choice questions",
                        "items": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string", "enum": list(CHOICE_LABELS)},
                                "text": {"type": "string"},
                            },
                            "required": ["id", "text"],
                        },
                    },
                    "subparts": {
                        "type": "array",
                        "description": "Separately answered parts of a short-answer question",
                        "items": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string", "enum": list(SUBPART_LABELS)},
                                "prompt": {"type": "string"},
                                "points": {"type": "number"},
                            },
                            "required": ["id", "prompt"],
                        },
                    },
                },
                "required": ["questionOrder", "prompt"],
            },
        },
    },
    "required": ["questions"],
}

CALENDAR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": (
        "Extract distinct topics and exam events from the course schedule. "
        "If the same topic spans multiple days, create separate entries for each day."
    ),
    "properties": {
        "events": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "week_number": {"type": "integer", "description": "Week number (1, 2, 3, ...)"},
                    "day_of_week": {"type": "string", "enum": list(DAYS_OF_WEEK)},
                    "event_date": {
                        "type": "string",
                        "description": "EXACT date in YYYY-MM-DD format",
                    },
                    "event_type": {"type": "string", "enum": ["topic", "exam", "quiz"]},
                    "title": {
                        "type": "string",
                        "description": (
                            "Topics: 'SECTION#: Topic Name' (e.g. '13.1: Vectors in the Plane'). "
                            "Exams: the exam name (e.g. 'Midterm 1', 'Final Exam')."
                        ),
                    },
                    "description": {"type": "string"},
                },
                "required": ["week_number", "event_type", "title", "event_date"],
            },
        },
    },
    "required": ["events"],
}

ANSWER_KEY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "description": "Extract the answer key from a graded exam (MCQ and short-answer)",
    "properties": {
        "answers": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "questionNumber": {
                        "type": "string",
                        "description": "Question identifier as shown ('2.1', '3', '4')",
                    },
                    "questionType": {"type": "string", "enum": ["mcq", "short_answer"]},
                    "answer": {
                        "type": "string",
                        "description": "MCQ only: the correct letter (A-E)",
                    },
                    "subparts": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "id": {"type": "string"},
                                "answer": {"type": "string"},
                                "points": {"type": "number"},
                            },
                            "required": ["id", "answer"],
                        },
                    },
                },
                "required": ["questionNumber", "questionType"],
            },
        },
    },
    "required": ["answers"],
}


# === RESPONSE MODELS ===


class RawChoice(BaseModel):
    id: str = ""
    text: str = ""


class RawSubpart(BaseModel):
    id: str = ""
    prompt: str = ""
    points: float | None = None


class RawQuestion(BaseModel):
    questionOrder: int | None = None  # noqa: N815
    questionFormat: Literal["multiple_choice", "short_answer", "numeric"] | None = None  # noqa: N815
    prompt: str
    choices: list[RawChoice] = Field(default_factory=list)
    subparts: list[RawSubpart] = Field(default_factory=list)


class ExamExtraction(BaseModel):
    """Validated payload of an exam extraction call."""

    examYear: int | None = None  # noqa: N815
    examSemester: str | None = None  # noqa: N815
    examType: str | None = None  # noqa: N815
    questions: list[RawQuestion] = Field(default_factory=list)


class RawCalendarEvent(BaseModel):
    week_number: int | None = None
    day_of_week: str | None = None
    event_date: str | None = None
    event_type: Literal["topic", "exam", "quiz"]
    title: str
    description: str | None = None


class CalendarExtraction(BaseModel):
    """Validated payload of a calendar extraction call."""

    events: list[RawCalendarEvent] = Field(default_factory=list)


class SubpartAnswer(BaseModel):
    id: str
    answer: str
    points: float | None = None


class AnswerKeyEntry(BaseModel):
    questionNumber: str  # noqa: N815
    questionType: Literal["mcq", "short_answer"]  # noqa: N815
    answer: str | None = None
    subparts: list[SubpartAnswer] | None = None

    @field_validator("questionNumber", mode="before")
    @classmethod
    def coerce_question_number(cls, v: object) -> object:  # noqa: N805
        """Numbers come back as JSON numbers from some providers."""
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v


class AnswerKeyExtraction(BaseModel):
    """Validated payload of an answer-key extraction call."""

    answers: list[AnswerKeyEntry] = Field(default_factory=list)
