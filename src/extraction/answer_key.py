# src/extraction/answer_key.py — v1
"""Answer-key cross-validator.

Second extraction pass over a companion graded exam, producing a map of
question order → answer label. Any failure is reported as
AnswerKeyFailure so the caller can continue without a key.
"""

from __future__ import annotations

import logging
import re

from examingest.core.errors import AnswerKeyFailure, ExtractionError
from examingest.core.models import ExtractedQuestion
from examingest.extraction.adapter import ExtractionAdapter
from examingest.extraction.prompts import ANSWER_KEY_PROMPT
from examingest.extraction.schemas import (
    ANSWER_KEY_SCHEMA,
    ANSWER_KEY_SCHEMA_NAME,
    AnswerKeyEntry,
    AnswerKeyExtraction,
)
from examingest.llm.models import DocumentInput

logger = logging.getLogger(__name__)

_NON_LABEL_RE = re.compile(r"[^A-E]")


def normalize_mcq_answer(answer: str | None) -> str:
    """Upper-case and keep only the letters A-E."""
    return _NON_LABEL_RE.sub("", (answer or "").upper())


def build_answer_map(entries: list[AnswerKeyEntry]) -> dict[int, str]:
    """MCQ answers keyed by integer question number.

    Short-answer entries and dotted numbers ("2.1") cannot be matched to a
    question order and are left out.
    """
    answers: dict[int, str] = {}
    for entry in entries:
        if entry.questionType != "mcq":
            continue
        label = normalize_mcq_answer(entry.answer)
        number = entry.questionNumber.strip()
        if not label:
            continue
        if not number.isdigit():
            logger.debug("Skipping answer for non-integer question number %r", number)
            continue
        answers[int(number)] = label
    return answers


def apply_answer_key(questions: list[ExtractedQuestion], answers: dict[int, str]) -> int:
    """Populate answer_key_answer by question order; returns the match count."""
    matched = 0
    for question in questions:
        if question.question_order is None:
            continue
        label = answers.get(question.question_order)
        if label:
            question.answer_key_answer = label
            matched += 1
    return matched


class AnswerKeyCrossValidator:
    """Extracts a question-order → answer-label map from an answer key."""

    def __init__(self, adapter: ExtractionAdapter, temperature: float = 0.1) -> None:
        self._adapter = adapter
        self._temperature = temperature

    async def cross_check(self, document: DocumentInput) -> dict[int, str]:
        """Extract the answer map.

        Raises:
            AnswerKeyFailure: Extraction failed or produced no usable answers.
        """
        try:
            payload = await self._adapter.extract(
                document,
                ANSWER_KEY_SCHEMA_NAME,
                ANSWER_KEY_SCHEMA,
                AnswerKeyExtraction,
                ANSWER_KEY_PROMPT,
                temperature=self._temperature,
            )
        except ExtractionError as e:
            raise AnswerKeyFailure(f"Answer key extraction failed: {e.message}") from e

        answers = build_answer_map(payload.answers)
        mcq = sum(1 for a in payload.answers if a.questionType == "mcq")
        logger.info(
            "Answer key: %d entries (%d MCQ, %d short-answer), %d usable",
            len(payload.answers), mcq, len(payload.answers) - mcq, len(answers),
        )
        if not answers:
            raise AnswerKeyFailure("Answer key contained no usable multiple-choice answers")
        return answers
