# src/questions/replacement_store.py — v1
"""Question replacement store: idempotent re-ingestion of exam questions.

All questions sharing (course pack, derived exam identity) are replaced
by the freshly extracted set inside one repository transaction, so
re-uploading a corrected PDF never yields a union of old and new rows.
"""

from __future__ import annotations

import logging

from examingest.core.models import ExtractedQuestion
from examingest.storage.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class QuestionReplacementStore:
    """Replace-on-reingest persistence for extracted questions."""

    def __init__(self, repository: BaseRepository) -> None:
        self._repository = repository

    async def replace(
        self,
        course_pack_id: str,
        identity: str,
        questions: list[ExtractedQuestion],
    ) -> int:
        """Replace the question set of ``identity``; returns the inserted count.

        Inserted rows start pending review with correctness unset and no
        answer mismatch; only an answer-key answer (if any) is carried.
        """
        if not identity:
            raise ValueError("derived exam identity must not be empty")

        prepared: list[ExtractedQuestion] = []
        seen_orders: set[int] = set()
        for q in questions:
            order = q.question_order
            if order is not None and order in seen_orders:
                logger.warning("Duplicate question order %d in %r; keeping it unordered", order, identity)
                order = None
            if order is not None:
                seen_orders.add(order)
            prepared.append(q.model_copy(update={
                "course_pack_id": course_pack_id,
                "source_exam": identity,
                "question_order": order,
                "needs_review": True,
                "answer_mismatch": False,
                "choices": [c.model_copy(update={"is_correct": None}) for c in q.choices],
            }))

        inserted = await self._repository.replace_questions(course_pack_id, identity, prepared)
        logger.info("Stored %d questions for %r", inserted, identity)
        return inserted
