# src/jobs/progress.py — v1
"""Per-run job progress tracker.

Owns the in-memory state of one job run and persists every transition
through the repository, so external pollers see step and progress while
the job runs.
"""

from __future__ import annotations

import logging
from typing import Any

from examingest.core.errors import InvalidTransitionError
from examingest.core.models import IngestionJob, utcnow
from examingest.jobs.state import (
    Completed,
    Failed,
    JobState,
    Pending,
    Processing,
    StepCode,
    state_of,
    transition,
)
from examingest.logging.context import set_step_context
from examingest.storage.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class JobProgressTracker:
    """Validated, persisted state transitions for one job."""

    def __init__(self, repository: BaseRepository, job: IngestionJob) -> None:
        self._repository = repository
        self._job = job
        self._state: JobState = state_of(job)

    @property
    def job(self) -> IngestionJob:
        """Latest persisted job record."""
        return self._job

    @property
    def state(self) -> JobState:
        return self._state

    async def _apply(self, target: JobState, **fields: Any) -> IngestionJob:
        self._state = transition(self._state, target)
        self._job = await self._repository.update_job(
            self._job.id, **target.as_fields(), **fields,
        )
        return self._job

    async def start(self) -> IngestionJob:
        """Move to processing at the download step, before any I/O.

        Raises:
            InvalidTransitionError: The job is not pending.
        """
        if not isinstance(self._state, Pending):
            raise InvalidTransitionError(f"cannot start a {self._state.status} job")
        return await self.advance(StepCode.DOWNLOAD)

    async def advance(self, step: StepCode, **fields: Any) -> IngestionJob:
        """Persist a step marker with its progress and any extra fields."""
        set_step_context(step.value)
        logger.info("Step %s (%d%%)", step.value, step.progress_pct)
        return await self._apply(Processing(step=step, progress_pct=step.progress_pct), **fields)

    async def complete(self, **fields: Any) -> IngestionJob:
        """Terminal success: step B4, progress 100."""
        set_step_context(StepCode.DONE.value)
        return await self._apply(Completed(), completed_at=utcnow(), **fields)

    async def fail(self, reason: str) -> IngestionJob:
        """Terminal failure; progress stays at its last persisted value."""
        current = self._state
        step = current.step if isinstance(current, (Processing, Failed)) else None
        progress = current.progress_pct if isinstance(current, Processing) else 0
        return await self._apply(Failed(reason=reason, step=step, progress_pct=progress))
