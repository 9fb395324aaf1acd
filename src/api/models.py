# src/api/models.py — v1
"""Public API view models returned to the orchestration/UI layer."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from examingest.core.models import DocumentKind, IngestionJob, JobStatus


class JobCounts(BaseModel):
    """Record counts reported by a job (calendar jobs count inserted rows)."""

    extracted: int = 0
    mapped: int = 0
    pending_review: int = 0


class JobStatusView(BaseModel):
    """Pollable snapshot of a job."""

    job_id: str
    kind: DocumentKind
    status: JobStatus
    step: str | None = None
    progress_pct: int = 0
    counts: JobCounts = JobCounts()
    error_message: str | None = None
    created_at: datetime
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in ("completed", "failed")

    @classmethod
    def from_job(cls, job: IngestionJob) -> JobStatusView:
        return cls(
            job_id=job.id,
            kind=job.kind,
            status=job.status,
            step=job.current_step,
            progress_pct=job.progress_pct,
            counts=JobCounts(
                extracted=job.questions_extracted,
                mapped=job.questions_mapped,
                pending_review=job.questions_pending_review,
            ),
            error_message=job.error_message,
            created_at=job.created_at,
            completed_at=job.completed_at,
        )
