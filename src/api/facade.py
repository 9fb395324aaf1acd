# src/api/facade.py — v1
"""Public API facade — start, run and poll ingestion jobs.

Usage:
    from examingest.api.facade import start_job, run_job, get_job_status
    job_id = await start_job(repo, "course-1", "exams/f23.pdf", "exam")
    status = await run_job(job_id, settings, repository=repo)
    view = await get_job_status(repo, job_id)

Jobs are meant to be started and then polled; run_job is what a worker
(or the CLI) calls to drive one job to completion.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from examingest.api.models import JobStatusView
from examingest.config.settings import Settings
from examingest.core.errors import JobNotFoundError
from examingest.core.models import DocumentKind, IngestionJob, JobStatus
from examingest.extraction.adapter import ExtractionAdapter
from examingest.jobs.controller import IngestionJobController
from examingest.llm.base_client import BaseExtractionClient
from examingest.llm.client_factory import client_from_settings
from examingest.storage.base_object_store import BaseObjectStore
from examingest.storage.base_repository import BaseRepository
from examingest.storage.store_factory import create_object_store, create_repository

logger = logging.getLogger(__name__)


async def upload_document(
    object_store: BaseObjectStore,
    course_pack_id: str,
    kind: DocumentKind,
    file: Path,
) -> str:
    """Store a local file and return its object path."""
    path = f"{course_pack_id}/{kind}/{uuid.uuid4().hex[:8]}_{file.name}"
    return await object_store.upload(path, file.read_bytes())


async def start_job(
    repository: BaseRepository,
    course_pack_id: str,
    document_ref: str,
    kind: DocumentKind,
    answer_key_ref: str | None = None,
    file_name: str | None = None,
) -> str:
    """Create a pending job for an uploaded document; returns the job id."""
    job = IngestionJob(
        id=_generate_job_id(),
        course_pack_id=course_pack_id,
        kind=kind,
        file_path=document_ref,
        file_name=file_name or PurePosixPath(document_ref).name,
        answer_key_path=answer_key_ref,
    )
    await repository.create_job(job)
    logger.info("Created %s job %s for course %s", kind, job.id, course_pack_id)
    return job.id


async def run_job(
    job_id: str,
    settings: Settings | None = None,
    repository: BaseRepository | None = None,
    object_store: BaseObjectStore | None = None,
    client: BaseExtractionClient | None = None,
) -> JobStatus:
    """Run a pending job; collaborators not given are built from settings."""
    settings = settings or Settings()
    controller = IngestionJobController(
        repository=repository or create_repository(settings),
        object_store=object_store or create_object_store(settings),
        adapter=ExtractionAdapter(client or client_from_settings(settings), settings),
        settings=settings,
    )
    return await controller.run(job_id)


async def get_job_status(repository: BaseRepository, job_id: str) -> JobStatusView:
    """Pollable view of a job.

    Raises:
        JobNotFoundError: No job with this id exists.
    """
    job = await repository.get_job(job_id)
    if job is None:
        raise JobNotFoundError(job_id)
    return JobStatusView.from_job(job)


def _generate_job_id() -> str:
    """Generate a unique job ID: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    short = uuid.uuid4().hex[:8]
    return f"{ts}_{short}"
