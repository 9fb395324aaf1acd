# src/core/errors.py — v1
"""Failure taxonomy for the ingestion pipeline.

Every failure that terminates a job derives from IngestionError so the
controller can record a human-readable message on the job record.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for all ingestion failures."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class JobNotFoundError(IngestionError):
    """Job (or a document it references) does not exist."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class DownloadFailure(IngestionError):
    """Object store unreachable, or the document path is invalid."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to download {path}: {reason}")


class DocumentTooLargeError(IngestionError):
    """Downloaded document exceeds the configured size limit."""


# === EXTRACTION SERVICE ===


class ExtractionError(IngestionError):
    """Base class for failures of the external extraction service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ExtractionRateLimited(ExtractionError):
    """Service refused the request because of rate limiting (HTTP 429)."""

    retryable = True


class ExtractionQuotaExceeded(ExtractionError):
    """Quota or billing exhausted; needs operator action (HTTP 402)."""


class MalformedExtraction(ExtractionError):
    """Service output did not parse against the declared schema."""


class EmptyExtractionError(MalformedExtraction):
    """Output parsed but contained no usable records."""


class ExtractionUnavailable(ExtractionError):
    """Service unreachable or failing server-side (HTTP 5xx)."""

    retryable = True


# === NON-FATAL ===


class AnswerKeyFailure(IngestionError):
    """Answer key could not be processed; the job continues without it."""


# === STATE MACHINE ===


class InvalidTransitionError(IngestionError):
    """Illegal job status/step/progress transition."""
