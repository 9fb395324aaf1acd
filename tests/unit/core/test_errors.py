# tests/unit/core/test_errors.py — v1
"""Tests for core/errors.py — failure taxonomy and retryable flags."""

from __future__ import annotations

from examingest.core.errors import (
    AnswerKeyFailure,
    DownloadFailure,
    EmptyExtractionError,
    ExtractionError,
    ExtractionQuotaExceeded,
    ExtractionRateLimited,
    ExtractionUnavailable,
    IngestionError,
    JobNotFoundError,
    MalformedExtraction,
)


class TestHierarchy:
    def test_all_derive_from_ingestion_error(self):
        for cls in (
            JobNotFoundError, DownloadFailure, ExtractionError, AnswerKeyFailure,
            ExtractionRateLimited, ExtractionQuotaExceeded, MalformedExtraction,
            ExtractionUnavailable, EmptyExtractionError,
        ):
            assert issubclass(cls, IngestionError)

    def test_empty_is_malformed(self):
        assert issubclass(EmptyExtractionError, MalformedExtraction)


class TestRetryable:
    def test_retryable_classes(self):
        assert ExtractionRateLimited("x").retryable is True
        assert ExtractionUnavailable("x").retryable is True

    def test_non_retryable_classes(self):
        assert ExtractionQuotaExceeded("x").retryable is False
        assert MalformedExtraction("x").retryable is False
        assert AnswerKeyFailure("x").retryable is False


class TestMessages:
    def test_not_found_message(self):
        err = JobNotFoundError("job-9")
        assert err.job_id == "job-9"
        assert "job-9" in err.message

    def test_download_failure_message(self):
        err = DownloadFailure("a/b.pdf", "object not found")
        assert err.path == "a/b.pdf"
        assert str(err) == "Failed to download a/b.pdf: object not found"

    def test_status_code_kept(self):
        assert ExtractionRateLimited("slow down", status_code=429).status_code == 429
