# src/llm/errors.py — v1
"""Map provider SDK exceptions onto the extraction failure taxonomy.

Classification uses the HTTP-like status carried by the exception
(``status_code`` on anthropic errors, ``code`` on google-api-core errors)
and falls back to message inspection when no status is available.
"""

from __future__ import annotations

import logging

from examingest.core.errors import (
    ExtractionError,
    ExtractionQuotaExceeded,
    ExtractionRateLimited,
    ExtractionUnavailable,
    MalformedExtraction,
)

logger = logging.getLogger(__name__)

_QUOTA_MARKERS = ("quota", "billing", "payment", "credit balance", "insufficient_quota")


def _status_of(error: Exception) -> int | None:
    for attr in ("status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and 100 <= value < 600:
            return value
    return None


def classify_error(error: Exception, provider: str = "unknown") -> ExtractionError:
    """Wrap a provider exception in the matching ExtractionError subclass."""
    if isinstance(error, ExtractionError):
        return error

    status = _status_of(error)
    msg = str(error)
    lower = msg.lower()
    name = type(error).__name__.lower()

    if status == 402 or (status in (403, 429) and any(m in lower for m in _QUOTA_MARKERS)):
        result: ExtractionError = ExtractionQuotaExceeded(
            f"{provider} quota exhausted: {msg}", status_code=status,
        )
    elif status == 429 or (status is None and ("429" in lower or "rate limit" in lower)):
        result = ExtractionRateLimited(
            "Rate limit exceeded. Please try again later.", status_code=status or 429,
        )
    elif status is not None and 400 <= status < 500:
        result = MalformedExtraction(
            f"{provider} rejected the extraction request ({status}): {msg}",
            status_code=status,
        )
    elif status is not None and status >= 500:
        result = ExtractionUnavailable(
            f"{provider} unavailable ({status}): {msg}", status_code=status,
        )
    elif "timeout" in name or "connection" in name or "timeout" in lower:
        result = ExtractionUnavailable(f"{provider} unreachable: {msg}")
    else:
        result = ExtractionUnavailable(f"{provider} call failed: {type(error).__name__}: {msg}")

    logger.debug(
        "Classified %s (status=%s) as %s", type(error).__name__, status, type(result).__name__,
    )
    return result
