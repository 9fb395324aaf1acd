# src/logging/context.py — v1
"""Contextual logging support — attach job_id, course_pack_id, step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per job run.
_job_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "job_id", default=None
)
_course_pack_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "course_pack_id", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    job_id: str | None = None
    course_pack_id: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        job_id=_job_id.get(),
        course_pack_id=_course_pack_id.get(),
        step=_step.get(),
    )


def set_job_context(job_id: str, course_pack_id: str | None = None) -> None:
    """Set job-level context (called once per job run)."""
    _job_id.set(job_id)
    _course_pack_id.set(course_pack_id)


def set_step_context(step: str | None) -> None:
    """Set step-level context (called on every step transition)."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _job_id.set(None)
    _course_pack_id.set(None)
    _step.set(None)
