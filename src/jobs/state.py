# src/jobs/state.py — v1
"""Explicit job state machine.

States are small frozen dataclasses (Pending, Processing, Completed,
Failed); ``transition`` is the only way to move between them and rejects
backward status moves, step regressions and progress decreases.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from examingest.core.errors import InvalidTransitionError
from examingest.core.models import IngestionJob


class StepCode(str, Enum):
    """Ordered step vocabulary persisted as IngestionJob.current_step."""

    DOWNLOAD = "A1"
    ENCODE = "A2"
    EXTRACT = "B1"
    PARSE = "B2"
    PERSIST = "B3"
    DONE = "B4"

    @property
    def progress_pct(self) -> int:
        return _STEP_PROGRESS[self]


_STEP_PROGRESS = {
    StepCode.DOWNLOAD: 10,
    StepCode.ENCODE: 20,
    StepCode.EXTRACT: 30,
    StepCode.PARSE: 60,
    StepCode.PERSIST: 80,
    StepCode.DONE: 100,
}


@dataclass(frozen=True)
class Pending:
    status = "pending"

    def as_fields(self) -> dict[str, Any]:
        return {"status": self.status, "current_step": None, "progress_pct": 0}


@dataclass(frozen=True)
class Processing:
    step: StepCode
    progress_pct: int
    status = "processing"

    def __post_init__(self) -> None:
        if not 0 <= self.progress_pct <= 100:
            raise InvalidTransitionError(f"progress {self.progress_pct} outside 0-100")

    def as_fields(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "current_step": self.step.value,
            "progress_pct": self.progress_pct,
        }


@dataclass(frozen=True)
class Completed:
    status = "completed"
    step = StepCode.DONE
    progress_pct = 100

    def as_fields(self) -> dict[str, Any]:
        return {"status": self.status, "current_step": self.step.value, "progress_pct": 100}


@dataclass(frozen=True)
class Failed:
    reason: str
    step: StepCode | None = None
    progress_pct: int = 0
    status = "failed"

    def as_fields(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "current_step": self.step.value if self.step else None,
            "progress_pct": self.progress_pct,
            "error_message": self.reason,
        }


JobState = Union[Pending, Processing, Completed, Failed]


def transition(current: JobState, target: JobState) -> JobState:
    """Validate a state change and return ``target``.

    Raises:
        InvalidTransitionError: If the move is illegal.
    """
    if isinstance(current, (Completed, Failed)):
        raise InvalidTransitionError(f"job already {current.status}; cannot move to {target.status}")

    if isinstance(current, Pending):
        if isinstance(target, (Processing, Failed)):
            return target
        raise InvalidTransitionError(f"pending job cannot move to {target.status}")

    # current is Processing
    if isinstance(target, Pending):
        raise InvalidTransitionError("processing job cannot return to pending")
    if isinstance(target, Processing) and target.step.value < current.step.value:
        raise InvalidTransitionError(f"step regression {current.step.value} -> {target.step.value}")
    if target.progress_pct < current.progress_pct:
        raise InvalidTransitionError(
            f"progress decrease {current.progress_pct} -> {target.progress_pct}"
        )
    return target


def state_of(job: IngestionJob) -> JobState:
    """Rebuild the state object from a persisted job record."""
    step = StepCode(job.current_step) if job.current_step in _STEP_VALUES else None
    if job.status == "pending":
        return Pending()
    if job.status == "completed":
        return Completed()
    if job.status == "failed":
        return Failed(reason=job.error_message or "", step=step, progress_pct=job.progress_pct)
    return Processing(step=step or StepCode.DOWNLOAD, progress_pct=job.progress_pct)


_STEP_VALUES = {s.value for s in StepCode}
