# src/core/exam_metadata.py — v1
"""Exam metadata normalizer — pure functions, no I/O.

Canonical exam-type codes are "1", "2", "3" (midterm N) and "f" (final).
The derived exam identity ("Spring 2024 Midterm 1") is the idempotency
key used by the question replacement store.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from examingest.core.models import Semester

FINAL_CODE = "f"
MIDTERM_CODES = ("1", "2", "3")

_SEMESTERS: dict[str, Semester] = {
    "spring": "Spring",
    "summer": "Summer",
    "fall": "Fall",
    "autumn": "Fall",
    "winter": "Winter",
}

_MIDTERM_RE = re.compile(r"(?:midterm|exam)\s*#?\s*(\d)(?!\d)", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(20\d{2})\b")


def parse_exam_type(raw: str | int | None) -> str | None:
    """Normalize a raw exam-type value to "1" | "2" | "3" | "f".

    Accepts the canonical codes plus loose forms such as "F", "Final",
    "Final Exam", "Midterm 2" or the integer 2. Returns None when the
    value cannot be classified.
    """
    if raw is None:
        return None
    value = str(raw).strip().lower()
    if not value:
        return None
    if value == FINAL_CODE or "final" in value:
        return FINAL_CODE
    if value in MIDTERM_CODES:
        return value
    match = _MIDTERM_RE.search(value) or re.fullmatch(r"m(?:t)?\s*(\d)", value)
    if match and match.group(1) in MIDTERM_CODES:
        return match.group(1)
    return None


def format_exam_type(code: str | None) -> str:
    """Display form of an exam-type code ("Midterm 1", "Final")."""
    if not code:
        return ""
    if code == FINAL_CODE:
        return "Final"
    if code in MIDTERM_CODES:
        return f"Midterm {code}"
    return code


def is_final(code: str | None) -> bool:
    return code == FINAL_CODE


def midterm_number(code: str | None) -> int | None:
    """Midterm number for midterm codes; None for finals and unknown codes."""
    if code in MIDTERM_CODES:
        return int(code)  # type: ignore[arg-type]
    return None


def normalize_semester(raw: str | None) -> Semester | None:
    if not raw:
        return None
    return _SEMESTERS.get(raw.strip().lower())


def derive_exam_identity(
    semester: str | None,
    year: int | None,
    exam_type: str | None,
    fallback: str = "",
) -> str:
    """Build the canonical exam identity string.

    Deterministic in its inputs: loose spellings ("spring", "Midterm 1")
    collapse to the same identity as canonical ones ("Spring", "1").
    Falls back to ``fallback`` (typically the uploaded file name) when
    nothing identifying was extracted.
    """
    parts: list[str] = []
    canonical_semester = normalize_semester(semester)
    if canonical_semester and year:
        parts.append(f"{canonical_semester} {year}")
    formatted = format_exam_type(parse_exam_type(exam_type))
    if formatted:
        parts.append(formatted)
    return " ".join(parts) or fallback


def midterm_number_from_title(title: str) -> int | None:
    """Parse "Midterm 2" / "Exam 1" style calendar titles."""
    match = _MIDTERM_RE.search(title)
    return int(match.group(1)) if match else None


@dataclass(frozen=True)
class ParsedExamName:
    """Fields recovered from a free-form exam name."""

    original_name: str
    year: int | None = None
    semester: Semester | None = None
    exam_type: str | None = None
    midterm_number: int | None = None

    @property
    def display_label(self) -> str:
        parts: list[str] = []
        if self.semester:
            parts.append(self.semester)
        if self.year:
            parts.append(str(self.year))
        if self.exam_type:
            if self.midterm_number:
                parts.append(f"{self.exam_type} {self.midterm_number}")
            else:
                parts.append(self.exam_type)
        return " ".join(parts) if parts else self.original_name

    @property
    def exam_type_code(self) -> str | None:
        """Canonical exam-type code ("1", "f", ...) recovered from the name."""
        if not self.exam_type:
            return None
        return parse_exam_type(self.original_name)


def parse_exam_name(name: str) -> ParsedExamName:
    """Parse e.g. "Fall 2023 Midterm 1" or "MA 266 Exam 2 Fall 2022"."""
    lower = name.lower()

    year_match = _YEAR_RE.search(name)
    year = int(year_match.group(1)) if year_match else None

    semester: Semester | None = None
    for token, canonical in _SEMESTERS.items():
        if token in lower:
            semester = canonical
            break

    exam_type: str | None = None
    for label in ("Final", "Midterm", "Quiz", "Exam"):
        if label.lower() in lower:
            exam_type = label
            break

    match = re.search(r"midterm\s*(\d)", name, re.IGNORECASE)
    return ParsedExamName(
        original_name=name,
        year=year,
        semester=semester,
        exam_type=exam_type,
        midterm_number=int(match.group(1)) if match else None,
    )
