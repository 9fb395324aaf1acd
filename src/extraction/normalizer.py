# src/extraction/normalizer.py — v1
"""Normalization of extracted exam questions before they are accepted.

Pure functions. Prompts lose their leading question number and point
annotations, known PDF artifacts are repaired, and math is forced into
exactly two delimiter forms: ``$...$`` inline and a ``$$`` block on its
own lines.
"""

from __future__ import annotations

import re

from examingest.core.models import Choice, ExtractedQuestion, Subpart
from examingest.extraction.schemas import CHOICE_LABELS, RawQuestion

_LEADING_NUMBER_RE = re.compile(r"^\s*(?:(?:Q|Question|Problem)\s*)?\d+\s*[.):](?!\d)\s*", re.IGNORECASE)
_POINTS_RE = re.compile(
    r"\s*[(\[]\s*(\d+(?:\.\d+)?)\s*(?:points?|pts?)\.?\s*[)\]]", re.IGNORECASE,
)
_INLINE_PAREN_RE = re.compile(r"\\\((.+?)\\\)", re.DOTALL)
_DISPLAY_BRACKET_RE = re.compile(r"\\\[(.+?)\\\]", re.DOTALL)
_SAME_LINE_DISPLAY_RE = re.compile(r"\$\$([^\n$]+?)\$\$")
_MATH_SEGMENT_RE = re.compile(r"(\$\$.*?\$\$|\$[^$]*\$)", re.DOTALL)

# "Z b a f(x) dx" is an integral whose sign was extracted as the letter Z.
_Z_INTEGRAL_RE = re.compile(
    r"(?<![A-Za-z\\])Z\s+(-?[\w.]+|\\infty|\\pi)\s+(-?[\w.]+|\\infty|\\pi)\s+([^\n$]*?)\s*(?:\\,\s*)?d([a-z])\b"
)
# "p 2" inside math is a radical whose sign was extracted as the letter p.
_P_RADICAL_RE = re.compile(r"(?<![A-Za-z\\])p\s*(\d+(?:\.\d+)?)")
_VECTOR_GLYPHS = {
    "~ı": r"\mathbf{i}",
    "~ȷ": r"\mathbf{j}",
    "~|": r"\mathbf{j}",
    "~k": r"\mathbf{k}",
}
_UNICODE_MINUS = "\u2212"


def strip_question_number(text: str) -> str:
    return _LEADING_NUMBER_RE.sub("", text, count=1)


def split_points(text: str) -> tuple[str, float | None]:
    """Remove "(N points)" / "(N pts)" annotations, returning the first value."""
    match = _POINTS_RE.search(text)
    points = float(match.group(1)) if match else None
    return _POINTS_RE.sub("", text).strip(), points


def normalize_delimiters(text: str) -> str:
    """Rewrite \\( \\) and \\[ \\] (and one-line $$ blocks) into the accepted forms."""
    text = _INLINE_PAREN_RE.sub(lambda m: f"${m.group(1).strip()}$", text)
    text = _DISPLAY_BRACKET_RE.sub(lambda m: f"\n\n$$\n{m.group(1).strip()}\n$$\n\n", text)
    text = _SAME_LINE_DISPLAY_RE.sub(lambda m: f"\n\n$$\n{m.group(1).strip()}\n$$\n\n", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def repair_artifacts(text: str) -> str:
    """Fix glyph substitutions typical of PDF text extraction."""
    text = text.replace(_UNICODE_MINUS, "-")
    for glyph, latex in _VECTOR_GLYPHS.items():
        text = text.replace(glyph, latex)
    text = _Z_INTEGRAL_RE.sub(r"\\int_{\2}^{\1} \3 \\, d\4", text)

    def _fix_math(match: re.Match[str]) -> str:
        return _P_RADICAL_RE.sub(r"\\sqrt{\1}", match.group(0))

    return _MATH_SEGMENT_RE.sub(_fix_math, text)


def normalize_prompt(text: str) -> str:
    """Full cleanup pipeline for a main question prompt."""
    text = strip_question_number(text)
    text, _ = split_points(text)
    return repair_artifacts(normalize_delimiters(text))


def normalize_choice_label(label: str) -> str:
    """Single lowercase letter a-e; anything else falls back to "a"."""
    first = label.strip()[:1].lower()
    return first if first in CHOICE_LABELS else "a"


def normalize_question(
    raw: RawQuestion,
    course_pack_id: str = "",
    source_exam: str = "",
    midterm_number: int | None = None,
) -> ExtractedQuestion:
    """Convert one raw extracted question into the domain model."""
    question_format = raw.questionFormat or ("multiple_choice" if raw.choices else "short_answer")

    choices: list[Choice] = []
    if question_format == "multiple_choice":
        choices = [
            Choice(label=normalize_choice_label(c.id), text=repair_artifacts(normalize_delimiters(c.text)))
            for c in raw.choices
        ]

    subparts: list[Subpart] = []
    for sp in raw.subparts:
        prompt, points = split_points(sp.prompt)
        subparts.append(Subpart(
            label=sp.id.strip().lower(),
            prompt=repair_artifacts(normalize_delimiters(prompt)),
            points=sp.points if sp.points is not None else points,
        ))

    return ExtractedQuestion(
        prompt=normalize_prompt(raw.prompt),
        question_format=question_format,
        choices=choices,
        subparts=subparts,
        question_order=raw.questionOrder,
        course_pack_id=course_pack_id,
        source_exam=source_exam,
        midterm_number=midterm_number,
    )
