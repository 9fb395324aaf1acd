# tests/unit/extraction/test_normalizer.py — v1
"""Tests for extraction/normalizer.py — prompt cleanup and math delimiters."""

from __future__ import annotations

import pytest

from examingest.extraction.normalizer import (
    normalize_choice_label,
    normalize_delimiters,
    normalize_prompt,
    normalize_question,
    repair_artifacts,
    split_points,
    strip_question_number,
)
from examingest.extraction.schemas import RawQuestion


class TestStripQuestionNumber:
    @pytest.mark.parametrize("text,expected", [
        ("1. What is $x$?", "What is $x$?"),
        ("12) Solve", "Solve"),
        ("Q3: Find the limit", "Find the limit"),
        ("Problem 4. Compute", "Compute"),
        ("  7 : Spaced out", "Spaced out"),
    ])
    def test_removes_leading_number(self, text, expected):
        assert strip_question_number(text) == expected

    def test_keeps_decimal_prefix(self):
        assert strip_question_number("3.5 is rational") == "3.5 is rational"

    def test_only_first_number(self):
        assert strip_question_number("1. Compute 2. then stop") == "Compute 2. then stop"


class TestSplitPoints:
    def test_parenthesized(self):
        assert split_points("(4 points) Find $E[X]$.") == ("Find $E[X]$.", 4.0)

    def test_bracketed_pts(self):
        assert split_points("Find x [10 pts]") == ("Find x", 10.0)

    def test_decimal_points(self):
        assert split_points("Solve (2.5 pt)") == ("Solve", 2.5)

    def test_no_points(self):
        assert split_points("Nothing here") == ("Nothing here", None)


class TestNormalizeDelimiters:
    def test_inline_parens(self):
        assert normalize_delimiters(r"Let \( x^2 \) be") == "Let $x^2$ be"

    def test_display_brackets(self):
        assert normalize_delimiters(r"\[x^2\]") == "$$\nx^2\n$$"

    def test_same_line_display(self):
        result = normalize_delimiters("Area: $$x^2$$ done")
        assert result == "Area: \n\n$$\nx^2\n$$\n\n done"

    def test_existing_block_untouched(self):
        text = "Intro\n\n$$\nx^2\n$$\n\nEnd"
        assert normalize_delimiters(text) == text

    def test_collapses_blank_runs(self):
        assert normalize_delimiters("a\n\n\n\nb") == "a\n\nb"


class TestRepairArtifacts:
    def test_unicode_minus(self):
        assert repair_artifacts("$x = −2$") == "$x = -2$"

    def test_vector_glyphs(self):
        assert repair_artifacts("3~ı + ~k") == r"3\mathbf{i} + \mathbf{k}"

    def test_integral_letter(self):
        assert repair_artifacts("$Z 1 0 x^2 dx$") == r"$\int_{0}^{1} x^2 \, dx$"

    def test_radical_inside_math(self):
        assert repair_artifacts("$p 2 + 1$") == r"$\sqrt{2} + 1$"

    def test_radical_outside_math_untouched(self):
        assert repair_artifacts("see p 2 of the notes") == "see p 2 of the notes"


class TestNormalizePrompt:
    def test_full_pipeline(self):
        raw = r"1. (5 points) Evaluate \(\lim_{x \to 0} \frac{\sin x}{x}\)."
        assert normalize_prompt(raw) == r"Evaluate $\lim_{x \to 0} \frac{\sin x}{x}$."


class TestNormalizeChoiceLabel:
    @pytest.mark.parametrize("label,expected", [
        ("a", "a"), ("B)", "b"), ("(c", "a"), ("E", "e"), ("", "a"), ("PARADOX c", "a"), ("f", "a"),
    ])
    def test_labels(self, label, expected):
        assert normalize_choice_label(label) == expected


class TestNormalizeQuestion:
    def test_multiple_choice(self):
        raw = RawQuestion.model_validate({
            "questionOrder": 2,
            "prompt": "2. Pick one",
            "choices": [{"id": "A", "text": r"\(1\)"}, {"id": "b", "text": "2"}],
        })
        q = normalize_question(raw, "course-1", "Fall 2023 Final", None)
        assert q.question_format == "multiple_choice"
        assert q.prompt == "Pick one"
        assert [(c.label, c.text) for c in q.choices] == [("a", "$1$"), ("b", "2")]
        assert all(c.is_correct is None for c in q.choices)
        assert q.source_exam == "Fall 2023 Final"
        assert q.midterm_number is None
        assert q.needs_review is True

    def test_short_answer_drops_choices(self):
        raw = RawQuestion.model_validate({
            "questionFormat": "short_answer",
            "prompt": "Explain",
            "choices": [{"id": "a", "text": "stray"}],
        })
        assert normalize_question(raw).choices == []

    def test_format_inferred_without_choices(self):
        raw = RawQuestion.model_validate({"prompt": "Explain"})
        assert normalize_question(raw).question_format == "short_answer"

    def test_subparts(self):
        raw = RawQuestion.model_validate({
            "questionFormat": "short_answer",
            "prompt": "3. Let $f(x) = 2x$.",
            "subparts": [
                {"id": "A", "prompt": "(4 points) Find $E[X]$."},
                {"id": "b", "prompt": "Find $P(X > 0.5)$.", "points": 8},
            ],
        })
        q = normalize_question(raw, midterm_number=1)
        assert [(s.label, s.prompt, s.points) for s in q.subparts] == [
            ("a", "Find $E[X]$.", 4.0),
            ("b", "Find $P(X > 0.5)$.", 8.0),
        ]
        assert q.midterm_number == 1
