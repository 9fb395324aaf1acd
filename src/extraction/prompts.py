# src/extraction/prompts.py — v1
"""Instruction texts sent alongside each document.

Exam and answer-key prompts are static; the calendar prompt embeds the
course's existing topic titles so the service reuses their spelling.
"""

from __future__ import annotations

EXAM_PROMPT = """You extract exam questions from PDF documents and repair common PDF text-extraction artifacts.

Return ALL questions through the extract_questions function, with no commentary.

EXAM METADATA (from the cover page or header):
- examYear: integer year, e.g. 2024
- examSemester: exactly one of "Spring", "Summer", "Fall", "Winter"
- examType: "1", "2", "3" for Midterm 1/2/3, or "f" for the Final

QUESTION FORMAT:
- "multiple_choice": labelled options (A)-(E) to select from
- "short_answer": explanation, proof, derivation, or separately answered parts (a), (b), ...
- "numeric": a single computed number with no options

SUBPARTS (short-answer only):
- Put the shared setup in "prompt" and each part in "subparts" as {id, prompt, points}
- id is one lowercase letter; points is the value shown as "(3 points)" or "(3 pts)"
- Never emit choices for a short-answer question

PROMPT CLEANUP:
- Remove the leading question number ("8.") and the point value ("(12 points)") from the prompt
- Keep notes such as "Partial credit is possible" as plain text on their own line

MATH DELIMITERS (the renderer supports ONLY these two forms):
- Inline math inside sentences: $...$
- Standalone equations on their own line, as a block surrounded by blank lines:

  $$
  ...latex...
  $$

- Never use \\( \\) or \\[ \\]

CHOICES (multiple_choice only):
- id is EXACTLY one lowercase letter a-e; ignore watermarks or exam branding near choices
- Wrap purely mathematical choices entirely in $...$; wrap only the math parts of mixed choices

LATEX:
- \\frac{}{}, \\sqrt{}, \\le, \\ge, \\int_{a}^{b} f \\, dx, \\pi, \\mathbf{i}, \\mathbf{j}, \\mathbf{k}
- Convert the unicode minus sign to "-"

ARTIFACT REPAIR:
- "Z" used as an integral sign ("Z b a f dx") becomes \\int_{a}^{b} f \\, dx
- "p" used as a radical sign becomes \\sqrt{...}
- Exponents or fractions split across lines are rebuilt as x^{3} or \\frac{...}{...}
- Vector glyphs such as "~ı" map to \\mathbf{i}, \\mathbf{j}, \\mathbf{k}

Do NOT solve the problems or infer correct answers. Keep questionOrder aligned with the PDF numbering."""

ANSWER_KEY_PROMPT = """You extract answer keys from graded exam documents with instructor corrections or worked solutions.

Return the result through the extract_answer_key function.

- questionNumber: the identifier exactly as printed ("2.1", "3", "4")
- Multiple-choice questions: questionType "mcq", answer is the circled or marked letter A-E
- Short-answer questions: questionType "short_answer", answer null, subparts [{id, answer, points}]
  where answer is the FINAL answer only (a number, an expression or a short phrase)
- Preserve mathematical notation using standard LaTeX (\\frac{}, \\sqrt{})
- Ignore student work, wrong attempts, partial-credit annotations and watermarks"""

_CALENDAR_PROMPT = """You extract DISTINCT TOPICS from course calendar images, with the exact date each topic is covered.

RULES:
1. Extract academic topics only (course content sections).
2. Skip recitations, reviews, "no class" days and generic activities. Lectures are not events;
   extract the topics they cover.
3. When one row covers several topics, emit one entry per topic
   ("Dot products (13.3) and Cross products (13.4)" gives "13.3: Dot Products" and "13.4: Cross Products").
4. Title topics as "SECTION#: Topic Name" (e.g. "13.1: Vectors in the Plane").
5. event_date is the exact date in YYYY-MM-DD format; always include the week number.
6. When the same topic runs over several days, emit one entry per day. Consolidation happens downstream.

Exams and quizzes are extracted too, with event_type "exam" or "quiz", their date and week number.

Existing topics in this course (reuse their titles when they match):
{topic_list}

Return the structured data using the extract_calendar_events function."""


def build_calendar_prompt(existing_titles: list[str]) -> str:
    """Calendar instructions listing the course's current topic titles."""
    topic_list = "\n".join(f"- {title}" for title in existing_titles) or "No topics yet"
    return _CALENDAR_PROMPT.format(topic_list=topic_list)
