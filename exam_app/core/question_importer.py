"""Utilities for loading an exam question bank from disk.

Two formats are accepted.

JSON (``.json``) is either a bare list of question objects or an object with
``title``, ``sections`` and ``questions``::

    {
      "title": "Aptitude Quiz",
      "sections": [{"key": "general_awareness", "title": "General Awareness", "questions": 25}],
      "questions": [
        {"id": 1, "question_type": "general_awareness", "question_level": "easy",
         "question_text": "...", "option_a": "...", "option_b": "...",
         "option_c": "...", "option_d": null, "correct_answer": "b",
         "explanation": "..."}
      ]
    }

Text (anything else) repeats blocks separated by blank lines or '---'::

    ID: 7                 (optional, defaults to the block position)
    SECTION: general_awareness
    LEVEL: easy
    Q: Question text (markdown + LaTeX). Following lines continue the question.
    A: First option
    B: Second option
    C: Third option       (options may be left out)
    D: Fourth option
    CORRECT: B
    EXPLANATION: Optional explanation, may continue on following lines.

Text files always use the default section layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from exam_app.constants.exam_constants import DEFAULT_EXAM_TITLE, OPTION_KEYS
from exam_app.core.models import Question, SectionDefinition, normalize_option_key
from exam_app.core.section_index import default_section_definitions

logger = logging.getLogger(__name__)


class LoadFailure(Exception):
    """Raised when question or section data is unavailable or malformed."""


@dataclass(slots=True)
class ImportedExam:
    """Container for imported exam metadata, sections and questions."""

    source_path: Path | None
    title: str
    questions: list[Question]
    sections: list[SectionDefinition] = field(default_factory=default_section_definitions)


class QuestionRecord(BaseModel):
    """One question as stored in a JSON question bank."""

    id: int
    question_type: str | None = None
    question_level: str | None = None
    question_text: str = Field(min_length=1)
    option_a: str | None = None
    option_b: str | None = None
    option_c: str | None = None
    option_d: str | None = None
    correct_answer: str
    explanation: str | None = None

    @model_validator(mode="after")
    def _check_correct_answer(self) -> QuestionRecord:
        key = normalize_option_key(self.correct_answer)
        if key not in OPTION_KEYS:
            raise ValueError(f"correct_answer must be one of {', '.join(OPTION_KEYS)}")
        if getattr(self, f"option_{key}") is None:
            raise ValueError(f"correct_answer '{key}' refers to a missing option")
        return self

    def to_question(self) -> Question:
        return Question(
            id=self.id,
            question_text=self.question_text.strip(),
            options=(self.option_a, self.option_b, self.option_c, self.option_d),
            correct_option=self.correct_answer,
            section_key=self.question_type,
            level=self.question_level,
            explanation=self.explanation,
        )


class SectionRecord(BaseModel):
    key: str = Field(min_length=1)
    title: str
    questions: int = Field(ge=0)


class ExamRecord(BaseModel):
    title: str = DEFAULT_EXAM_TITLE
    sections: list[SectionRecord] | None = None
    questions: list[QuestionRecord]


def load_exam_from_file(file_path: Path) -> ImportedExam:
    """Load a question bank, raising LoadFailure for any unusable input."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadFailure(f"Could not read question bank {file_path}: {exc}") from exc

    if file_path.suffix.lower() == ".json":
        exam = parse_exam_json(text)
    else:
        exam = ImportedExam(source_path=None, title=DEFAULT_EXAM_TITLE, questions=parse_exam_text(text))
    exam.source_path = file_path
    logger.info("Loaded %d questions from %s", len(exam.questions), file_path)
    return exam


def parse_exam_json(text: str) -> ImportedExam:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadFailure(f"Question bank is not valid JSON: {exc}") from exc

    if isinstance(payload, list):
        payload = {"questions": payload}
    try:
        record = ExamRecord.model_validate(payload)
    except ValidationError as exc:
        raise LoadFailure(f"Question bank failed validation: {exc}") from exc

    sections = (
        [SectionDefinition(s.key, s.title, s.questions) for s in record.sections]
        if record.sections is not None
        else default_section_definitions()
    )
    return ImportedExam(
        source_path=None,
        title=record.title,
        questions=[question.to_question() for question in record.questions],
        sections=sections,
    )


def parse_exam_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block, position) for position, block in enumerate(blocks, start=1) if block]


_LETTERS = tuple(key.upper() for key in OPTION_KEYS)
_FIELDS = ("ID:", "SECTION:", "LEVEL:", "CORRECT:")


def _parse_block(block: str, position: int) -> Question:
    question_lines: list[str] = []
    explanation_lines: list[str] = []
    options: dict[str, str] = {}
    fields: dict[str, str] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("EXPLANATION:"):
            explanation_lines = [line.split(":", 1)[1].strip()]
            current_section = "EXPLANATION"
            continue

        field_name = next((name for name in _FIELDS if upper.startswith(name)), None)
        if field_name is not None:
            fields[field_name[:-1]] = line.split(":", 1)[1].strip()
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "EXPLANATION":
            explanation_lines.append(line)
        elif current_section in _LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise LoadFailure(f"Question {position}: text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise LoadFailure(f"Question {position}: question text missing (Q: ...)")
    if not options:
        raise LoadFailure(f"Question {position}: at least one option (A-D) is required.")
    if any(not text.strip() for text in options.values()):
        raise LoadFailure(f"Question {position}: option text cannot be empty.")

    correct = normalize_option_key(fields.get("CORRECT"))
    if correct is None:
        raise LoadFailure(f"Question {position}: CORRECT is required.")
    if correct.upper() not in options:
        raise LoadFailure(f"Question {position}: CORRECT must name one of the given options.")

    question_id = position
    if "ID" in fields:
        try:
            question_id = int(fields["ID"])
        except ValueError as exc:
            raise LoadFailure(f"Question {position}: ID must be an integer.") from exc

    explanation = "\n".join(explanation_lines).strip() or None
    return Question(
        id=question_id,
        question_text=question_text,
        options=tuple(options[letter].strip() if letter in options else None for letter in _LETTERS),
        correct_option=correct,
        section_key=fields.get("SECTION") or None,
        level=fields.get("LEVEL") or None,
        explanation=explanation,
    )
