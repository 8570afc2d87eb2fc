"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from exam_app.constants.exam_constants import (
    DEFAULT_EXAM_TITLE,
    DEFAULT_MARKS_PER_CORRECT,
    DEFAULT_MAX_TIME_SECONDS,
    DEFAULT_PENALTY_PER_WRONG,
    OPTION_KEYS,
    SUBMIT_DELAY_MS,
)


def normalize_option_key(key: str | None) -> str | None:
    """Return the canonical (lowercase, stripped) form of an option key."""
    if key is None:
        return None
    cleaned = str(key).strip().lower()
    return cleaned or None


class QuestionStatus(str, Enum):
    """Visitation/review status of a single question."""

    NOT_VISITED = "not_visited"
    NOT_ANSWERED = "not_answered"
    ANSWERED = "answered"
    MARKED_FOR_REVIEW = "marked_for_review"
    ANSWERED_AND_MARKED = "answered_and_marked"

    @property
    def has_answer(self) -> bool:
        return self in (QuestionStatus.ANSWERED, QuestionStatus.ANSWERED_AND_MARKED)

    @property
    def is_marked(self) -> bool:
        return self in (QuestionStatus.MARKED_FOR_REVIEW, QuestionStatus.ANSWERED_AND_MARKED)


class SessionState(str, Enum):
    """Lifecycle states of an exam session."""

    LOADING = "loading"
    TAKING = "taking"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERROR = "error"


class QuestionOutcome(str, Enum):
    """Result of a single question after grading."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNATTEMPTED = "unattempted"


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with up to four options.

    ``options`` is aligned with ``OPTION_KEYS``; ``None`` marks an absent option.
    The correct key is stored in its normalized (lowercase) form.
    """

    id: int
    question_text: str
    options: tuple[str | None, ...]
    correct_option: str | None
    section_key: str | None = None
    level: str | None = None
    explanation: str | None = None

    def __post_init__(self) -> None:
        padded = tuple(self.options) + (None,) * (len(OPTION_KEYS) - len(self.options))
        object.__setattr__(self, "options", padded[: len(OPTION_KEYS)])
        object.__setattr__(self, "correct_option", normalize_option_key(self.correct_option))

    def option_text(self, key: str) -> str | None:
        normalized = normalize_option_key(key)
        if normalized not in OPTION_KEYS:
            return None
        return self.options[OPTION_KEYS.index(normalized)]

    def available_keys(self) -> list[str]:
        """Keys whose option text is present, in display order."""
        return [key for key, text in zip(OPTION_KEYS, self.options) if text is not None]


@dataclass(frozen=True, slots=True)
class SectionDefinition:
    """Declared section of an exam: key, display title and question count."""

    key: str
    title: str
    question_count: int


@dataclass(frozen=True, slots=True)
class SectionRange:
    """Contiguous ``[start, end)`` slice of the flattened question list."""

    key: str
    title: str
    start: int
    end: int

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end

    @property
    def question_count(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    """Correctness counts and score for a set of questions."""

    correct_count: int = 0
    incorrect_count: int = 0
    unattempted_count: int = 0
    score: float = 0.0
    max_score: float = 0.0

    @property
    def attempted_count(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def total_questions(self) -> int:
        return self.attempted_count + self.unattempted_count

    @property
    def accuracy(self) -> float:
        """Percentage of attempted questions answered correctly (0 when none attempted)."""
        if self.attempted_count == 0:
            return 0.0
        return self.correct_count / self.attempted_count * 100

    @property
    def attempt_rate(self) -> float:
        """Percentage of questions attempted (0 when there are no questions)."""
        if self.total_questions == 0:
            return 0.0
        return self.attempted_count / self.total_questions * 100


@dataclass(frozen=True, slots=True)
class SectionAnalysis:
    """Score summary restricted to one section."""

    key: str
    title: str
    summary: ScoreSummary


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Immutable snapshot of overall and per-section analytics."""

    overall: ScoreSummary
    sections: tuple[SectionAnalysis, ...] = ()
    outcomes: tuple[QuestionOutcome, ...] = ()
    time_taken_seconds: int = 0


@dataclass(frozen=True, slots=True)
class ExamSettings:
    """Configuration for one exam session."""

    max_time_seconds: int = DEFAULT_MAX_TIME_SECONDS
    marks_per_correct: float = DEFAULT_MARKS_PER_CORRECT
    penalty_per_wrong: float = DEFAULT_PENALTY_PER_WRONG
    submit_delay_ms: int = SUBMIT_DELAY_MS
    title: str = DEFAULT_EXAM_TITLE

    def validated(self) -> ExamSettings:
        if self.max_time_seconds <= 0:
            raise ValueError("Exam duration must be a positive number of seconds.")
        if self.marks_per_correct < 0:
            raise ValueError("Marks per correct answer cannot be negative.")
        if self.penalty_per_wrong < 0:
            raise ValueError("Penalty per wrong answer cannot be negative.")
        if self.submit_delay_ms < 0:
            raise ValueError("Submit delay cannot be negative.")
        return self


@dataclass(slots=True)
class ExamPattern:
    """Summary of the exam layout shown before and during the test."""

    total_questions: int
    total_marks: float
    marks_per_correct: float
    time_minutes: int
    negative_marking: float
    sections: list[tuple[str, int, float]] = field(default_factory=list)
