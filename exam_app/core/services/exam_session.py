"""Service owning the state of one exam attempt, from load to submission."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
import logging

from exam_app.core.analysis import analyze
from exam_app.core.models import (
    AnalysisResult,
    ExamSettings,
    Question,
    QuestionStatus,
    SectionDefinition,
    SectionRange,
    SessionState,
    normalize_option_key,
)
from exam_app.core.section_index import (
    build_section_ranges,
    locate_section,
    locate_section_index,
    sort_questions,
)
from exam_app.core.services.answer_store import AnswerStore
from exam_app.core.services.countdown import CountdownTimer
from exam_app.core.services.status_tracker import StatusEvent, StatusTracker

logger = logging.getLogger(__name__)

EMPTY_SESSION_MESSAGE = "Cannot submit an empty quiz."

Scheduler = Callable[[int, Callable[[], None]], None]


class EmptySessionError(Exception):
    """Raised (as an event payload) when submitting a session without questions."""


class SessionEventKind(Enum):
    SUBMIT_REQUESTED = auto()
    SUBMITTED = auto()
    AUTO_SUBMITTED = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class SessionEvent:
    kind: SessionEventKind
    message: str | None = None
    error: Exception | None = None


def run_immediately(delay_ms: int, callback: Callable[[], None]) -> None:
    callback()


class ExamSession:
    """State machine for a single exam attempt.

    The session is the only owner of the answer store, the status tracker and
    the countdown. Navigation, answering, marking, clearing and ticking are
    honoured only while the session is ``TAKING``; outside it they return
    ``False`` and change nothing.

    Submission has two halves: the synchronous half freezes the clock and
    moves to ``SUBMITTING``, and the second half (scheduled through
    ``scheduler`` after ``settings.submit_delay_ms``) grades the answers and
    moves to ``SUBMITTED``.
    """

    def __init__(
        self,
        settings: ExamSettings | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self._settings = (settings or ExamSettings()).validated()
        self._schedule = scheduler or run_immediately
        self._listeners: list[Callable[[SessionEvent], None]] = []

        self._state = SessionState.LOADING
        self._questions: list[Question] = []
        self._sections: list[SectionRange] = []
        self._answers = AnswerStore()
        self._statuses = StatusTracker()
        self._timer = CountdownTimer(self._settings.max_time_seconds, on_expired=self._handle_expired)
        self._current_index = 0
        self._expanded_section_index = -1
        self._error_message: str | None = None
        self._result: AnalysisResult | None = None
        self._auto_submitted = False
        self._attempt = 0

        self._revision = 0
        self._cached_analysis: tuple[tuple[int, int], AnalysisResult] | None = None

    # --- Events ---

    def subscribe(self, listener: Callable[[SessionEvent], None]) -> Callable[[], None]:
        """Register ``listener`` for session events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # --- Read-only view ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def settings(self) -> ExamSettings:
        return self._settings

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def section_ranges(self) -> list[SectionRange]:
        return list(self._sections)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_question(self) -> Question | None:
        if 0 <= self._current_index < len(self._questions):
            return self._questions[self._current_index]
        return None

    @property
    def current_answer(self) -> str | None:
        return self._answers.get(self._current_index)

    @property
    def remaining_seconds(self) -> int:
        return self._timer.remaining_seconds

    @property
    def timer_running(self) -> bool:
        return self._timer.is_running()

    @property
    def expanded_section_index(self) -> int:
        return self._expanded_section_index

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def result(self) -> AnalysisResult | None:
        """Frozen analysis, available once the session is ``SUBMITTED``."""
        return self._result

    @property
    def auto_submitted(self) -> bool:
        return self._auto_submitted

    def answer_for(self, index: int) -> str | None:
        return self._answers.get(index)

    def answers(self) -> Mapping[int, str]:
        return self._answers.snapshot()

    def status(self, index: int) -> QuestionStatus:
        return self._statuses.get(index)

    def statuses(self) -> dict[int, QuestionStatus]:
        return self._statuses.snapshot()

    def status_counts(self) -> dict[QuestionStatus, int]:
        return self._statuses.counts()

    def current_section(self) -> SectionRange | None:
        return locate_section(self._sections, self._current_index)

    def is_taking(self) -> bool:
        return self._state is SessionState.TAKING

    def analysis(self) -> AnalysisResult:
        """Overall and per-section analysis of the answers given so far."""
        if self._result is not None:
            return self._result
        key = (self._revision, self._timer.elapsed_seconds)
        if self._cached_analysis is None or self._cached_analysis[0] != key:
            self._cached_analysis = (key, self._analyze(self._answers.snapshot(), key[1]))
        return self._cached_analysis[1]

    def _analyze(self, answers: Mapping[int, str], time_taken_seconds: int) -> AnalysisResult:
        return analyze(
            self._questions,
            answers,
            self._sections,
            self._settings.marks_per_correct,
            self._settings.penalty_per_wrong,
            time_taken_seconds=time_taken_seconds,
        )

    # --- Lifecycle ---

    def reset(self, settings: ExamSettings | None = None) -> None:
        """Drop the current attempt and return to ``LOADING`` for a new load."""
        if settings is not None:
            self._settings = settings.validated()
        self._timer.stop()
        self._timer.reset(self._settings.max_time_seconds)
        self._state = SessionState.LOADING
        self._questions = []
        self._sections = []
        self._answers.reset()
        self._statuses.initialize(0)
        self._current_index = 0
        self._expanded_section_index = -1
        self._error_message = None
        self._result = None
        self._auto_submitted = False
        self._attempt += 1
        self._touch()

    def load(
        self,
        questions: Sequence[Question],
        section_definitions: Sequence[SectionDefinition],
    ) -> bool:
        if self._state is not SessionState.LOADING:
            return self._ignore("load")

        self._questions = sort_questions(questions, section_definitions)
        self._sections = build_section_ranges(section_definitions)
        self._answers.reset()
        self._statuses.initialize(len(self._questions))
        self._timer.reset(self._settings.max_time_seconds)
        self._current_index = 0
        self._expanded_section_index = 0 if self._sections else -1
        self._error_message = None
        self._result = None
        self._auto_submitted = False
        self._attempt += 1
        self._state = SessionState.TAKING
        self._touch()

        if self._questions:
            self._timer.start()
            logger.info(
                "Exam loaded with %d questions in %d sections",
                len(self._questions),
                len(self._sections),
            )
        else:
            logger.warning("Exam loaded without questions; submission is disabled")
        return True

    def fail(self, message: str, error: Exception | None = None) -> None:
        """Move to ``ERROR`` from any state; only a reset and reload recovers."""
        self._timer.stop()
        self._state = SessionState.ERROR
        self._error_message = message
        logger.error("Exam session failed: %s", message)
        self._emit(SessionEvent(SessionEventKind.ERROR, message=message, error=error))

    # --- Answering ---

    def select_option(self, option_key: str) -> bool:
        question = self._focused_question("select_option")
        if question is None:
            return False
        normalized = normalize_option_key(option_key)
        if normalized not in question.available_keys():
            logger.debug("Ignoring unknown option %r for question %d", option_key, question.id)
            return False
        self._answers.set(self._current_index, normalized)
        self._statuses.apply(self._current_index, StatusEvent.SELECT_OPTION)
        self._touch()
        return True

    def clear_response(self) -> bool:
        if self._focused_question("clear_response") is None:
            return False
        self._answers.clear(self._current_index)
        self._statuses.apply(self._current_index, StatusEvent.CLEAR_ANSWER)
        self._touch()
        return True

    def mark_for_review(self) -> bool:
        if self._focused_question("mark_for_review") is None:
            return False
        self._statuses.apply(self._current_index, StatusEvent.MARK_FOR_REVIEW)
        return True

    # --- Navigation ---

    def next(self) -> bool:
        return self._navigate(self._current_index + 1, "next")

    def previous(self) -> bool:
        return self._navigate(self._current_index - 1, "previous")

    def jump_to(self, index: int) -> bool:
        return self._navigate(index, "jump_to")

    def toggle_section(self, position: int) -> bool:
        """Expand the navigator section at ``position``, or collapse it if already open."""
        if not self.is_taking():
            return self._ignore("toggle_section")
        if not 0 <= position < len(self._sections):
            return False
        self._expanded_section_index = -1 if position == self._expanded_section_index else position
        return True

    def _navigate(self, target: int, operation: str) -> bool:
        if not self.is_taking():
            return self._ignore(operation)
        if not 0 <= target < len(self._questions):
            return False
        self._leave_current()
        self._current_index = target
        self._statuses.apply(target, StatusEvent.ENTER_QUESTION)
        section_position = locate_section_index(self._sections, target)
        if section_position != -1:
            self._expanded_section_index = section_position
        return True

    def _leave_current(self) -> None:
        # Reads the answer store after every mutation of the current event has applied.
        if not 0 <= self._current_index < len(self._questions):
            return
        if not self._answers.has_answer(self._current_index):
            self._statuses.apply(self._current_index, StatusEvent.LEAVE_UNANSWERED)

    # --- Timer ---

    def tick(self) -> bool:
        """Advance the countdown by one second; returns False when no tick was taken."""
        if not self.is_taking() or not self._timer.is_running():
            return False
        self._timer.tick()
        return True

    def _handle_expired(self) -> None:
        self.submit(auto=True)

    # --- Submission ---

    def prompt_submit(self) -> bool:
        if not self.is_taking() or not self._questions:
            return self._ignore("prompt_submit")
        self._emit(SessionEvent(SessionEventKind.SUBMIT_REQUESTED))
        return True

    def submit(self, auto: bool = False) -> bool:
        if not self.is_taking():
            return self._ignore("submit")
        if not self._questions:
            error = EmptySessionError(EMPTY_SESSION_MESSAGE)
            logger.warning("Submit requested for an empty exam")
            self.fail(str(error), error)
            return False

        self._leave_current()
        self._timer.stop()
        self._state = SessionState.SUBMITTING
        self._auto_submitted = auto
        elapsed = self._timer.elapsed_seconds
        answers = self._answers.snapshot()
        attempt = self._attempt
        logger.info("Submitting exam (%s) after %d seconds", "auto" if auto else "manual", elapsed)
        self._schedule(
            self._settings.submit_delay_ms,
            lambda: self._complete_submission(attempt, answers, elapsed, auto),
        )
        return True

    def _complete_submission(
        self, attempt: int, answers: Mapping[int, str], elapsed: int, auto: bool
    ) -> None:
        # A completion scheduled by an earlier attempt must not grade this one.
        if attempt != self._attempt or self._state is not SessionState.SUBMITTING:
            logger.debug("Discarding stale submission of attempt %d", attempt)
            return
        self._result = self._analyze(answers, elapsed)
        self._state = SessionState.SUBMITTED
        overall = self._result.overall
        logger.info(
            "Exam submitted: score %.2f / %.2f (%d correct, %d incorrect, %d unattempted)",
            overall.score,
            overall.max_score,
            overall.correct_count,
            overall.incorrect_count,
            overall.unattempted_count,
        )
        kind = SessionEventKind.AUTO_SUBMITTED if auto else SessionEventKind.SUBMITTED
        self._emit(SessionEvent(kind))

    # --- Helpers ---

    def _focused_question(self, operation: str) -> Question | None:
        if not self.is_taking():
            self._ignore(operation)
            return None
        return self.current_question

    def _ignore(self, operation: str) -> bool:
        logger.debug("Ignoring %s while session is %s", operation, self._state.value)
        return False

    def _touch(self) -> None:
        self._revision += 1
