"""Business logic for managing exam state shared between UI and API."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging
from pathlib import Path
from threading import Lock, Timer, current_thread

from exam_app.constants.exam_constants import DEFAULT_EXAM_TITLE, EVENT_QUEUE_LIMIT
from exam_app.core.analysis import exam_pattern
from exam_app.core.models import (
    AnalysisResult,
    ExamPattern,
    ExamSettings,
    Question,
    QuestionStatus,
    SectionDefinition,
    SectionRange,
    SessionState,
)
from exam_app.core.question_importer import ImportedExam, LoadFailure, load_exam_from_file
from exam_app.core.section_index import default_section_definitions
from exam_app.core.services.exam_session import ExamSession, SessionEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExamSnapshot:
    """Consistent read-only view of the session for rendering."""

    title: str
    state: SessionState
    question_count: int
    current_index: int
    current_question: Question | None
    current_answer: str | None
    statuses: tuple[QuestionStatus, ...]
    status_counts: dict[QuestionStatus, int]
    remaining_seconds: int
    max_time_seconds: int
    sections: tuple[SectionRange, ...]
    current_section: SectionRange | None
    expanded_section_index: int
    analysis: AnalysisResult
    error_message: str | None
    auto_submitted: bool


class ExamManager:
    """Facade around one ExamSession, safe to call from the Qt and API threads."""

    def __init__(self, settings: ExamSettings | None = None) -> None:
        self._lock = Lock()
        self._settings = (settings or ExamSettings()).validated()
        self._session = ExamSession(self._settings, scheduler=self._schedule_completion)
        self._session.subscribe(self._record_event)
        self._events: deque[SessionEvent] = deque(maxlen=EVENT_QUEUE_LIMIT)
        self._title = self._settings.title
        self._source_path: Path | None = None
        self._last_loaded: tuple[list[Question], list[SectionDefinition], str] | None = None
        self._pending_timer: Timer | None = None

    # --- Loading ---

    def load_from_file(self, file_path: Path) -> bool:
        """Start a new session from a question bank file; failures move to ERROR."""
        with self._lock:
            return self._load_file_locked(file_path)

    def load_exam(self, exam: ImportedExam) -> bool:
        with self._lock:
            self._source_path = exam.source_path
            self._session.reset(self._settings)
            return self._load_locked(exam.questions, exam.sections, exam.title)

    def load_questions(
        self,
        questions: Sequence[Question],
        sections: Sequence[SectionDefinition] | None = None,
        title: str | None = None,
    ) -> bool:
        with self._lock:
            self._source_path = None
            self._session.reset(self._settings)
            return self._load_locked(
                questions,
                sections if sections is not None else default_section_definitions(),
                title or self._settings.title,
            )

    def reload(self) -> bool:
        """Start over with the last question source; the recovery path after an error."""
        with self._lock:
            if self._source_path is not None:
                return self._load_file_locked(self._source_path)
            if self._last_loaded is None:
                return False
            questions, sections, title = self._last_loaded
            self._session.reset(self._settings)
            return self._load_locked(questions, sections, title)

    def _load_file_locked(self, file_path: Path) -> bool:
        self._source_path = file_path
        self._session.reset(self._settings)
        try:
            imported = load_exam_from_file(file_path)
        except LoadFailure as exc:
            self._session.fail(str(exc), exc)
            return False
        return self._load_locked(imported.questions, imported.sections, imported.title)

    def _load_locked(
        self,
        questions: Sequence[Question],
        sections: Sequence[SectionDefinition],
        title: str,
    ) -> bool:
        self._cancel_pending_completion()
        self._title = title or DEFAULT_EXAM_TITLE
        self._last_loaded = (list(questions), list(sections), self._title)
        return self._session.load(questions, sections)

    def fail(self, message: str) -> None:
        with self._lock:
            self._session.fail(message)

    # --- Settings ---

    def get_settings(self) -> ExamSettings:
        with self._lock:
            return self._settings

    def apply_settings(self, settings: ExamSettings) -> None:
        """Use ``settings`` for the next loaded session."""
        with self._lock:
            self._settings = settings.validated()

    def get_exam_pattern(self) -> ExamPattern:
        with self._lock:
            return exam_pattern(
                self._session.settings,
                self._session.section_ranges,
                self._session.question_count,
            )

    # --- Session delegation ---

    def select_option(self, option_key: str) -> bool:
        with self._lock:
            return self._session.select_option(option_key)

    def clear_response(self) -> bool:
        with self._lock:
            return self._session.clear_response()

    def mark_for_review(self) -> bool:
        with self._lock:
            return self._session.mark_for_review()

    def move_to_next_question(self) -> bool:
        with self._lock:
            return self._session.next()

    def move_to_previous_question(self) -> bool:
        with self._lock:
            return self._session.previous()

    def jump_to_question(self, index: int) -> bool:
        with self._lock:
            return self._session.jump_to(index)

    def toggle_section(self, position: int) -> bool:
        with self._lock:
            return self._session.toggle_section(position)

    def prompt_submit(self) -> bool:
        with self._lock:
            return self._session.prompt_submit()

    def submit(self, auto: bool = False) -> bool:
        with self._lock:
            return self._session.submit(auto=auto)

    def tick(self) -> bool:
        with self._lock:
            return self._session.tick()

    def get_state(self) -> SessionState:
        with self._lock:
            return self._session.state

    def is_timer_running(self) -> bool:
        with self._lock:
            return self._session.timer_running

    def get_result(self) -> AnalysisResult | None:
        with self._lock:
            return self._session.result

    def get_questions(self) -> list[Question]:
        with self._lock:
            return self._session.questions

    def get_answers(self) -> dict[int, str]:
        with self._lock:
            return dict(self._session.answers())

    def snapshot(self) -> ExamSnapshot:
        with self._lock:
            session = self._session
            statuses = tuple(session.status(index) for index in range(session.question_count))
            return ExamSnapshot(
                title=self._title,
                state=session.state,
                question_count=session.question_count,
                current_index=session.current_index,
                current_question=session.current_question,
                current_answer=session.current_answer,
                statuses=statuses,
                status_counts=session.status_counts(),
                remaining_seconds=session.remaining_seconds,
                max_time_seconds=session.settings.max_time_seconds,
                sections=tuple(session.section_ranges),
                current_section=session.current_section(),
                expanded_section_index=session.expanded_section_index,
                analysis=session.analysis(),
                error_message=session.error_message,
                auto_submitted=session.auto_submitted,
            )

    # --- Events ---

    def drain_events(self) -> list[SessionEvent]:
        """Return and forget the events raised since the last call."""
        with self._lock:
            events = list(self._events)
            self._events.clear()
            return events

    def _record_event(self, event: SessionEvent) -> None:
        self._events.append(event)

    # --- Submission scheduling ---

    def _schedule_completion(self, delay_ms: int, callback: Callable[[], None]) -> None:
        # Called with the lock held.
        if delay_ms <= 0:
            callback()
            return
        self._cancel_pending_completion()
        timer = Timer(delay_ms / 1000, self._run_locked, args=(callback,))
        timer.daemon = True
        self._pending_timer = timer
        timer.start()

    def _run_locked(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._pending_timer is current_thread():
                self._pending_timer = None
            callback()

    def _cancel_pending_completion(self) -> None:
        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None
