"""Tests for the exam session state machine."""

import random

import pytest

from exam_app.core.models import ExamSettings, QuestionStatus, SectionDefinition, SessionState
from exam_app.core.services.exam_session import (
    EMPTY_SESSION_MESSAGE,
    EmptySessionError,
    ExamSession,
    SessionEventKind,
)

S = QuestionStatus


def assert_status_matches_answers(session: ExamSession) -> None:
    for index in range(session.question_count):
        has_answer = session.answer_for(index) is not None
        assert session.status(index).has_answer == has_answer, index


class ManualScheduler:
    """Holds scheduled callbacks until the test releases them."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_ms, callback):
        self.pending.append((delay_ms, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


class TestLoad:
    def test_load_sorts_and_starts_taking(self, session):
        assert session.state is SessionState.TAKING
        assert [q.id for q in session.questions] == [1, 2, 3, 4, 5]
        assert session.current_index == 0
        assert session.remaining_seconds == 60
        assert session.timer_running
        assert session.expanded_section_index == 0

    def test_initial_statuses(self, session):
        assert session.statuses() == {
            0: S.NOT_ANSWERED,
            1: S.NOT_VISITED,
            2: S.NOT_VISITED,
            3: S.NOT_VISITED,
            4: S.NOT_VISITED,
        }

    def test_load_is_rejected_outside_loading(self, session, make_question):
        assert session.load([make_question(9)], []) is False
        assert session.question_count == 5

    def test_empty_load_takes_without_running_the_clock(self, immediate_settings):
        session = ExamSession(immediate_settings)

        assert session.load([], [SectionDefinition("a", "A", 5)]) is True

        assert session.state is SessionState.TAKING
        assert session.current_question is None
        assert not session.timer_running

    def test_reset_allows_a_fresh_load(self, session, make_question):
        session.select_option("a")

        session.reset()
        assert session.state is SessionState.LOADING
        assert session.question_count == 0

        assert session.load([make_question(1)], [])
        assert session.answers() == {}
        assert session.expanded_section_index == -1


class TestAnswering:
    def test_select_records_normalized_key(self, session):
        assert session.select_option(" B ")

        assert session.current_answer == "b"
        assert session.status(0) is S.ANSWERED

    def test_select_rejects_unknown_key(self, session):
        assert session.select_option("e") is False
        assert session.current_answer is None

    def test_select_rejects_absent_option(self, immediate_settings, make_question):
        session = ExamSession(immediate_settings)
        session.load([make_question(1, "a", options=("yes", "no"))], [])

        assert session.select_option("c") is False
        assert session.select_option("b") is True

    def test_clear_then_reselect_returns_to_answered(self, session):
        session.select_option("a")

        session.clear_response()
        assert session.status(0) is S.NOT_ANSWERED
        assert session.current_answer is None

        session.select_option("c")
        assert session.status(0) is S.ANSWERED

    def test_clear_then_reselect_keeps_the_mark(self, session):
        session.select_option("a")
        session.mark_for_review()
        assert session.status(0) is S.ANSWERED_AND_MARKED

        session.clear_response()
        assert session.status(0) is S.MARKED_FOR_REVIEW

        session.select_option("b")
        assert session.status(0) is S.ANSWERED_AND_MARKED

    def test_marking_unanswered_question_is_idempotent(self, session):
        session.mark_for_review()
        session.mark_for_review()

        assert session.status(0) is S.MARKED_FOR_REVIEW

    def test_status_counts(self, session):
        session.select_option("a")
        session.next()
        session.mark_for_review()

        counts = session.status_counts()

        assert counts[S.ANSWERED] == 1
        assert counts[S.MARKED_FOR_REVIEW] == 1
        assert counts[S.NOT_VISITED] == 3


class TestNavigation:
    def test_next_marks_left_question_not_answered(self, session):
        assert session.next()

        assert session.current_index == 1
        assert session.status(0) is S.NOT_ANSWERED
        assert session.status(1) is S.NOT_ANSWERED

    def test_leaving_answered_question_keeps_answer(self, session):
        session.select_option("a")
        session.next()

        assert session.status(0) is S.ANSWERED

    def test_leaving_marked_question_keeps_mark(self, session):
        session.mark_for_review()
        session.next()

        assert session.status(0) is S.MARKED_FOR_REVIEW

    def test_boundaries_are_no_ops(self, session):
        assert session.previous() is False
        assert session.current_index == 0

        session.jump_to(4)
        assert session.next() is False
        assert session.current_index == 4

    @pytest.mark.parametrize("target", [-1, 5, 100])
    def test_out_of_range_jump_changes_nothing(self, session, target):
        before = session.statuses()

        assert session.jump_to(target) is False

        assert session.current_index == 0
        assert session.statuses() == before

    def test_jump_skips_intermediate_questions(self, session):
        session.jump_to(3)

        assert session.status(3) is S.NOT_ANSWERED
        assert session.status(1) is S.NOT_VISITED
        assert session.status(2) is S.NOT_VISITED

    def test_crossing_a_section_expands_it(self, session):
        session.jump_to(1)
        assert session.expanded_section_index == 0

        session.next()
        assert session.expanded_section_index == 1
        assert session.current_section().key == "maths"

    def test_toggle_section_collapses_and_expands(self, session):
        assert session.toggle_section(0)
        assert session.expanded_section_index == -1

        assert session.toggle_section(1)
        assert session.expanded_section_index == 1

        assert session.toggle_section(7) is False
        assert session.expanded_section_index == 1

    def test_random_walk_keeps_index_and_invariant(self, session):
        rng = random.Random(2024)
        operations = [
            lambda: session.next(),
            lambda: session.previous(),
            lambda: session.jump_to(rng.randint(-2, 7)),
            lambda: session.select_option(rng.choice("abcd")),
            lambda: session.clear_response(),
            lambda: session.mark_for_review(),
        ]

        for _ in range(300):
            rng.choice(operations)()
            assert 0 <= session.current_index < session.question_count
            assert_status_matches_answers(session)


class TestTimer:
    def test_countdown_auto_submits_exactly_once(self, session, recorded_events):
        ticks = 0
        while session.tick():
            ticks += 1

        assert ticks == 60
        assert session.remaining_seconds == 0
        assert session.state is SessionState.SUBMITTED
        assert session.auto_submitted
        assert [e.kind for e in recorded_events] == [SessionEventKind.AUTO_SUBMITTED]
        assert session.tick() is False
        assert session.result.time_taken_seconds == 60

    def test_auto_submit_grades_current_answers(self, session):
        session.select_option("a")
        for _ in range(60):
            session.tick()

        assert session.result.overall.correct_count == 1
        assert session.result.overall.unattempted_count == 4

    def test_no_ticks_outside_taking(self, immediate_settings, make_question):
        session = ExamSession(immediate_settings)
        assert session.tick() is False

        session.load([make_question(1)], [])
        session.fail("boom")
        assert session.tick() is False
        assert session.remaining_seconds == 60


class TestSubmit:
    def test_manual_submit_freezes_the_result(self, session, recorded_events):
        session.select_option("a")
        session.next()
        session.select_option("a")
        for _ in range(5):
            session.tick()

        assert session.submit()

        assert session.state is SessionState.SUBMITTED
        assert not session.timer_running
        assert [e.kind for e in recorded_events] == [SessionEventKind.SUBMITTED]
        overall = session.result.overall
        assert overall.correct_count == 1
        assert overall.incorrect_count == 1
        assert overall.unattempted_count == 3
        assert overall.score == pytest.approx(1.5)
        assert session.result.time_taken_seconds == 5
        assert session.analysis() is session.result

    def test_submit_applies_leave_rule_to_focused_question(self, session):
        session.jump_to(2)
        session.submit()

        assert session.status(2) is S.NOT_ANSWERED

    def test_operations_are_ignored_after_submission(self, session):
        session.submit()

        assert session.select_option("a") is False
        assert session.next() is False
        assert session.mark_for_review() is False
        assert session.clear_response() is False
        assert session.toggle_section(1) is False
        assert session.submit() is False
        assert session.answers() == {}

    def test_submitting_state_rejects_mutations(self, make_question):
        scheduler = ManualScheduler()
        session = ExamSession(ExamSettings(max_time_seconds=60, submit_delay_ms=1000), scheduler)
        session.load([make_question(1, "a"), make_question(2, "b")], [])
        session.select_option("a")

        assert session.submit()
        assert session.state is SessionState.SUBMITTING
        assert scheduler.pending[0][0] == 1000
        assert session.select_option("b") is False
        assert session.next() is False
        assert session.tick() is False
        assert session.remaining_seconds == 60

        scheduler.run_all()
        assert session.state is SessionState.SUBMITTED
        assert session.result.overall.correct_count == 1

    def test_completion_after_reset_is_discarded(self, make_question):
        scheduler = ManualScheduler()
        session = ExamSession(ExamSettings(max_time_seconds=60, submit_delay_ms=1000), scheduler)
        session.load([make_question(1)], [])
        session.submit()

        session.reset()
        scheduler.run_all()

        assert session.state is SessionState.LOADING
        assert session.result is None

    def test_completion_from_an_earlier_attempt_is_discarded(self, make_question):
        scheduler = ManualScheduler()
        session = ExamSession(ExamSettings(max_time_seconds=60, submit_delay_ms=1000), scheduler)
        events = []
        session.subscribe(events.append)
        session.load([make_question(1, "a")], [])
        session.select_option("a")
        session.submit()
        session.reset()
        session.load([make_question(1, "a")], [])
        session.select_option("b")
        session.submit()
        first_attempt, second_attempt = (callback for _, callback in scheduler.pending)

        first_attempt()

        assert session.state is SessionState.SUBMITTING
        assert session.result is None
        assert events == []

        second_attempt()

        assert session.state is SessionState.SUBMITTED
        assert session.result.overall.correct_count == 0
        assert session.result.overall.incorrect_count == 1
        assert [event.kind for event in events] == [SessionEventKind.SUBMITTED]

    def test_empty_session_submit_becomes_error(self, immediate_settings, make_question):
        session = ExamSession(immediate_settings)
        events = []
        session.subscribe(events.append)
        session.load([], [])

        assert session.submit() is False

        assert session.state is SessionState.ERROR
        assert session.error_message == EMPTY_SESSION_MESSAGE
        assert session.result is None
        assert len(events) == 1
        assert events[0].kind is SessionEventKind.ERROR
        assert isinstance(events[0].error, EmptySessionError)

    def test_prompt_submit_only_signals(self, session, recorded_events):
        assert session.prompt_submit()

        assert session.state is SessionState.TAKING
        assert [e.kind for e in recorded_events] == [SessionEventKind.SUBMIT_REQUESTED]

    def test_prompt_submit_rejected_for_empty_session(self, immediate_settings):
        session = ExamSession(immediate_settings)
        session.load([], [])

        assert session.prompt_submit() is False
        assert session.state is SessionState.TAKING


class TestFailAndEvents:
    def test_fail_stops_the_clock_and_signals(self, session, recorded_events):
        session.fail("Network down")

        assert session.state is SessionState.ERROR
        assert session.error_message == "Network down"
        assert not session.timer_running
        assert recorded_events[0].kind is SessionEventKind.ERROR
        assert recorded_events[0].message == "Network down"

    def test_unsubscribe_stops_delivery(self, session):
        events = []
        unsubscribe = session.subscribe(events.append)

        unsubscribe()
        session.prompt_submit()

        assert events == []


class TestLiveAnalysis:
    def test_analysis_tracks_answers_while_taking(self, session):
        assert session.analysis().overall.attempted_count == 0

        session.select_option("a")
        live = session.analysis()

        assert live.overall.correct_count == 1
        assert live.sections[0].summary.correct_count == 1
        assert live.sections[1].summary.attempted_count == 0

    def test_analysis_is_cached_until_something_changes(self, session):
        first = session.analysis()

        assert session.analysis() is first

        session.select_option("b")
        assert session.analysis() is not first
