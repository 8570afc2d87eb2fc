"""Shared fixtures for the exam core and API tests."""

from __future__ import annotations

import pytest

from exam_app.core.models import ExamSettings, Question, SectionDefinition
from exam_app.core.services.exam_session import ExamSession


def build_question(
    question_id: int,
    correct: str = "a",
    section_key: str | None = None,
    options: tuple[str | None, ...] = ("one", "two", "three", "four"),
    explanation: str | None = None,
) -> Question:
    return Question(
        id=question_id,
        question_text=f"Question {question_id}?",
        options=options,
        correct_option=correct,
        section_key=section_key,
        explanation=explanation,
    )


@pytest.fixture
def immediate_settings() -> ExamSettings:
    """Settings whose submission completes synchronously."""
    return ExamSettings(max_time_seconds=60, submit_delay_ms=0)


@pytest.fixture
def two_sections() -> list[SectionDefinition]:
    return [
        SectionDefinition("reasoning", "Reasoning", 2),
        SectionDefinition("maths", "Maths", 3),
    ]


@pytest.fixture
def sectioned_questions() -> list[Question]:
    # Deliberately out of order to exercise the load-time sort.
    return [
        build_question(5, "b", "maths"),
        build_question(1, "a", "reasoning"),
        build_question(4, "c", "maths"),
        build_question(2, "d", "reasoning"),
        build_question(3, "a", "maths"),
    ]


@pytest.fixture
def session(immediate_settings, sectioned_questions, two_sections) -> ExamSession:
    exam = ExamSession(immediate_settings)
    exam.load(sectioned_questions, two_sections)
    return exam


@pytest.fixture
def recorded_events(session):
    events = []
    session.subscribe(events.append)
    return events


@pytest.fixture
def make_question():
    return build_question
