"""Scoring and analysis of exam answers.

Every function here is pure: the same questions and answers always produce
the same snapshot, so the live progress display and the frozen result after
submission can never disagree.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from exam_app.core.models import (
    AnalysisResult,
    ExamPattern,
    ExamSettings,
    Question,
    QuestionOutcome,
    ScoreSummary,
    SectionAnalysis,
    SectionRange,
    normalize_option_key,
)
from exam_app.core.section_index import clip_range


def question_outcome(question: Question, answer: str | None) -> QuestionOutcome:
    chosen = normalize_option_key(answer)
    if chosen is None:
        return QuestionOutcome.UNATTEMPTED
    if question.correct_option is not None and chosen == question.correct_option:
        return QuestionOutcome.CORRECT
    return QuestionOutcome.INCORRECT


def summarize(
    questions: Sequence[Question],
    answers: Mapping[int, str],
    indices: Iterable[int],
    marks_per_correct: float,
    penalty_per_wrong: float,
) -> ScoreSummary:
    """Score the questions at ``indices``; the score is not floored at zero."""
    correct = incorrect = unattempted = 0
    score = 0.0
    for index in indices:
        outcome = question_outcome(questions[index], answers.get(index))
        if outcome is QuestionOutcome.CORRECT:
            correct += 1
            score += marks_per_correct
        elif outcome is QuestionOutcome.INCORRECT:
            incorrect += 1
            score -= penalty_per_wrong
        else:
            unattempted += 1
    total = correct + incorrect + unattempted
    return ScoreSummary(
        correct_count=correct,
        incorrect_count=incorrect,
        unattempted_count=unattempted,
        score=score,
        max_score=total * marks_per_correct,
    )


def analyze(
    questions: Sequence[Question],
    answers: Mapping[int, str],
    section_ranges: Sequence[SectionRange],
    marks_per_correct: float,
    penalty_per_wrong: float,
    time_taken_seconds: int = 0,
) -> AnalysisResult:
    overall = summarize(
        questions, answers, range(len(questions)), marks_per_correct, penalty_per_wrong
    )
    sections = tuple(
        SectionAnalysis(
            key=section.key,
            title=section.title,
            summary=summarize(
                questions,
                answers,
                clip_range(section, len(questions)),
                marks_per_correct,
                penalty_per_wrong,
            ),
        )
        for section in section_ranges
    )
    outcomes = tuple(
        question_outcome(question, answers.get(index)) for index, question in enumerate(questions)
    )
    return AnalysisResult(
        overall=overall,
        sections=sections,
        outcomes=outcomes,
        time_taken_seconds=max(0, time_taken_seconds),
    )


def exam_pattern(
    settings: ExamSettings,
    section_ranges: Sequence[SectionRange],
    question_count: int,
) -> ExamPattern:
    """Describe the exam layout: totals plus (title, questions, marks) per section."""
    sections = []
    for section in section_ranges:
        count = len(clip_range(section, question_count))
        if count:
            sections.append((section.title, count, count * settings.marks_per_correct))
    return ExamPattern(
        total_questions=question_count,
        total_marks=question_count * settings.marks_per_correct,
        marks_per_correct=settings.marks_per_correct,
        time_minutes=settings.max_time_seconds // 60,
        negative_marking=settings.penalty_per_wrong,
        sections=sections,
    )


def format_clock(total_seconds: int) -> str:
    """Format remaining seconds as ``MM:SS``."""
    total_seconds = max(0, int(total_seconds))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_time_taken(total_seconds: float) -> str:
    """Format elapsed seconds as ``"M min SS sec"``."""
    total_seconds = max(0, round(total_seconds))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes} min {seconds:02d} sec"
