"""Service tracking the visitation/review status of every question."""

from __future__ import annotations

from enum import Enum, auto

from exam_app.core.models import QuestionStatus

_S = QuestionStatus


class StatusEvent(Enum):
    """User intents that move a question between statuses."""

    SELECT_OPTION = auto()
    CLEAR_ANSWER = auto()
    MARK_FOR_REVIEW = auto()
    ENTER_QUESTION = auto()
    LEAVE_UNANSWERED = auto()


# Missing (event, status) pairs leave the status unchanged.
_TRANSITIONS: dict[StatusEvent, dict[QuestionStatus, QuestionStatus]] = {
    StatusEvent.SELECT_OPTION: {
        _S.NOT_VISITED: _S.ANSWERED,
        _S.NOT_ANSWERED: _S.ANSWERED,
        _S.ANSWERED: _S.ANSWERED,
        _S.MARKED_FOR_REVIEW: _S.ANSWERED_AND_MARKED,
        _S.ANSWERED_AND_MARKED: _S.ANSWERED_AND_MARKED,
    },
    StatusEvent.CLEAR_ANSWER: {
        _S.NOT_VISITED: _S.NOT_ANSWERED,
        _S.NOT_ANSWERED: _S.NOT_ANSWERED,
        _S.ANSWERED: _S.NOT_ANSWERED,
        _S.MARKED_FOR_REVIEW: _S.MARKED_FOR_REVIEW,
        _S.ANSWERED_AND_MARKED: _S.MARKED_FOR_REVIEW,
    },
    StatusEvent.MARK_FOR_REVIEW: {
        _S.NOT_VISITED: _S.MARKED_FOR_REVIEW,
        _S.NOT_ANSWERED: _S.MARKED_FOR_REVIEW,
        _S.ANSWERED: _S.ANSWERED_AND_MARKED,
        _S.MARKED_FOR_REVIEW: _S.MARKED_FOR_REVIEW,
        _S.ANSWERED_AND_MARKED: _S.ANSWERED_AND_MARKED,
    },
    StatusEvent.ENTER_QUESTION: {
        _S.NOT_VISITED: _S.NOT_ANSWERED,
    },
    StatusEvent.LEAVE_UNANSWERED: {
        _S.NOT_VISITED: _S.NOT_ANSWERED,
        _S.NOT_ANSWERED: _S.NOT_ANSWERED,
    },
}


def next_status(current: QuestionStatus, event: StatusEvent) -> QuestionStatus:
    return _TRANSITIONS[event].get(current, current)


class StatusTracker:
    """Maps question index to its QuestionStatus."""

    def __init__(self) -> None:
        self._statuses: dict[int, QuestionStatus] = {}

    def initialize(self, question_count: int) -> None:
        """First question starts as not answered, the rest as not visited."""
        self._statuses = {
            index: _S.NOT_ANSWERED if index == 0 else _S.NOT_VISITED
            for index in range(question_count)
        }

    def get(self, index: int) -> QuestionStatus:
        return self._statuses.get(index, _S.NOT_VISITED)

    def set_status(self, index: int, status: QuestionStatus) -> None:
        self._statuses[index] = status

    def apply(self, index: int, event: StatusEvent) -> QuestionStatus:
        """Apply ``event`` to the question at ``index`` and return its new status."""
        updated = next_status(self.get(index), event)
        self._statuses[index] = updated
        return updated

    def snapshot(self) -> dict[int, QuestionStatus]:
        return dict(self._statuses)

    def counts(self) -> dict[QuestionStatus, int]:
        totals = {status: 0 for status in QuestionStatus}
        for status in self._statuses.values():
            totals[status] += 1
        return totals
