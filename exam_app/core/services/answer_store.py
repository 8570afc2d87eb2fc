"""Service holding the option chosen for each question."""

from __future__ import annotations

from collections.abc import Mapping


class AnswerStore:
    """Maps question index to the chosen option key.

    Keys are stored exactly as given; normalization and validity checks
    belong to the caller.
    """

    def __init__(self) -> None:
        self._answers: dict[int, str] = {}

    def set(self, index: int, option_key: str) -> None:
        self._answers[index] = option_key

    def clear(self, index: int) -> None:
        self._answers.pop(index, None)

    def get(self, index: int) -> str | None:
        return self._answers.get(index)

    def has_answer(self, index: int) -> bool:
        return index in self._answers

    def reset(self) -> None:
        self._answers.clear()

    def snapshot(self) -> Mapping[int, str]:
        """Return a copy safe to hand to analysis or other threads."""
        return dict(self._answers)

    def __len__(self) -> int:
        return len(self._answers)
