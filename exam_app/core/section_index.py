"""Derivation of contiguous section ranges over the flattened question list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from exam_app.constants.exam_constants import DEFAULT_SECTIONS
from exam_app.core.models import Question, SectionDefinition, SectionRange


def default_section_definitions() -> list[SectionDefinition]:
    return [SectionDefinition(key, title, count) for key, title, count in DEFAULT_SECTIONS]


def sort_questions(
    questions: Iterable[Question],
    definitions: Sequence[SectionDefinition],
) -> list[Question]:
    """Stable sort by declared section order, then id; unknown sections go last."""
    order = {definition.key: position for position, definition in enumerate(definitions)}
    unknown = len(order)

    def sort_key(question: Question) -> tuple[int, int]:
        if question.section_key is None:
            return unknown, question.id
        return order.get(question.section_key, unknown), question.id

    return sorted(questions, key=sort_key)


def build_section_ranges(definitions: Iterable[SectionDefinition]) -> list[SectionRange]:
    """Lay the declared sections end to end in declaration order.

    Counts are trusted as given; a negative count is a caller error.
    """
    ranges: list[SectionRange] = []
    start = 0
    for definition in definitions:
        end = start + definition.question_count
        ranges.append(SectionRange(key=definition.key, title=definition.title, start=start, end=end))
        start = end
    return ranges


def locate_section(ranges: Sequence[SectionRange], index: int) -> SectionRange | None:
    """Return the range containing ``index``, or ``None`` for unsectioned indices."""
    position = locate_section_index(ranges, index)
    return ranges[position] if position >= 0 else None


def locate_section_index(ranges: Sequence[SectionRange], index: int) -> int:
    for position, section in enumerate(ranges):
        if index in section:
            return position
    return -1


def clip_range(section: SectionRange, question_count: int) -> range:
    """Indices of ``section`` that refer to actually loaded questions."""
    return range(section.start, max(section.start, min(section.end, question_count)))
