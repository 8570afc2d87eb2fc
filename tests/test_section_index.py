"""Tests for section ranges and the load-time question sort."""

from exam_app.core.models import SectionDefinition
from exam_app.core.section_index import (
    build_section_ranges,
    clip_range,
    default_section_definitions,
    locate_section,
    locate_section_index,
    sort_questions,
)


class TestBuildSectionRanges:
    def test_four_sections_of_25_are_laid_end_to_end(self):
        definitions = [SectionDefinition(key, key, 25) for key in "ABCD"]

        ranges = build_section_ranges(definitions)

        assert [(r.key, r.start, r.end) for r in ranges] == [
            ("A", 0, 25),
            ("B", 25, 50),
            ("C", 50, 75),
            ("D", 75, 100),
        ]

    def test_index_47_resolves_to_second_section(self):
        ranges = build_section_ranges([SectionDefinition(key, key, 25) for key in "ABCD"])

        assert locate_section(ranges, 47).key == "B"
        assert locate_section_index(ranges, 47) == 1

    def test_section_boundaries_are_half_open(self):
        ranges = build_section_ranges([SectionDefinition(key, key, 25) for key in "ABCD"])

        assert locate_section(ranges, 24).key == "A"
        assert locate_section(ranges, 25).key == "B"
        assert locate_section(ranges, 99).key == "D"

    def test_index_outside_all_sections_has_no_section(self):
        ranges = build_section_ranges([SectionDefinition("A", "A", 2)])

        assert locate_section(ranges, 2) is None
        assert locate_section_index(ranges, 5) == -1
        assert locate_section(ranges, -1) is None

    def test_zero_count_section_owns_no_index(self):
        ranges = build_section_ranges(
            [
                SectionDefinition("A", "A", 2),
                SectionDefinition("B", "B", 0),
                SectionDefinition("C", "C", 1),
            ]
        )

        assert ranges[1].question_count == 0
        assert locate_section(ranges, 2).key == "C"

    def test_default_sections_cover_one_hundred_questions(self):
        ranges = build_section_ranges(default_section_definitions())

        assert len(ranges) == 4
        assert ranges[-1].end == 100


class TestClipRange:
    def test_clips_to_loaded_question_count(self):
        ranges = build_section_ranges([SectionDefinition(k, k, 25) for k in "ABCD"])

        assert clip_range(ranges[0], 10) == range(0, 10)
        assert len(clip_range(ranges[1], 10)) == 0

    def test_full_section_is_unchanged(self):
        ranges = build_section_ranges([SectionDefinition("A", "A", 3)])

        assert clip_range(ranges[0], 10) == range(0, 3)


class TestSortQuestions:
    def test_sorts_by_section_order_then_id(self, make_question):
        definitions = [SectionDefinition("x", "X", 2), SectionDefinition("y", "Y", 2)]
        questions = [
            make_question(9, section_key="y"),
            make_question(3, section_key="x"),
            make_question(1, section_key="y"),
            make_question(2, section_key="x"),
        ]

        ordered = sort_questions(questions, definitions)

        assert [q.id for q in ordered] == [2, 3, 1, 9]

    def test_unknown_and_missing_sections_go_last(self, make_question):
        definitions = [SectionDefinition("x", "X", 1)]
        questions = [
            make_question(1, section_key=None),
            make_question(2, section_key="mystery"),
            make_question(3, section_key="x"),
        ]

        ordered = sort_questions(questions, definitions)

        assert [q.id for q in ordered] == [3, 1, 2]

    def test_sort_is_stable_for_equal_keys(self, make_question):
        first = make_question(1, correct="a", section_key="x")
        second = make_question(1, correct="b", section_key="x")

        ordered = sort_questions([first, second], [SectionDefinition("x", "X", 2)])

        assert ordered == [first, second]
