"""Tests for loading question banks from JSON and text files."""

import json
from pathlib import Path

import pytest

from exam_app.core.question_importer import (
    LoadFailure,
    load_exam_from_file,
    parse_exam_json,
    parse_exam_text,
)

SAMPLE_EXAM = Path(__file__).resolve().parents[1] / "exam_app" / "data" / "sample_exam.json"


def _record(**overrides):
    record = {
        "id": 1,
        "question_type": "general_awareness",
        "question_level": "easy",
        "question_text": "Capital of France?",
        "option_a": "Paris",
        "option_b": "Rome",
        "option_c": "Madrid",
        "option_d": "Berlin",
        "correct_answer": "A",
        "explanation": "Paris is the capital.",
    }
    record.update(overrides)
    return record


class TestParseExamJson:
    def test_bare_list_uses_default_sections(self):
        exam = parse_exam_json(json.dumps([_record()]))

        assert exam.title == "Aptitude Quiz"
        assert len(exam.sections) == 4
        question = exam.questions[0]
        assert question.correct_option == "a"
        assert question.section_key == "general_awareness"
        assert question.level == "easy"
        assert question.explanation == "Paris is the capital."

    def test_object_with_sections_and_title(self):
        payload = {
            "title": "Mini Mock",
            "sections": [{"key": "general_awareness", "title": "GA", "questions": 1}],
            "questions": [_record()],
        }

        exam = parse_exam_json(json.dumps(payload))

        assert exam.title == "Mini Mock"
        assert [(s.key, s.question_count) for s in exam.sections] == [("general_awareness", 1)]

    def test_absent_options_are_kept_absent(self):
        exam = parse_exam_json(json.dumps([_record(option_c=None, option_d=None)]))

        assert exam.questions[0].available_keys() == ["a", "b"]

    def test_invalid_json_is_a_load_failure(self):
        with pytest.raises(LoadFailure, match="not valid JSON"):
            parse_exam_json("{not json")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"correct_answer": "e"},
            {"correct_answer": "d", "option_d": None},
            {"question_text": ""},
            {"id": "seven"},
        ],
    )
    def test_invalid_records_are_load_failures(self, overrides):
        with pytest.raises(LoadFailure, match="failed validation"):
            parse_exam_json(json.dumps([_record(**overrides)]))

    def test_negative_section_count_is_rejected(self):
        payload = {
            "sections": [{"key": "x", "title": "X", "questions": -1}],
            "questions": [_record()],
        }

        with pytest.raises(LoadFailure):
            parse_exam_json(json.dumps(payload))


class TestParseExamText:
    def test_parses_blocks_with_multiline_fields(self):
        text = """SECTION: quantitative_aptitude
LEVEL: easy
Q: What is $2 + 2$?
Show your work.
A: 3
B: 4
CORRECT: b
EXPLANATION: Two plus two
is four.

---
ID: 9
Q: Pick C
A: no
B: no
C: yes
D: no
CORRECT: C
"""

        questions = parse_exam_text(text)

        first, second = questions
        assert first.id == 1
        assert first.question_text == "What is $2 + 2$?\nShow your work."
        assert first.section_key == "quantitative_aptitude"
        assert first.available_keys() == ["a", "b"]
        assert first.correct_option == "b"
        assert first.explanation == "Two plus two\nis four."
        assert second.id == 9
        assert second.correct_option == "c"
        assert second.section_key is None

    @pytest.mark.parametrize(
        "block, message",
        [
            ("A: one\nCORRECT: A", "question text missing"),
            ("Q: Why?\nCORRECT: A", "at least one option"),
            ("Q: Why?\nA: one", "CORRECT is required"),
            ("Q: Why?\nA: one\nCORRECT: B", "CORRECT must name"),
            ("ID: x\nQ: Why?\nA: one\nCORRECT: A", "ID must be an integer"),
            ("stray line\nQ: Why?", "outside of a known section"),
        ],
    )
    def test_malformed_blocks(self, block, message):
        with pytest.raises(LoadFailure, match=message):
            parse_exam_text(block)


class TestLoadExamFromFile:
    def test_missing_file_is_a_load_failure(self, tmp_path):
        with pytest.raises(LoadFailure, match="Could not read"):
            load_exam_from_file(tmp_path / "missing.json")

    def test_text_file_is_parsed_as_text(self, tmp_path):
        path = tmp_path / "bank.txt"
        path.write_text("Q: One?\nA: yes\nB: no\nCORRECT: A\n", encoding="utf-8")

        exam = load_exam_from_file(path)

        assert exam.source_path == path
        assert len(exam.questions) == 1
        assert len(exam.sections) == 4

    def test_bundled_sample_loads(self):
        exam = load_exam_from_file(SAMPLE_EXAM)

        assert exam.title == "Sample Aptitude Quiz"
        assert len(exam.questions) == 7
        assert sum(s.question_count for s in exam.sections) == 7
