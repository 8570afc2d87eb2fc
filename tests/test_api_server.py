"""Tests for the browser-facing FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import create_api_app


@pytest.fixture
def manager(immediate_settings, sectioned_questions, two_sections):
    exam_manager = ExamManager(immediate_settings)
    exam_manager.load_questions(sectioned_questions, two_sections, title="Browser Mock")
    return exam_manager


@pytest.fixture
def client(manager):
    return TestClient(create_api_app(manager))


class TestPageAndState:
    def test_exam_page_is_served(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "MathJax" in response.text

    def test_state_describes_focused_question(self, client):
        payload = client.get("/state").json()

        assert payload["title"] == "Browser Mock"
        assert payload["state"] == "taking"
        assert payload["question_count"] == 5
        assert payload["current_index"] == 0
        assert payload["clock"] == "01:00"
        assert payload["section_title"] == "Reasoning"
        assert payload["statuses"][:2] == ["not_answered", "not_visited"]
        assert [option["key"] for option in payload["question"]["options"]] == ["a", "b", "c", "d"]
        assert "correct" not in payload["question"]


class TestMutations:
    def test_answer_updates_state(self, client):
        response = client.post("/answer", json={"option_key": "B"})

        assert response.status_code == 200
        payload = response.json()
        assert payload["current_answer"] == "b"
        assert payload["statuses"][0] == "answered"
        assert payload["progress"]["attempted_count"] == 1

    def test_unknown_option_is_unprocessable(self, client):
        response = client.post("/answer", json={"option_key": "z"})

        assert response.status_code == 422

    def test_option_missing_after_focus_moves_is_unprocessable(
        self, immediate_settings, make_question, monkeypatch
    ):
        manager = ExamManager(immediate_settings)
        manager.load_questions(
            [make_question(1), make_question(2, options=("x", "y", None, None))], []
        )
        select_option = manager.select_option

        def select_after_other_client_moves(key):
            manager.jump_to_question(1)
            return select_option(key)

        monkeypatch.setattr(manager, "select_option", select_after_other_client_moves)
        client = TestClient(create_api_app(manager))

        response = client.post("/answer", json={"option_key": " C "})

        assert response.status_code == 422
        assert response.json()["detail"] == "Unknown option ' C '."
        assert manager.get_answers() == {}

    def test_clear_and_mark(self, client):
        client.post("/answer", json={"option_key": "a"})
        client.post("/mark")

        payload = client.post("/clear").json()

        assert payload["current_answer"] is None
        assert payload["statuses"][0] == "marked_for_review"

    def test_navigate_actions(self, client):
        assert client.post("/navigate", json={"action": "next"}).json()["current_index"] == 1
        assert client.post("/navigate", json={"action": "jump", "index": 3}).json()["current_index"] == 3
        payload = client.post("/navigate", json={"action": "previous"}).json()
        assert payload["current_index"] == 2
        assert payload["expanded_section_index"] == 1

    @pytest.mark.parametrize("body", [{"action": "jump", "index": 9}, {"action": "jump"}])
    def test_bad_jump_is_unprocessable(self, client, body):
        assert client.post("/navigate", json=body).status_code == 422

    def test_unknown_action_is_rejected_by_validation(self, client):
        assert client.post("/navigate", json={"action": "sideways"}).status_code == 422


class TestSubmitAndAnalysis:
    def test_live_analysis_hides_the_review(self, client):
        client.post("/answer", json={"option_key": "a"})

        payload = client.get("/analysis").json()

        assert payload["final"] is False
        assert payload["overall"]["correct_count"] == 1
        assert payload["questions"] is None

    def test_submit_reveals_review(self, client):
        client.post("/answer", json={"option_key": "a"})
        client.post("/navigate", json={"action": "next"})
        client.post("/answer", json={"option_key": "a"})

        response = client.post("/submit")

        assert response.status_code == 200
        assert response.json()["state"] == "submitted"
        payload = client.get("/analysis").json()
        assert payload["final"] is True
        assert payload["overall"]["score"] == pytest.approx(1.5)
        assert [section["key"] for section in payload["sections"]] == ["reasoning", "maths"]
        review = payload["questions"]
        assert review[0] == {
            "id": 1,
            "chosen": "a",
            "correct": "a",
            "outcome": "correct",
            "explanation": None,
        }
        assert review[1]["outcome"] == "incorrect"
        assert review[2]["outcome"] == "unattempted"

    def test_mutations_after_submit_conflict(self, client):
        client.post("/submit")

        assert client.post("/answer", json={"option_key": "a"}).status_code == 409
        assert client.post("/navigate", json={"action": "next"}).status_code == 409
        assert client.post("/submit").status_code == 409

    def test_empty_exam_submit_conflicts_with_message(self, immediate_settings):
        manager = ExamManager(immediate_settings)
        manager.load_questions([])
        client = TestClient(create_api_app(manager))

        response = client.post("/submit")

        assert response.status_code == 409
        assert response.json()["detail"] == "Cannot submit an empty quiz."
        assert client.get("/state").json()["state"] == "error"
