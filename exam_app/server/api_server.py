"""FastAPI server that exposes the exam to a browser on the local network."""

from __future__ import annotations

from threading import Thread
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, SERVER_LOG_LEVEL
from exam_app.core.analysis import format_clock, format_time_taken
from exam_app.core.exam_manager import ExamManager, ExamSnapshot
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import AnalysisResult, ScoreSummary, SessionState, normalize_option_key

_NOT_TAKING_DETAIL = "The exam is not in progress."

_EXAM_PAGE_HTML = """<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>ExamQt</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #f3f4f6; color: #111827; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      header { display: flex; justify-content: space-between; align-items: center; }
      .card { background: #fff; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.25rem 1rem rgba(0, 0, 0, 0.08); }
      .hidden { display: none; }
      #clock { font-size: 1.25rem; font-weight: 600; }
      #section-title { color: #6b7280; }
      .options { display: flex; flex-direction: column; gap: 0.5rem; margin-top: 1rem; }
      .option { text-align: left; border: 1px solid #d1d5db; border-radius: 0.5rem; padding: 0.75rem; background: #fff; cursor: pointer; }
      .option.selected { border-color: #2563eb; background: #eff6ff; }
      .controls { display: flex; gap: 0.5rem; margin-top: 1rem; flex-wrap: wrap; }
      button { border-radius: 0.5rem; padding: 0.6rem 1rem; border: 1px solid #d1d5db; background: #fff; cursor: pointer; }
      button.primary { background: #2563eb; color: #fff; border: none; }
      .palette { display: flex; flex-wrap: wrap; gap: 0.35rem; }
      .palette button { width: 2.5rem; padding: 0.4rem 0; }
      .not_answered { background: #ef4444; color: #fff; }
      .answered, .answered_and_marked { background: #22c55e; color: #fff; }
      .marked_for_review { background: #facc15; }
      table { border-collapse: collapse; width: 100%; }
      td, th { border-bottom: 1px solid #e5e7eb; padding: 0.4rem; text-align: left; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, svg: { fontCache: 'global' } };
    </script>
    <script defer src=\"https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js\"></script>
  </head>
  <body>
    <header class=\"card\">
      <h1 id=\"title\">ExamQt</h1>
      <span id=\"clock\"></span>
      <button id=\"submit-button\" class=\"primary\">Submit Quiz</button>
    </header>
    <section class=\"card\" id=\"question-card\">
      <p><span id=\"progress\"></span> &middot; <span id=\"section-title\"></span></p>
      <div id=\"question\"></div>
      <div id=\"options\" class=\"options\"></div>
      <div class=\"controls\">
        <button id=\"previous\">Previous</button>
        <button id=\"clear\">Clear</button>
        <button id=\"mark\">Mark</button>
        <button id=\"next\" class=\"primary\">Save &amp; Next</button>
      </div>
      <h3>Question Navigator</h3>
      <div id=\"palette\" class=\"palette\"></div>
    </section>
    <section class=\"card hidden\" id=\"message-card\"><p id=\"message\"></p></section>
    <section class=\"card hidden\" id=\"result-card\">
      <h2>Result</h2>
      <p id=\"summary\"></p>
      <table id=\"sections\"></table>
    </section>
    <script>
      let lastRenderKey = null;

      async function post(path, body) {
        const response = await fetch(path, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {})
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          showMessage(payload.detail || 'Request rejected.');
        }
        await refresh();
        return payload;
      }

      function showMessage(text) {
        document.getElementById('message').textContent = text;
        document.getElementById('message-card').classList.toggle('hidden', !text);
      }

      function renderPalette(state) {
        const palette = document.getElementById('palette');
        palette.innerHTML = '';
        state.statuses.forEach((status, index) => {
          const button = document.createElement('button');
          button.textContent = index + 1;
          button.className = status;
          button.addEventListener('click', () => post('/navigate', { action: 'jump', index }));
          palette.appendChild(button);
        });
      }

      function renderQuestion(state) {
        const question = state.question;
        document.getElementById('progress').textContent = `Question ${state.current_index + 1} of ${state.question_count}`;
        document.getElementById('section-title').textContent = state.section_title || 'General Question';
        const renderKey = `${question.id}:${state.current_answer}`;
        if (renderKey === lastRenderKey) {
          return;
        }
        lastRenderKey = renderKey;
        const optionsEl = document.getElementById('options');
        optionsEl.innerHTML = '';
        question.options.forEach(option => {
          const button = document.createElement('button');
          button.className = 'option' + (state.current_answer === option.key ? ' selected' : '');
          button.innerHTML = `<strong>${option.key.toUpperCase()}.</strong> ${option.html}`;
          button.addEventListener('click', () => post('/answer', { option_key: option.key }));
          optionsEl.appendChild(button);
        });
        document.getElementById('question').innerHTML = question.html;
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise([document.getElementById('question-card')]);
        }
      }

      async function renderResult() {
        const response = await fetch('/analysis');
        const analysis = await response.json();
        const overall = analysis.overall;
        document.getElementById('summary').textContent =
          `Score ${overall.score} / ${overall.max_score} · Accuracy ${overall.accuracy.toFixed(1)}% · ` +
          `Attempted ${overall.attempt_rate.toFixed(1)}% · Time taken ${analysis.time_taken}`;
        const rows = analysis.sections.map(section =>
          `<tr><td>${section.title}</td><td>${section.correct_count}</td><td>${section.incorrect_count}</td>` +
          `<td>${section.unattempted_count}</td><td>${section.score} / ${section.max_score}</td></tr>`);
        document.getElementById('sections').innerHTML =
          '<tr><th>Section</th><th>Correct</th><th>Incorrect</th><th>Unattempted</th><th>Score</th></tr>' + rows.join('');
      }

      async function refresh() {
        try {
          const response = await fetch('/state');
          const state = await response.json();
          document.getElementById('title').textContent = state.title;
          document.getElementById('clock').textContent = state.clock;
          const taking = state.state === 'taking' && state.question !== null;
          document.getElementById('question-card').classList.toggle('hidden', !taking);
          document.getElementById('result-card').classList.toggle('hidden', state.state !== 'submitted');
          if (!taking) {
            lastRenderKey = null;
          }
          if (taking) {
            renderQuestion(state);
            renderPalette(state);
          } else if (state.state === 'submitted') {
            showMessage(state.auto_submitted ? 'Time is up. Your answers were submitted automatically.' : '');
            await renderResult();
          } else if (state.state === 'error') {
            showMessage(state.error_message || 'An unknown error occurred.');
          } else if (state.state === 'submitting') {
            showMessage('Submitting your quiz...');
          } else if (state.state === 'taking') {
            showMessage('No questions found.');
          }
        } catch (error) {
          showMessage('Unable to reach the exam server.');
        }
      }

      document.getElementById('previous').addEventListener('click', () => post('/navigate', { action: 'previous' }));
      document.getElementById('next').addEventListener('click', () => post('/navigate', { action: 'next' }));
      document.getElementById('clear').addEventListener('click', () => post('/clear'));
      document.getElementById('mark').addEventListener('click', () => post('/mark'));
      document.getElementById('submit-button').addEventListener('click', () => {
        if (window.confirm('Are you sure you want to submit the quiz?')) {
          post('/submit');
        }
      });

      refresh();
      setInterval(refresh, 1000);
    </script>
  </body>
</html>
"""


class AnswerPayload(BaseModel):
    """Payload schema for choosing an option on the focused question."""

    option_key: str


class NavigatePayload(BaseModel):
    """Payload schema for moving the focused question."""

    action: Literal["next", "previous", "jump"]
    index: int | None = None


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


def _summary_payload(summary: ScoreSummary) -> dict[str, object]:
    return {
        "correct_count": summary.correct_count,
        "incorrect_count": summary.incorrect_count,
        "unattempted_count": summary.unattempted_count,
        "attempted_count": summary.attempted_count,
        "total_questions": summary.total_questions,
        "score": summary.score,
        "max_score": summary.max_score,
        "accuracy": summary.accuracy,
        "attempt_rate": summary.attempt_rate,
    }


def _state_payload(snapshot: ExamSnapshot) -> dict[str, object]:
    question = snapshot.current_question
    question_payload = None
    if question is not None:
        question_payload = {
            "id": question.id,
            "html": renderer.render_fragment(question.question_text),
            "level": question.level,
            "options": [
                {
                    "key": key,
                    "text": question.option_text(key),
                    "html": renderer.render_inline(question.option_text(key)),
                }
                for key in question.available_keys()
            ],
        }
    return {
        "title": snapshot.title,
        "state": snapshot.state.value,
        "question_count": snapshot.question_count,
        "current_index": snapshot.current_index,
        "current_answer": snapshot.current_answer,
        "question": question_payload,
        "section_title": snapshot.current_section.title if snapshot.current_section else None,
        "statuses": [status.value for status in snapshot.statuses],
        "status_counts": {status.value: count for status, count in snapshot.status_counts.items()},
        "remaining_seconds": snapshot.remaining_seconds,
        "clock": format_clock(snapshot.remaining_seconds),
        "expanded_section_index": snapshot.expanded_section_index,
        "progress": _summary_payload(snapshot.analysis.overall),
        "error_message": snapshot.error_message,
        "auto_submitted": snapshot.auto_submitted,
    }


def _analysis_payload(
    analysis: AnalysisResult,
    snapshot: ExamSnapshot,
    questions_review: list[dict[str, object]] | None,
) -> dict[str, object]:
    return {
        "final": snapshot.state is SessionState.SUBMITTED,
        "overall": _summary_payload(analysis.overall),
        "sections": [
            {"key": section.key, "title": section.title, **_summary_payload(section.summary)}
            for section in analysis.sections
        ],
        "time_taken_seconds": analysis.time_taken_seconds,
        "time_taken": format_time_taken(analysis.time_taken_seconds),
        "questions": questions_review,
    }


def create_api_app(exam_manager: ExamManager) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager."""
    app = FastAPI(title="ExamQt API", version="0.1.0")
    exam_manager_dep = _get_exam_manager_dependency(exam_manager)

    def _require_taking(manager: ExamManager) -> ExamSnapshot:
        snapshot = manager.snapshot()
        if snapshot.state is not SessionState.TAKING:
            raise HTTPException(status_code=409, detail=_NOT_TAKING_DETAIL)
        return snapshot

    @app.get("/", response_class=HTMLResponse)
    def serve_exam_page() -> str:
        return _EXAM_PAGE_HTML

    @app.get("/state")
    def get_state(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        return _state_payload(manager.snapshot())

    @app.post("/answer")
    def select_option(
        payload: AnswerPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        snapshot = _require_taking(manager)
        question = snapshot.current_question
        key = normalize_option_key(payload.option_key)
        unknown_detail = f"Unknown option '{payload.option_key}'."
        if question is None or key not in question.available_keys():
            raise HTTPException(status_code=422, detail=unknown_detail)
        if not manager.select_option(key):
            # Focus may have moved to a question without this option since the check above.
            if manager.get_state() is SessionState.TAKING:
                raise HTTPException(status_code=422, detail=unknown_detail)
            raise HTTPException(status_code=409, detail=_NOT_TAKING_DETAIL)
        return _state_payload(manager.snapshot())

    @app.post("/clear")
    def clear_response(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        _require_taking(manager)
        if not manager.clear_response():
            raise HTTPException(status_code=409, detail=_NOT_TAKING_DETAIL)
        return _state_payload(manager.snapshot())

    @app.post("/mark")
    def mark_for_review(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        _require_taking(manager)
        if not manager.mark_for_review():
            raise HTTPException(status_code=409, detail=_NOT_TAKING_DETAIL)
        return _state_payload(manager.snapshot())

    @app.post("/navigate")
    def navigate(
        payload: NavigatePayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        snapshot = _require_taking(manager)
        if payload.action == "next":
            manager.move_to_next_question()
        elif payload.action == "previous":
            manager.move_to_previous_question()
        else:
            if payload.index is None or not 0 <= payload.index < snapshot.question_count:
                raise HTTPException(status_code=422, detail="Question index out of range.")
            manager.jump_to_question(payload.index)
        return _state_payload(manager.snapshot())

    @app.post("/submit")
    def submit(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        _require_taking(manager)
        if not manager.submit():
            snapshot = manager.snapshot()
            raise HTTPException(status_code=409, detail=snapshot.error_message or _NOT_TAKING_DETAIL)
        return _state_payload(manager.snapshot())

    @app.get("/analysis")
    def get_analysis(manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        snapshot = manager.snapshot()
        review = None
        # Correct answers are only revealed once the exam is over.
        if snapshot.state is SessionState.SUBMITTED:
            answers = manager.get_answers()
            review = [
                {
                    "id": question.id,
                    "chosen": answers.get(index),
                    "correct": question.correct_option,
                    "outcome": outcome.value,
                    "explanation": question.explanation,
                }
                for index, (question, outcome) in enumerate(
                    zip(manager.get_questions(), snapshot.analysis.outcomes)
                )
            ]
        return _analysis_payload(snapshot.analysis, snapshot, review)

    return app


def start_api_server(
    exam_manager: ExamManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(exam_manager)
    # log_config=None keeps the handlers installed by configure_logging.
    config = uvicorn.Config(
        app=app, host=host, port=port, log_level=SERVER_LOG_LEVEL, log_config=None
    )
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="ExamApiServer", daemon=True)
    thread.start()
    return thread
