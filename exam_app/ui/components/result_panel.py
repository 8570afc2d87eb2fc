"""Component displaying the score analysis and question review after submission."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QAbstractItemView,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QSplitter,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.ui_constants import BUTTON_RETAKE
from exam_app.core.analysis import format_time_taken
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import AnalysisResult, Question, QuestionOutcome
from exam_app.styling.styles import Styles

_OUTCOME_LABELS = {
    QuestionOutcome.CORRECT: "Correct",
    QuestionOutcome.INCORRECT: "Wrong",
    QuestionOutcome.UNATTEMPTED: "Not attempted",
}


class ResultPanel(QWidget):
    """UI component showing overall and section-wise results."""

    def __init__(self, on_retake: Callable[[], None], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._questions: list[Question] = []
        self._answers: dict[int, str] = {}
        self._result: AnalysisResult | None = None
        self._font_size: int = 14

        self._build_ui(on_retake)

    def _build_ui(self, on_retake: Callable[[], None]) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.headline_label = QLabel("", self)
        self.headline_label.setStyleSheet(Styles.get_large_label_style())
        layout.addWidget(self.headline_label)

        self.summary_label = QLabel("", self)
        self.summary_label.setWordWrap(True)
        layout.addWidget(self.summary_label)

        sections_group = QGroupBox("Section-wise Analysis", self)
        sections_layout = QVBoxLayout()
        sections_group.setLayout(sections_layout)
        self.section_table = QTableWidget(0, 6, self)
        self.section_table.setHorizontalHeaderLabels(
            ["Section", "Score", "Correct", "Wrong", "Unattempted", "Accuracy"]
        )
        self.section_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.section_table.horizontalHeader().setSectionResizeMode(0, QHeaderView.Stretch)
        self.section_table.verticalHeader().setVisible(False)
        sections_layout.addWidget(self.section_table)
        layout.addWidget(sections_group)

        review_group = QGroupBox("Question Review", self)
        review_layout = QVBoxLayout()
        review_group.setLayout(review_layout)
        splitter = QSplitter(Qt.Horizontal, self)
        self.review_table = QTableWidget(0, 4, self)
        self.review_table.setHorizontalHeaderLabels(["#", "Your Answer", "Correct", "Result"])
        self.review_table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.review_table.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.review_table.setSelectionMode(QAbstractItemView.SingleSelection)
        self.review_table.verticalHeader().setVisible(False)
        self.review_table.currentCellChanged.connect(self._on_review_row_changed)
        splitter.addWidget(self.review_table)
        self.review_view = QWebEngineView(self)
        splitter.addWidget(self.review_view)
        splitter.setStretchFactor(1, 2)
        review_layout.addWidget(splitter)
        layout.addWidget(review_group, stretch=1)

        button_row = QHBoxLayout()
        button_row.addStretch()
        self.retake_button = QPushButton(BUTTON_RETAKE, self)
        self.retake_button.setStyleSheet(Styles.get_primary_button_style())
        self.retake_button.clicked.connect(on_retake)
        button_row.addWidget(self.retake_button)
        layout.addLayout(button_row)

    def show_result(
        self,
        result: AnalysisResult,
        questions: Sequence[Question],
        answers: Mapping[int, str],
        auto_submitted: bool = False,
    ) -> None:
        if result is self._result:
            return
        self._result = result
        self._questions = list(questions)
        self._answers = dict(answers)

        overall = result.overall
        self.headline_label.setText(
            f"Score: {overall.score:g} / {overall.max_score:g}"
        )
        summary_lines = [
            f"Correct: {overall.correct_count}   Wrong: {overall.incorrect_count}   "
            f"Unattempted: {overall.unattempted_count}",
            f"Accuracy: {overall.accuracy:.2f}%   Attempted: {overall.attempt_rate:.2f}%",
            f"Time taken: {format_time_taken(result.time_taken_seconds)}",
        ]
        if auto_submitted:
            summary_lines.append("The quiz was submitted automatically when time ran out.")
        self.summary_label.setText("\n".join(summary_lines))

        self.section_table.setRowCount(len(result.sections))
        for row, section in enumerate(result.sections):
            summary = section.summary
            values = [
                section.title,
                f"{summary.score:g} / {summary.max_score:g}",
                str(summary.correct_count),
                str(summary.incorrect_count),
                str(summary.unattempted_count),
                f"{summary.accuracy:.2f}%",
            ]
            for column, value in enumerate(values):
                self.section_table.setItem(row, column, QTableWidgetItem(value))

        self.review_table.setRowCount(len(self._questions))
        for row, question in enumerate(self._questions):
            answer = self._answers.get(row)
            outcome = result.outcomes[row] if row < len(result.outcomes) else QuestionOutcome.UNATTEMPTED
            values = [
                str(row + 1),
                answer.upper() if answer else "-",
                (question.correct_option or "-").upper(),
                _OUTCOME_LABELS[outcome],
            ]
            for column, value in enumerate(values):
                self.review_table.setItem(row, column, QTableWidgetItem(value))

        if self._questions:
            self.review_table.setCurrentCell(0, 0)
            self._show_review(0)
        else:
            self.review_view.setHtml("")

    def _on_review_row_changed(self, row: int, _column: int, _prev_row: int, _prev_column: int) -> None:
        self._show_review(row)

    def _show_review(self, row: int) -> None:
        if not 0 <= row < len(self._questions):
            return
        html = renderer.render_review(
            self._questions[row],
            self._answers.get(row),
            position=row + 1,
            font_size=self._font_size,
        )
        self.review_view.setHtml(html)

    def apply_font_size(self, font_size: int) -> None:
        self._font_size = font_size
        self._show_review(self.review_table.currentRow())

    def clear(self) -> None:
        self._result = None
        self._questions = []
        self._answers = {}
        self.section_table.setRowCount(0)
        self.review_table.setRowCount(0)
        self.review_view.setHtml("")
