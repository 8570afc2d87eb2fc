"""Component showing the focused question, its options and navigation controls."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QRadioButton,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.exam_constants import OPTION_KEYS
from exam_app.constants.ui_constants import (
    BUTTON_CLEAR,
    BUTTON_MARK,
    BUTTON_NEXT,
    BUTTON_PREVIOUS,
    GENERAL_SECTION_TITLE,
)
from exam_app.core.exam_manager import ExamSnapshot
from exam_app.core.markdown_math_renderer import renderer
from exam_app.core.models import SessionState
from exam_app.styling.styles import Styles


class QuestionPanel(QWidget):
    """UI component for answering the focused question."""

    def __init__(
        self,
        on_select: Callable[[str], None],
        on_previous: Callable[[], None],
        on_next: Callable[[], None],
        on_clear: Callable[[], None],
        on_mark: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_select = on_select
        self._font_size: int = 14
        self._rendered_question_id: int | None = None

        self._build_ui(on_previous, on_next, on_clear, on_mark)

    def _build_ui(
        self,
        on_previous: Callable[[], None],
        on_next: Callable[[], None],
        on_clear: Callable[[], None],
        on_mark: Callable[[], None],
    ) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        header_row = QHBoxLayout()
        self.progress_label = QLabel("", self)
        self.progress_label.setStyleSheet("font-weight: bold;")
        header_row.addWidget(self.progress_label)
        header_row.addStretch()
        self.section_label = QLabel("", self)
        header_row.addWidget(self.section_label)
        layout.addLayout(header_row)

        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view, stretch=1)

        options_row = QHBoxLayout()
        self.option_group = QButtonGroup(self)
        self.option_group.setExclusive(True)
        self.option_buttons: dict[str, QRadioButton] = {}
        for key in OPTION_KEYS:
            button = QRadioButton(key.upper(), self)
            button.toggled.connect(lambda checked, k=key: checked and self.on_select(k))
            self.option_group.addButton(button)
            self.option_buttons[key] = button
            options_row.addWidget(button)
        options_row.addStretch()
        layout.addLayout(options_row)

        controls_row = QHBoxLayout()
        self.previous_button = QPushButton(BUTTON_PREVIOUS, self)
        self.previous_button.clicked.connect(on_previous)
        controls_row.addWidget(self.previous_button)

        self.clear_button = QPushButton(BUTTON_CLEAR, self)
        self.clear_button.clicked.connect(on_clear)
        controls_row.addWidget(self.clear_button)

        self.mark_button = QPushButton(BUTTON_MARK, self)
        self.mark_button.clicked.connect(on_mark)
        controls_row.addWidget(self.mark_button)

        controls_row.addStretch()

        self.next_button = QPushButton(BUTTON_NEXT, self)
        self.next_button.setStyleSheet(Styles.get_primary_button_style())
        self.next_button.clicked.connect(on_next)
        controls_row.addWidget(self.next_button)
        layout.addLayout(controls_row)

    def update_view(self, snapshot: ExamSnapshot) -> None:
        question = snapshot.current_question
        taking = snapshot.state is SessionState.TAKING
        if question is None:
            self.progress_label.setText("")
            self.section_label.setText("")
            self._rendered_question_id = None
            for button in self.option_buttons.values():
                button.setVisible(False)
            self._set_controls_enabled(False, snapshot)
            return

        self.progress_label.setText(
            f"Question {snapshot.current_index + 1} of {snapshot.question_count}"
        )
        section = snapshot.current_section
        self.section_label.setText(section.title if section else GENERAL_SECTION_TITLE)

        if question.id != self._rendered_question_id:
            self._rendered_question_id = question.id
            self.preview_view.setHtml(renderer.render_question(question, self._font_size))

        available = question.available_keys()
        self.option_group.setExclusive(False)
        for key, button in self.option_buttons.items():
            button.blockSignals(True)
            button.setVisible(key in available)
            button.setChecked(snapshot.current_answer == key)
            button.setEnabled(taking)
            button.blockSignals(False)
        self.option_group.setExclusive(True)
        self._set_controls_enabled(taking, snapshot)

    def _set_controls_enabled(self, taking: bool, snapshot: ExamSnapshot) -> None:
        has_question = snapshot.current_question is not None
        self.previous_button.setEnabled(taking and snapshot.current_index > 0)
        self.next_button.setEnabled(taking and snapshot.current_index < snapshot.question_count - 1)
        self.clear_button.setEnabled(taking and snapshot.current_answer is not None)
        self.mark_button.setEnabled(taking and has_question)

    def apply_font_size(self, font_size: int) -> None:
        self._font_size = font_size
        self._rendered_question_id = None
        style = f"font-size: {font_size}pt;"
        for button in self.option_buttons.values():
            button.setStyleSheet(style)
