"""Component for the section-wise question navigator palette."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtWidgets import (
    QGridLayout,
    QGroupBox,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.ui_constants import NAVIGATOR_TITLE
from exam_app.core.exam_manager import ExamSnapshot
from exam_app.core.models import QuestionStatus, SessionState
from exam_app.core.section_index import clip_range
from exam_app.styling.styles import Styles

_COLUMNS = 5

_LEGEND = (
    (QuestionStatus.ANSWERED, "Answered"),
    (QuestionStatus.NOT_ANSWERED, "Not Answered"),
    (QuestionStatus.NOT_VISITED, "Not Visited"),
    (QuestionStatus.MARKED_FOR_REVIEW, "Marked for Review"),
    (QuestionStatus.ANSWERED_AND_MARKED, "Answered & Marked"),
)


class NavigatorPanel(QWidget):
    """Accordion of sections, each holding one status-coloured button per question."""

    def __init__(
        self,
        on_jump: Callable[[int], None],
        on_toggle_section: Callable[[int], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.on_jump = on_jump
        self.on_toggle_section = on_toggle_section
        self._layout_key: tuple | None = None
        self._question_buttons: dict[int, QPushButton] = {}
        self._section_headers: list[tuple[int, QPushButton, QWidget]] = []

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.legend_group = QGroupBox(NAVIGATOR_TITLE, self)
        legend_layout = QVBoxLayout()
        self.legend_group.setLayout(legend_layout)
        self.legend_labels: dict[QuestionStatus, QLabel] = {}
        for status, text in _LEGEND:
            label = QLabel(f"0  {text}", self)
            self.legend_labels[status] = label
            legend_layout.addWidget(label)
        layout.addWidget(self.legend_group)

        self.scroll_area = QScrollArea(self)
        self.scroll_area.setWidgetResizable(True)
        self.sections_container = QWidget(self.scroll_area)
        self.sections_layout = QVBoxLayout()
        self.sections_container.setLayout(self.sections_layout)
        self.scroll_area.setWidget(self.sections_container)
        layout.addWidget(self.scroll_area, stretch=1)

    def update_view(self, snapshot: ExamSnapshot) -> None:
        layout_key = (snapshot.question_count, snapshot.sections)
        if layout_key != self._layout_key:
            self._layout_key = layout_key
            self._rebuild(snapshot)

        taking = snapshot.state is SessionState.TAKING
        for status, text in _LEGEND:
            self.legend_labels[status].setText(f"{snapshot.status_counts.get(status, 0)}  {text}")

        for position, header, panel in self._section_headers:
            expanded = position < 0 or position == snapshot.expanded_section_index
            panel.setVisible(expanded)
            header.setEnabled(taking and position >= 0)

        for index, button in self._question_buttons.items():
            status = snapshot.statuses[index]
            button.setStyleSheet(
                Styles.get_status_button_style(status, current=index == snapshot.current_index)
            )
            button.setToolTip(f"Question {index + 1}: {status.value.replace('_', ' ')}")
            button.setEnabled(taking)

    def _rebuild(self, snapshot: ExamSnapshot) -> None:
        while self.sections_layout.count():
            item = self.sections_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._question_buttons = {}
        self._section_headers = []

        covered_end = 0
        for position, section in enumerate(snapshot.sections):
            indices = clip_range(section, snapshot.question_count)
            covered_end = max(covered_end, indices.stop)
            if len(indices) == 0:
                continue
            self._add_group(section.title, indices, position)

        if snapshot.question_count > covered_end:
            # Questions outside every declared section stay reachable.
            self._add_group("Other Questions", range(covered_end, snapshot.question_count), -1)
        self.sections_layout.addStretch()

    def _add_group(self, title: str, indices: range, position: int) -> None:
        header = QPushButton(title, self.sections_container)
        header.setStyleSheet("text-align: left; font-weight: bold;")
        if position >= 0:
            header.clicked.connect(lambda _=False, p=position: self.on_toggle_section(p))
        self.sections_layout.addWidget(header)

        panel = QWidget(self.sections_container)
        grid = QGridLayout()
        panel.setLayout(grid)
        for offset, index in enumerate(indices):
            button = QPushButton(str(index + 1), panel)
            button.clicked.connect(lambda _=False, i=index: self.on_jump(i))
            grid.addWidget(button, offset // _COLUMNS, offset % _COLUMNS)
            self._question_buttons[index] = button
        self.sections_layout.addWidget(panel)
        self._section_headers.append((position, header, panel))
