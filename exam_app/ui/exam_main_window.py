"""Qt main window for taking a timed exam and reviewing the result."""

from __future__ import annotations

from enum import Enum, auto
import logging
from pathlib import Path

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSplitter,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from exam_app.constants.exam_constants import TIMER_WARNING_WINDOW_SECONDS
from exam_app.constants.ui_constants import (
    AUTO_SUBMIT_MESSAGE,
    BUTTON_HELP,
    BUTTON_LOAD,
    BUTTON_PATTERN,
    BUTTON_SETTINGS,
    BUTTON_SUBMIT,
    BUTTON_TRY_AGAIN,
    CLOCK_TICK_INTERVAL_MS,
    EXAM_URL_PLACEHOLDER,
    IMPORT_DIALOG_TITLE,
    IMPORT_FILE_FILTER,
    LOADING_MESSAGE,
    NO_QUESTIONS_MESSAGE,
    REFRESH_INTERVAL_MS,
    SUBMITTING_MESSAGE,
    WINDOW_TITLE,
)
from exam_app.core.analysis import format_clock
from exam_app.core.exam_manager import ExamManager, ExamSnapshot
from exam_app.core.models import SessionState
from exam_app.core.services.exam_session import SessionEventKind
from exam_app.styling.styles import Styles
from exam_app.ui.components.navigator_panel import NavigatorPanel
from exam_app.ui.components.question_panel import QuestionPanel
from exam_app.ui.components.result_panel import ResultPanel
from exam_app.ui.dialog_helpers import (
    confirm_exit,
    confirm_submit,
    show_error,
    show_info,
    show_pattern_info,
)
from exam_app.ui.settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)


class ExamView(Enum):
    """Page of the central stack shown for the current session state."""

    MESSAGE = auto()
    TAKING = auto()
    RESULT = auto()


class ExamMainWindow(QMainWindow):
    """Main Qt window mirroring the exam session held by the manager."""

    def __init__(self, exam_manager: ExamManager, exam_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1100, 750)

        self.exam_manager = exam_manager
        self.exam_url = exam_url or EXAM_URL_PLACEHOLDER

        self._font_size: int = 14
        self._view = ExamView.MESSAGE

        self._build_ui()
        self._configure_timers()
        self._apply_styles()
        self._refresh_state()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self._build_header(root_layout)

        self.view_stack = QStackedWidget(self)

        message_page = QWidget(self)
        message_layout = QVBoxLayout()
        message_page.setLayout(message_layout)
        message_layout.addStretch()
        self.message_label = QLabel(LOADING_MESSAGE, message_page)
        self.message_label.setAlignment(Qt.AlignCenter)
        self.message_label.setWordWrap(True)
        self.message_label.setStyleSheet(Styles.get_large_label_style())
        message_layout.addWidget(self.message_label)
        self.try_again_button = QPushButton(BUTTON_TRY_AGAIN, message_page)
        self.try_again_button.clicked.connect(self._handle_try_again)
        message_layout.addWidget(self.try_again_button, alignment=Qt.AlignCenter)
        message_layout.addStretch()

        taking_page = QSplitter(Qt.Horizontal, self)
        self.question_panel = QuestionPanel(
            on_select=lambda key: self._after(self.exam_manager.select_option(key)),
            on_previous=self._run_and_refresh(self.exam_manager.move_to_previous_question),
            on_next=self._run_and_refresh(self.exam_manager.move_to_next_question),
            on_clear=self._run_and_refresh(self.exam_manager.clear_response),
            on_mark=self._run_and_refresh(self.exam_manager.mark_for_review),
            parent=taking_page,
        )
        self.navigator_panel = NavigatorPanel(
            on_jump=lambda index: self._after(self.exam_manager.jump_to_question(index)),
            on_toggle_section=lambda position: self._after(self.exam_manager.toggle_section(position)),
            parent=taking_page,
        )
        taking_page.addWidget(self.question_panel)
        taking_page.addWidget(self.navigator_panel)
        taking_page.setStretchFactor(0, 3)
        taking_page.setStretchFactor(1, 1)

        self.result_panel = ResultPanel(on_retake=self._handle_try_again, parent=self)

        self.view_stack.addWidget(message_page)
        self.view_stack.addWidget(taking_page)
        self.view_stack.addWidget(self.result_panel)
        root_layout.addWidget(self.view_stack, stretch=1)

        self.url_label = QLabel(f"Browser page: {self.exam_url}", self)
        self.url_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        root_layout.addWidget(self.url_label)

    def _build_header(self, layout: QVBoxLayout) -> None:
        header_row = QHBoxLayout()

        self.title_label = QLabel("", self)
        self.title_label.setStyleSheet(Styles.get_large_label_style())
        header_row.addWidget(self.title_label)
        header_row.addStretch()

        self.clock_label = QLabel(format_clock(0), self)
        header_row.addWidget(self.clock_label)

        self.submit_button = QPushButton(BUTTON_SUBMIT, self)
        self.submit_button.clicked.connect(self._handle_submit_button)
        header_row.addWidget(self.submit_button)

        self.pattern_button = QPushButton(BUTTON_PATTERN, self)
        self.pattern_button.clicked.connect(self._handle_pattern)
        header_row.addWidget(self.pattern_button)

        self.load_button = QPushButton(BUTTON_LOAD, self)
        self.load_button.clicked.connect(self._handle_load_questions)
        header_row.addWidget(self.load_button)

        self.settings_button = QPushButton(BUTTON_SETTINGS, self)
        self.settings_button.clicked.connect(self._handle_settings)
        header_row.addWidget(self.settings_button)

        self.help_button = QPushButton(BUTTON_HELP, self)
        self.help_button.clicked.connect(self._handle_help)
        header_row.addWidget(self.help_button)

        layout.addLayout(header_row)

    def _configure_timers(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

        self.clock_timer = QTimer(self)
        self.clock_timer.setInterval(CLOCK_TICK_INTERVAL_MS)
        self.clock_timer.timeout.connect(self._handle_clock_tick)

    def _run_and_refresh(self, action):
        def handler() -> None:
            self._after(action())

        return handler

    def _after(self, _accepted: bool) -> None:
        self._refresh_state()

    def _handle_clock_tick(self) -> None:
        self.exam_manager.tick()
        self._refresh_state()

    def _refresh_state(self) -> None:
        self._handle_events()
        snapshot = self.exam_manager.snapshot()
        self._sync_clock_timer(snapshot)

        self.title_label.setText(snapshot.title)
        self.clock_label.setText(format_clock(snapshot.remaining_seconds))
        self.clock_label.setStyleSheet(
            Styles.get_clock_style(
                snapshot.state is SessionState.TAKING
                and snapshot.remaining_seconds <= TIMER_WARNING_WINDOW_SECONDS
            )
        )

        taking = snapshot.state is SessionState.TAKING
        self.submit_button.setEnabled(taking and snapshot.question_count > 0)
        self.pattern_button.setEnabled(snapshot.state is not SessionState.LOADING)
        self.load_button.setEnabled(snapshot.state is not SessionState.SUBMITTING)

        if snapshot.state is SessionState.TAKING and snapshot.question_count > 0:
            self._set_view(ExamView.TAKING)
            self.question_panel.update_view(snapshot)
            self.navigator_panel.update_view(snapshot)
        elif snapshot.state is SessionState.SUBMITTED:
            self._set_view(ExamView.RESULT)
            self.result_panel.show_result(
                snapshot.analysis,
                self.exam_manager.get_questions(),
                self.exam_manager.get_answers(),
                auto_submitted=snapshot.auto_submitted,
            )
        else:
            self._show_message(snapshot)

    def _show_message(self, snapshot: ExamSnapshot) -> None:
        self._set_view(ExamView.MESSAGE)
        self.try_again_button.setVisible(snapshot.state is SessionState.ERROR)
        if snapshot.state is SessionState.ERROR:
            self.message_label.setText(snapshot.error_message or "Something went wrong.")
        elif snapshot.state is SessionState.SUBMITTING:
            self.message_label.setText(SUBMITTING_MESSAGE)
        elif snapshot.state is SessionState.TAKING:
            self.message_label.setText(NO_QUESTIONS_MESSAGE)
        else:
            self.message_label.setText(LOADING_MESSAGE)

    def _set_view(self, view: ExamView) -> None:
        if view is self._view:
            return
        self._view = view
        index_map = {
            ExamView.MESSAGE: 0,
            ExamView.TAKING: 1,
            ExamView.RESULT: 2,
        }
        self.view_stack.setCurrentIndex(index_map[view])
        if view is not ExamView.RESULT:
            self.result_panel.clear()

    def _sync_clock_timer(self, snapshot: ExamSnapshot) -> None:
        should_run = snapshot.state is SessionState.TAKING and self.exam_manager.is_timer_running()
        if should_run and not self.clock_timer.isActive():
            self.clock_timer.start()
        elif not should_run and self.clock_timer.isActive():
            self.clock_timer.stop()

    def _handle_events(self) -> None:
        for event in self.exam_manager.drain_events():
            if event.kind is SessionEventKind.SUBMIT_REQUESTED:
                if confirm_submit(self, self.exam_manager.snapshot().status_counts):
                    self.exam_manager.submit()
            elif event.kind is SessionEventKind.AUTO_SUBMITTED:
                show_info(self, "Time is up", AUTO_SUBMIT_MESSAGE)
            elif event.kind is SessionEventKind.ERROR:
                show_error(self, "Quiz error", event.message or "Something went wrong.")
            elif event.kind is SessionEventKind.SUBMITTED:
                logger.info("Exam submitted from the desktop or browser")

    def _handle_submit_button(self) -> None:
        self.exam_manager.prompt_submit()
        self._refresh_state()

    def _handle_try_again(self) -> None:
        if not self.exam_manager.reload():
            self._handle_load_questions()
            return
        self._refresh_state()

    def _handle_pattern(self) -> None:
        show_pattern_info(self, self.exam_manager.get_exam_pattern())

    def _handle_load_questions(self) -> None:
        if self.exam_manager.get_state() is SessionState.TAKING and not confirm_exit(self):
            return

        file_path, _ = QFileDialog.getOpenFileName(
            self,
            IMPORT_DIALOG_TITLE,
            str(Path.home()),
            IMPORT_FILE_FILTER,
        )
        if not file_path:
            return

        self.exam_manager.load_from_file(Path(file_path))
        self._refresh_state()

    def _handle_help(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}\n\n"
            f"{HELP_TEXT}"
        )
        show_info(self, f"{APP_NAME} Help", details)

    def _handle_settings(self) -> None:
        dialog = SettingsDialog(self, self.exam_manager.get_settings(), self._font_size)
        if dialog.exec():
            try:
                self.exam_manager.apply_settings(dialog.get_settings())
            except ValueError as exc:
                show_error(self, "Invalid settings", str(exc))
                return
            self._font_size = dialog.get_font_size()
            self._apply_styles()

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style())
        self.submit_button.setStyleSheet(Styles.get_primary_button_style())
        self.question_panel.apply_font_size(self._font_size)
        self.result_panel.apply_font_size(self._font_size)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        if self.exam_manager.get_state() is SessionState.TAKING and not confirm_exit(self):
            event.ignore()
            return
        self.refresh_timer.stop()
        self.clock_timer.stop()
        event.accept()
