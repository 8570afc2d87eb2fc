"""Settings dialog for configuring ExamQt preferences."""

from __future__ import annotations

from dataclasses import replace

from PySide6.QtWidgets import (
    QDialog,
    QDoubleSpinBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from exam_app.core.models import ExamSettings


class SettingsDialog(QDialog):
    """Dialog for configuring exam rules and display settings."""

    def __init__(
        self,
        parent=None,
        settings: ExamSettings | None = None,
        font_size: int = 14,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(400)

        self._settings = settings or ExamSettings()
        self._font_size = font_size

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        rules_group = QGroupBox("Exam Rules (applied to the next loaded quiz)")
        rules_layout = QVBoxLayout()
        rules_group.setLayout(rules_layout)

        self.duration_spinbox = QSpinBox()
        self.duration_spinbox.setRange(1, 600)
        self.duration_spinbox.setValue(max(1, self._settings.max_time_seconds // 60))
        self.duration_spinbox.setSuffix(" min")
        rules_layout.addLayout(self._row("Duration:", self.duration_spinbox))

        self.marks_spinbox = QDoubleSpinBox()
        self.marks_spinbox.setRange(0.0, 100.0)
        self.marks_spinbox.setSingleStep(0.25)
        self.marks_spinbox.setValue(self._settings.marks_per_correct)
        rules_layout.addLayout(self._row("Marks per correct answer:", self.marks_spinbox))

        self.penalty_spinbox = QDoubleSpinBox()
        self.penalty_spinbox.setRange(0.0, 100.0)
        self.penalty_spinbox.setSingleStep(0.25)
        self.penalty_spinbox.setValue(self._settings.penalty_per_wrong)
        self.penalty_spinbox.setToolTip("Marks deducted for each wrong answer")
        rules_layout.addLayout(self._row("Negative marks per wrong answer:", self.penalty_spinbox))

        layout.addWidget(rules_group)

        display_group = QGroupBox("Display Settings")
        display_layout = QVBoxLayout()
        display_group.setLayout(display_layout)

        self.font_spinbox = QSpinBox()
        self.font_spinbox.setRange(10, 32)
        self.font_spinbox.setValue(self._font_size)
        self.font_spinbox.setSuffix(" pt")
        display_layout.addLayout(self._row("Question font size:", self.font_spinbox))

        layout.addWidget(display_group)

        button_row = QHBoxLayout()
        button_row.addStretch()

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)

        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.apply_button.setDefault(True)
        button_row.addWidget(self.apply_button)

        layout.addLayout(button_row)

    @staticmethod
    def _row(text: str, widget) -> QHBoxLayout:
        row = QHBoxLayout()
        row.addWidget(QLabel(text))
        row.addStretch()
        row.addWidget(widget)
        return row

    def get_settings(self) -> ExamSettings:
        """Get the exam settings chosen in the dialog."""
        return replace(
            self._settings,
            max_time_seconds=self.duration_spinbox.value() * 60,
            marks_per_correct=self.marks_spinbox.value(),
            penalty_per_wrong=self.penalty_spinbox.value(),
        )

    def get_font_size(self) -> int:
        """Get the selected question font size."""
        return self.font_spinbox.value()
