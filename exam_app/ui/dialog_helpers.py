"""Helper functions for common dialog patterns in the exam UI."""

from __future__ import annotations

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QMessageBox, QWidget

from exam_app.constants.ui_constants import EXIT_CONFIRM_MESSAGE, SUBMIT_CONFIRM_MESSAGE
from exam_app.core.models import ExamPattern, QuestionStatus


def _apply_optional_font(widget: QWidget, font_point_size: int | None) -> None:
    """Apply font size to a widget when requested."""
    if font_point_size is None or font_point_size <= 0:
        return

    font: QFont = widget.font()
    font.setPointSize(font_point_size)
    widget.setFont(font)


def confirm_submit(parent: QWidget, status_counts: dict[QuestionStatus, int]) -> bool:
    """Show confirmation dialog before submitting the exam.

    Args:
        parent: Parent widget for the dialog
        status_counts: Number of questions per status, summarized in the dialog

    Returns:
        True if user confirmed, False otherwise
    """
    answered = status_counts.get(QuestionStatus.ANSWERED, 0) + status_counts.get(
        QuestionStatus.ANSWERED_AND_MARKED, 0
    )
    unanswered = sum(status_counts.values()) - answered
    marked = status_counts.get(QuestionStatus.MARKED_FOR_REVIEW, 0) + status_counts.get(
        QuestionStatus.ANSWERED_AND_MARKED, 0
    )
    reply = QMessageBox.question(
        parent,
        "Confirm Submission",
        f"{SUBMIT_CONFIRM_MESSAGE}\n\n"
        f"Answered: {answered}\nNot answered: {unanswered}\nMarked for review: {marked}",
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def confirm_exit(parent: QWidget) -> bool:
    """Ask before leaving an exam that is still in progress."""
    reply = QMessageBox.question(
        parent,
        "Exit Quiz",
        EXIT_CONFIRM_MESSAGE,
        QMessageBox.Yes | QMessageBox.No,
        QMessageBox.No
    )
    return reply == QMessageBox.Yes


def show_pattern_info(parent: QWidget, pattern: ExamPattern) -> None:
    lines = [
        f"Total Questions: {pattern.total_questions}",
        f"Total Marks: {pattern.total_marks:g} ({pattern.marks_per_correct:g} marks per question)",
        f"Time: {pattern.time_minutes} minutes",
        f"Negative Marking: -{pattern.negative_marking:.2f} marks for wrong answers",
    ]
    if pattern.sections:
        lines.append("")
        lines.append("Section-wise Distribution:")
        for title, count, marks in pattern.sections:
            lines.append(f"  {title}: {count} questions, {marks:g} marks")
    show_info(parent, "Quiz Pattern Information", "\n".join(lines))


def show_error(parent: QWidget, title: str, message: str) -> None:
    """Show error dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Error message
    """
    QMessageBox.critical(parent, title, message)


def show_info(
    parent: QWidget,
    title: str,
    message: str,
    *,
    font_point_size: int | None = None,
) -> None:
    """Show information dialog.

    Args:
        parent: Parent widget for the dialog
        title: Dialog title
        message: Information message
    """
    msg_box = QMessageBox(parent)
    msg_box.setIcon(QMessageBox.Information)
    msg_box.setWindowTitle(title)
    msg_box.setText(message)
    msg_box.setStandardButtons(QMessageBox.Ok)
    _apply_optional_font(msg_box, font_point_size)
    msg_box.exec()
