"""Qt UI components for the exam application."""

from .dialog_helpers import (
    confirm_exit,
    confirm_submit,
    show_error,
    show_info,
    show_pattern_info,
)
from .exam_main_window import ExamMainWindow

__all__ = [
    "ExamMainWindow",
    "confirm_exit",
    "confirm_submit",
    "show_error",
    "show_info",
    "show_pattern_info",
]
