"""Centralized styles and font definitions for the application."""

from exam_app.core.models import QuestionStatus

from .color_palette import ColorPalette, Theme

class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QPushButton:disabled {{
                color: {ColorPalette.TEXT_SECONDARY.get(theme)};
            }}
            QGroupBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
            QGroupBox::title {{
                subcontrol-origin: margin;
                left: 10px;
                padding: 0 3px 0 3px;
            }}
        """

    @staticmethod
    def get_primary_button_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};"
            f" color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)}; font-weight: bold;"
        )

    @staticmethod
    def get_status_button_style(status: QuestionStatus, current: bool = False, theme: Theme = Theme.LIGHT) -> str:
        background, text = ColorPalette.STATUS_COLORS[status]
        border = ColorPalette.BUTTON_PRIMARY_BG.get(theme) if current else ColorPalette.BORDER_PRIMARY.get(theme)
        width = 3 if current else 1
        return (
            f"background-color: {background.get(theme)}; color: {text.get(theme)};"
            f" border: {width}px solid {border}; border-radius: 4px; padding: 4px; min-width: 28px;"
        )

    @staticmethod
    def get_clock_style(warning: bool, theme: Theme = Theme.LIGHT) -> str:
        if not warning:
            return "font-size: 16pt; font-weight: bold; padding: 2px 6px;"
        return (
            "font-size: 16pt; font-weight: bold; padding: 2px 6px; border-radius: 4px;"
            f" color: #fff; background-color: {ColorPalette.ERROR.get(theme)};"
        )

    @staticmethod
    def get_large_label_style() -> str:
        return "font-size: 16pt; font-weight: bold;"
