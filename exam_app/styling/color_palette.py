"""Color palette for ExamQt supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from exam_app.core.models import QuestionStatus


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the application."""

    TEXT_PRIMARY = ThemeColors(light="#111827", dark="#F5F5F5")
    TEXT_SECONDARY = ThemeColors(light="#6B7280", dark="#AAAAAA")

    BACKGROUND_SECONDARY = ThemeColors(light="#F3F4F6", dark="#2D2D2D")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#555555")

    BUTTON_PRIMARY_BG = ThemeColors(light="#2563EB", dark="#4A9EFF")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#000000")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F5F5F5", dark="#3A3A3A")
    BUTTON_HOVER_BG = ThemeColors(light="#E8E8E8", dark="#505050")

    ERROR = ThemeColors(light="#DC2626", dark="#FF6B6B")

    # Navigator palette, one entry per question status: (background, text)
    STATUS_COLORS: dict[QuestionStatus, tuple[ThemeColors, ThemeColors]] = {
        QuestionStatus.NOT_VISITED: (
            ThemeColors(light="#E5E7EB", dark="#3A3A3A"),
            ThemeColors(light="#374151", dark="#DDDDDD"),
        ),
        QuestionStatus.NOT_ANSWERED: (
            ThemeColors(light="#EF4444", dark="#B91C1C"),
            ThemeColors(light="#FFFFFF", dark="#FFFFFF"),
        ),
        QuestionStatus.ANSWERED: (
            ThemeColors(light="#22C55E", dark="#15803D"),
            ThemeColors(light="#FFFFFF", dark="#FFFFFF"),
        ),
        QuestionStatus.MARKED_FOR_REVIEW: (
            ThemeColors(light="#FACC15", dark="#CA8A04"),
            ThemeColors(light="#111827", dark="#111827"),
        ),
        QuestionStatus.ANSWERED_AND_MARKED: (
            ThemeColors(light="#22C55E", dark="#15803D"),
            ThemeColors(light="#FFFFFF", dark="#FFFFFF"),
        ),
    }
