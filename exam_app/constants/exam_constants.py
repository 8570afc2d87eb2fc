"""Exam-related constants shared across UI, server and core layers."""

DEFAULT_EXAM_TITLE: str = "Aptitude Quiz"
DEFAULT_MAX_TIME_SECONDS: int = 60 * 60
DEFAULT_MARKS_PER_CORRECT: float = 2.0
DEFAULT_PENALTY_PER_WRONG: float = 0.5
SUBMIT_DELAY_MS: int = 1000
TIMER_WARNING_WINDOW_SECONDS: int = 5 * 60

OPTION_KEYS: tuple[str, ...] = ("a", "b", "c", "d")

# (key, title, declared question count) in canonical order
DEFAULT_SECTIONS: tuple[tuple[str, str, int], ...] = (
    ("general_intelligence_reasoning", "General Intelligence & Reasoning", 25),
    ("general_awareness", "General Awareness", 25),
    ("quantitative_aptitude", "Quantitative Aptitude", 25),
    ("english_comprehension", "English Comprehension", 25),
)

EVENT_QUEUE_LIMIT: int = 50
