"""Static metadata describing ExamQt."""

APP_NAME = "ExamQt"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "ExamQt runs timed, sectioned multiple-choice mock tests with negative marking. "
    "Take the test in the desktop window or from a browser on the local network, "
    "then review the overall and section-wise analysis."
)

HELP_TEXT = (
    "Load a question bank (.json or .txt) and the timer starts immediately.\n\n"
    "Save & Next / Previous move between questions, Clear removes your answer and "
    "Mark flags the question for review. The navigator on the right shows every "
    "question's status per section. The test submits automatically when time runs out.\n\n"
    "Text format:\n\n"
    "SECTION: quantitative_aptitude\n"
    "LEVEL: easy\n"
    "Q: What is $2 + 2$?\n"
    "A: 3\nB: 4\nC: 5\nD: 22\n"
    "CORRECT: B\n"
    "EXPLANATION: Two plus two is four."
)
