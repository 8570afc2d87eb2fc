"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "ExamQt"
EXAM_URL_PLACEHOLDER: str = "http://<host-ip>:8000/"
REFRESH_INTERVAL_MS: int = 250
CLOCK_TICK_INTERVAL_MS: int = 1000

BUTTON_SUBMIT: str = "Submit Quiz"
BUTTON_PREVIOUS: str = "Previous"
BUTTON_CLEAR: str = "Clear"
BUTTON_MARK: str = "Mark"
BUTTON_NEXT: str = "Save && Next"
BUTTON_PATTERN: str = "Pattern"
BUTTON_LOAD: str = "Load Questions"
BUTTON_SETTINGS: str = "Settings"
BUTTON_HELP: str = "Help"
BUTTON_TRY_AGAIN: str = "Try Again"
BUTTON_RETAKE: str = "Retake Quiz"

NAVIGATOR_TITLE: str = "Question Navigator"
GENERAL_SECTION_TITLE: str = "General Question"

IMPORT_DIALOG_TITLE: str = "Select question bank"
IMPORT_FILE_FILTER: str = "Question banks (*.json *.txt);;All files (*.*)"

LOADING_MESSAGE: str = "Loading Quiz..."
SUBMITTING_MESSAGE: str = "Submitting your quiz..."
NO_QUESTIONS_MESSAGE: str = "Could not find any questions for this quiz."
AUTO_SUBMIT_MESSAGE: str = "Time is up. Your answers were submitted automatically."
SUBMIT_CONFIRM_MESSAGE: str = (
    "Are you sure you want to submit the quiz? You cannot change your answers afterwards."
)
EXIT_CONFIRM_MESSAGE: str = "Are you sure you want to exit? Your progress will be lost."
