"""Application entry point for ExamQt."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
import socket
import sys

from PySide6.QtWidgets import QApplication

from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import start_api_server
from exam_app.ui.exam_main_window import ExamMainWindow
from exam_app.utils.logging_config import configure_logging

QUESTIONS_ENV_VAR = "EXAMQT_QUESTIONS"
SAMPLE_EXAM_PATH = Path(__file__).resolve().parent / "exam_app" / "data" / "sample_exam.json"


def _determine_exam_url(port: int) -> str:
    """Best-effort determination of the local IP for the browser exam page."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Timed multiple-choice mock tests.")
    parser.add_argument(
        "--questions",
        type=Path,
        default=None,
        help=f"Question bank (.json or .txt). Defaults to ${QUESTIONS_ENV_VAR} or the bundled sample.",
    )
    parser.add_argument("--host", default=DEFAULT_HOST, help="Address the browser page binds to.")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port of the browser page.")
    parser.add_argument(
        "--no-server",
        action="store_true",
        help="Only open the desktop window.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def _resolve_questions_path(cli_path: Path | None) -> Path:
    if cli_path is not None:
        return cli_path
    env_path = os.environ.get(QUESTIONS_ENV_VAR)
    if env_path:
        return Path(env_path)
    return SAMPLE_EXAM_PATH


def main(argv: list[str] | None = None) -> None:
    """Initialize logging, load the exam, start the API server, and launch the Qt UI."""
    args = _parse_args(argv)
    logger = configure_logging(args.log_level)
    logger.info("Starting ExamQt...")

    exam_manager = ExamManager()
    questions_path = _resolve_questions_path(args.questions)
    logger.info("Loading questions from %s", questions_path)
    exam_manager.load_from_file(questions_path)

    exam_url = None
    if not args.no_server:
        start_api_server(exam_manager=exam_manager, host=args.host, port=args.port)
        exam_url = _determine_exam_url(args.port)
        logger.info("Exam page available at %s", exam_url)

    app = QApplication(sys.argv)
    window = ExamMainWindow(exam_manager=exam_manager, exam_url=exam_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
