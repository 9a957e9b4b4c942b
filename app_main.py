"""Application entry point for the EduQuiz local API."""

from __future__ import annotations

import argparse
from pathlib import Path

from eduquiz.constants.about import APP_NAME, APP_VERSION
from eduquiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from eduquiz.constants.quiz_constants import DEFAULT_DATA_DIR
from eduquiz.core.services.file_store import QuizFileStore
from eduquiz.server.api_server import run_api_server
from eduquiz.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"{APP_NAME} {APP_VERSION} local API")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help="Folder that relative quiz, attempt and export paths resolve against.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Initialize logging and serve the EduQuiz API until interrupted."""
    args = _parse_args(argv)
    logger = configure_logging()
    logger.info("Starting %s %s", APP_NAME, APP_VERSION)

    file_store = QuizFileStore(base_dir=args.data_dir)
    logger.info("Reading and writing quiz files under %s", file_store.base_dir)
    run_api_server(file_store=file_store, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
