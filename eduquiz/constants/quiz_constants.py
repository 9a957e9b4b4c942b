"""Quiz-related constants shared by the core and the file store."""

from pathlib import Path

DOCUMENT_VERSION: str = "1.0"

MIN_ANSWER_OPTIONS: int = 2
MAX_ANSWER_OPTIONS: int = 6

DEFAULT_TIME_LIMIT_MINUTES: int = 15
MIN_TIME_LIMIT_MINUTES: int = 1
MAX_TIME_LIMIT_MINUTES: int = 180

MIN_PLAYER_NUMBER: int = 1
MAX_PLAYER_NUMBER: int = 99999

DEFAULT_QUIZ_DESCRIPTION: str = "Custom created quiz"

QUIZ_FILE_EXTENSION: str = ".quiz"
ANSWER_KEY_FILE_SUFFIX: str = "_answers.json"
ATTEMPT_FILE_SUFFIX: str = "_attempt.json"
RESULTS_FILE_PREFIX: str = "quiz_results_"

DEFAULT_DATA_DIR: Path = Path.home() / "Desktop"
