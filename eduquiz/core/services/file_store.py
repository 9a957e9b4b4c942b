"""Service that reads and writes EduQuiz documents on disk.

The scoring core never touches the filesystem; this store is the collaborator
that turns files into documents and back, using the naming convention shared
by every EduQuiz client:

    <sanitized quiz name>.quiz                     quiz definition
    <sanitized quiz name>_answers.json             answer key
    <quizId>_<playerName>_<millis>_attempt.json    one attempt per file
    quiz_results_<millis>.csv                      results export
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, TypeVar

from eduquiz.constants.quiz_constants import (
    ANSWER_KEY_FILE_SUFFIX,
    ATTEMPT_FILE_SUFFIX,
    DEFAULT_DATA_DIR,
    QUIZ_FILE_EXTENSION,
    RESULTS_FILE_PREFIX,
)
from eduquiz.core.documents import (
    MalformedDocument,
    answer_key_from_dict,
    answer_key_to_dict,
    attempt_from_dict,
    attempt_to_dict,
    dump_document,
    looks_like_attempt,
    parse_json,
    quiz_from_dict,
    quiz_to_dict,
)
from eduquiz.core.models import Quiz, QuizAnswerKey, QuizAttempt, QuizResults
from eduquiz.core.quiz_builder import sanitize_file_stem
from eduquiz.core.results_exporter import save_results_csv
from eduquiz.utils.identifiers import epoch_millis

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
_PATH_SEPARATORS = re.compile(r"[\\/]")


class QuizFileStore:
    """Loads and saves quizzes, answer keys, attempts and result exports."""

    def __init__(self, base_dir: Path = DEFAULT_DATA_DIR) -> None:
        self._base_dir = Path(base_dir).expanduser()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def resolve(self, path: Path | str) -> Path:
        """Resolve ``path`` relative to the store's base directory."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self._base_dir / candidate
        return candidate.resolve()

    # --- Loading ---

    def load_quiz(self, path: Path | str) -> Quiz:
        return self._load(path, quiz_from_dict)

    def load_answer_key(self, path: Path | str) -> QuizAnswerKey:
        return self._load(path, answer_key_from_dict)

    def load_attempt(self, path: Path | str) -> QuizAttempt:
        """Load an explicitly chosen attempt file; malformed content raises."""
        return self._load(path, _strict_attempt_from_dict)

    def load_attempts_from_folder(self, folder: Path | str) -> list[QuizAttempt]:
        """Load every ``*_attempt.json`` file in ``folder``, skipping unusable ones."""
        folder_path = self.resolve(folder)
        if not folder_path.is_dir():
            raise FileNotFoundError(f"Folder not found: {folder_path}")

        attempts: list[QuizAttempt] = []
        for file_path in sorted(folder_path.glob(f"*{ATTEMPT_FILE_SUFFIX}")):
            if not file_path.is_file():
                continue
            try:
                attempts.append(self._load(file_path, _strict_attempt_from_dict))
            except (MalformedDocument, OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping invalid file %s: %s", file_path.name, exc)
        logger.info("Loaded %d attempt(s) from %s", len(attempts), folder_path)
        return attempts

    # --- Saving ---

    def save_quiz_files(
        self,
        folder: Path | str,
        quiz: Quiz,
        answer_key: QuizAnswerKey,
    ) -> tuple[Path, Path]:
        """Write the quiz and its answer key as two separate files."""
        folder_path = self.resolve(folder)
        stem = sanitize_file_stem(quiz.name)
        quiz_path = self._write(folder_path / f"{stem}{QUIZ_FILE_EXTENSION}", quiz_to_dict(quiz))
        key_path = self._write(folder_path / f"{stem}{ANSWER_KEY_FILE_SUFFIX}", answer_key_to_dict(answer_key))
        return quiz_path, key_path

    def save_attempt(self, attempt: QuizAttempt, folder: Path | str | None = None) -> Path:
        folder_path = self.resolve(folder) if folder is not None else self._base_dir.resolve()
        file_name = attempt_file_name(attempt.quiz_id, attempt.player_name)
        return self._write(folder_path / file_name, attempt_to_dict(attempt))

    def save_results_csv(self, results: QuizResults, path: Path | str | None = None) -> Path:
        if path is None:
            path = f"{RESULTS_FILE_PREFIX}{epoch_millis()}.csv"
        written = save_results_csv(self.resolve(path), results)
        logger.info("Exported results for quiz %s to %s", results.quiz.id, written)
        return written

    # --- Internals ---

    def _load(self, path: Path | str, converter: Callable[[Any], _T]) -> _T:
        file_path = self.resolve(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")
        data = parse_json(file_path.read_text(encoding="utf-8"), file_path)
        try:
            return converter(data)
        except MalformedDocument as exc:
            if exc.source is not None:
                raise
            raise MalformedDocument(str(exc), file_path) from exc

    def _write(self, file_path: Path, document: dict[str, Any]) -> Path:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(dump_document(document), encoding="utf-8")
        logger.info("Wrote %s", file_path)
        return file_path


def attempt_file_name(quiz_id: str, player_name: str, millis: int | None = None) -> str:
    millis = epoch_millis() if millis is None else millis
    stem = _PATH_SEPARATORS.sub("_", f"{quiz_id}_{player_name}")
    return f"{stem}_{millis}{ATTEMPT_FILE_SUFFIX}"


def _strict_attempt_from_dict(data: Any) -> QuizAttempt:
    if not looks_like_attempt(data):
        raise MalformedDocument("Not a quiz attempt (needs quizId, playerName and answers).")
    return attempt_from_dict(data)
