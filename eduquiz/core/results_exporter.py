"""Utilities for exporting quiz results to CSV."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from eduquiz.core.models import ProcessedAttempt, QuizResults

CSV_HEADER = ("Player Name", "Score", "Percentage", "Time Taken (seconds)", "Completed At")


def results_to_csv(results: QuizResults) -> str:
    """Render one fully quoted row per attempt, in the order stored in ``results``.

    Embedded double quotes are doubled so names like ``Ann "A" Lee`` stay in
    one cell. Rows are separated by ``\\n`` and there is no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    question_count = len(results.quiz.questions)
    writer.writerows(_serialize_attempt(attempt, question_count) for attempt in results.attempts)
    return buffer.getvalue().removesuffix("\n")


def save_results_csv(file_path: Path, results: QuizResults) -> Path:
    """Persist the CSV export of ``results`` and return the resolved path."""
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(results_to_csv(results), encoding="utf-8")
    return file_path


def _serialize_attempt(attempt: ProcessedAttempt, question_count: int) -> list[str]:
    return [
        attempt.player_name,
        f"{attempt.score}/{question_count}",
        f"{attempt.percentage}%",
        str(attempt.total_time_seconds),
        attempt.completed_at,
    ]
