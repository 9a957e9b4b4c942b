from __future__ import annotations

from pathlib import Path

from eduquiz.core.models import ProcessedAttempt, QuizResults
from eduquiz.core.results_exporter import results_to_csv, save_results_csv

HEADER = '"Player Name","Score","Percentage","Time Taken (seconds)","Completed At"'


def _attempt(name: str, score: int, percentage: int) -> ProcessedAttempt:
    return ProcessedAttempt(
        id=f"attempt-{name}",
        quiz_id="q1",
        player_name=name,
        answers=(),
        total_time_seconds=125,
        completed_at="2024-01-01T00:00:00Z",
        score=score,
        percentage=percentage,
    )


def test_single_attempt_export(make_quiz, answer_key) -> None:
    results = QuizResults(quiz=make_quiz(5), answer_key=answer_key, attempts=(_attempt("Ann", 3, 60),))

    lines = results_to_csv(results).split("\n")

    assert lines == [
        HEADER,
        '"Ann","3/5","60%","125","2024-01-01T00:00:00Z"',
    ]


def test_rows_follow_stored_order(quiz, answer_key) -> None:
    results = QuizResults(
        quiz=quiz,
        answer_key=answer_key,
        attempts=(_attempt("Zed", 1, 33), _attempt("amy", 3, 100)),
    )

    rows = results_to_csv(results).split("\n")[1:]

    assert [row.split(",")[0] for row in rows] == ['"Zed"', '"amy"']


def test_no_attempts_exports_header_only(quiz, answer_key) -> None:
    assert results_to_csv(QuizResults(quiz=quiz, answer_key=answer_key)) == HEADER


def test_embedded_quotes_are_doubled(quiz, answer_key) -> None:
    results = QuizResults(quiz=quiz, answer_key=answer_key, attempts=(_attempt('Ann "A" Lee', 2, 67),))

    row = results_to_csv(results).split("\n")[1]

    assert row.startswith('"Ann ""A"" Lee","2/3","67%"')


def test_save_results_csv_writes_file(tmp_path: Path, quiz, answer_key) -> None:
    results = QuizResults(quiz=quiz, answer_key=answer_key, attempts=(_attempt("Ann", 3, 100),))

    written = save_results_csv(tmp_path / "exports" / "results.csv", results)

    assert written.exists()
    assert written.read_text(encoding="utf-8") == results_to_csv(results)
