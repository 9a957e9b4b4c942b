from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from eduquiz.core.models import (
    PlayerAnswer,
    Quiz,
    QuizAnswer,
    QuizAnswerKey,
    QuizAttempt,
    QuizQuestion,
)
from eduquiz.core.services.file_store import QuizFileStore

QuizFactory = Callable[..., Quiz]
AttemptFactory = Callable[..., QuizAttempt]


def _question(number: int) -> QuizQuestion:
    question_id = f"question-{number}"
    return QuizQuestion(
        id=question_id,
        question=f"Question {number}?",
        possible_answers=(
            QuizAnswer(id=f"{question_id}-a", text="Alpha"),
            QuizAnswer(id=f"{question_id}-b", text="Beta"),
            QuizAnswer(id=f"{question_id}-c", text="Gamma"),
        ),
    )


@pytest.fixture
def make_quiz() -> QuizFactory:
    """Build a quiz whose questions are ``question-1`` .. ``question-N``."""

    def _make(question_count: int = 3, quiz_id: str = "q1", **overrides: object) -> Quiz:
        fields: dict[str, object] = {
            "id": quiz_id,
            "name": "Sample Quiz",
            "description": "A quiz used in tests",
            "questions": tuple(_question(n) for n in range(1, question_count + 1)),
            "total_time_seconds": 600,
            "random": False,
        }
        fields.update(overrides)
        return Quiz(**fields)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def quiz(make_quiz: QuizFactory) -> Quiz:
    return make_quiz()


@pytest.fixture
def answer_key(quiz: Quiz) -> QuizAnswerKey:
    """Answer ``-a`` is correct for every question."""
    return QuizAnswerKey(
        quiz_id=quiz.id,
        correct_answers={question.id: f"{question.id}-a" for question in quiz.questions},
        version="1.0",
        created_at="2024-01-01T00:00:00Z",
    )


@pytest.fixture
def make_attempt() -> AttemptFactory:
    """Build an attempt from a ``{question_id: answer_id}`` mapping."""

    counter = iter(range(1, 10_000))

    def _make(
        selections: dict[str, str] | None = None,
        *,
        quiz_id: str = "q1",
        player_name: str = "Ann",
        player_number: int | None = None,
        total_time_seconds: int = 60,
        completed_at: str = "2024-01-01T00:00:00Z",
    ) -> QuizAttempt:
        return QuizAttempt(
            id=f"attempt-{next(counter)}",
            quiz_id=quiz_id,
            player_name=player_name,
            answers=tuple(
                PlayerAnswer(question_id=question_id, selected_answer_id=answer_id)
                for question_id, answer_id in (selections or {}).items()
            ),
            total_time_seconds=total_time_seconds,
            completed_at=completed_at,
            player_number=player_number,
        )

    return _make


@pytest.fixture
def file_store(tmp_path: Path) -> QuizFileStore:
    return QuizFileStore(base_dir=tmp_path)
