from __future__ import annotations

from datetime import datetime, timezone

import pytest

from eduquiz.core.aggregator import aggregate
from eduquiz.core.models import QuizAnswerKey
from eduquiz.core.scorer import score_attempt
from eduquiz.core.validator import AnswerKeyMismatch, AttemptMismatch


def test_aggregate_scores_every_attempt_in_input_order(quiz, answer_key, make_attempt) -> None:
    attempts = [
        make_attempt({"question-1": "question-1-a"}, player_name="Zed"),
        make_attempt({q.id: f"{q.id}-a" for q in quiz.questions}, player_name="Amy"),
        make_attempt({}, player_name="Bob"),
    ]

    results = aggregate(
        quiz,
        answer_key,
        attempts,
        created_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )

    assert [a.player_name for a in results.attempts] == ["Zed", "Amy", "Bob"]
    assert [a.score for a in results.attempts] == [1, 3, 0]
    assert [a.percentage for a in results.attempts] == [33, 100, 0]
    assert results.quiz is quiz
    assert results.answer_key is answer_key
    assert results.version == "1.0"
    assert results.created_at == "2024-05-01T12:30:00.000Z"


def test_scores_do_not_depend_on_other_attempts(quiz, answer_key, make_attempt) -> None:
    target = make_attempt({"question-2": "question-2-a"}, player_name="Solo")
    others = [make_attempt({q.id: f"{q.id}-b" for q in quiz.questions}) for _ in range(3)]

    alone = aggregate(quiz, answer_key, [target]).attempts[0]
    crowded = aggregate(quiz, answer_key, others + [target]).attempts[-1]

    assert alone == crowded == score_attempt(quiz, answer_key, target)


def test_created_at_defaults_to_current_utc_time(quiz, answer_key) -> None:
    results = aggregate(quiz, answer_key, [])

    assert results.attempts == ()
    assert results.created_at.endswith("Z")
    datetime.fromisoformat(results.created_at.replace("Z", "+00:00"))


def test_answer_key_mismatch_produces_no_results(quiz, make_attempt) -> None:
    with pytest.raises(AnswerKeyMismatch):
        aggregate(quiz, QuizAnswerKey(quiz_id="q2", correct_answers={}), [make_attempt()])


def test_attempt_mismatch_produces_no_results(quiz, answer_key, make_attempt) -> None:
    attempts = [make_attempt(), make_attempt(), make_attempt(quiz_id="q3")]

    with pytest.raises(AttemptMismatch):
        aggregate(quiz, answer_key, attempts)
