"""Conversion between JSON documents and the EduQuiz domain models.

The on-disk format keeps the camelCase keys used by every EduQuiz client::

    quiz        {id, name, description, totalTimeSeconds, random, questions: [
                    {id, question, imageBase64, possibleAnswers: [{id, text}]}]}
    answer key  {quizId, correctAnswers: {questionId: answerId}, version, createdAt}
    attempt     {id, quizId, playerName, playerNumber?, answers: [
                    {questionId, selectedAnswerId, timeSpent?}],
                 totalTimeSeconds, completedAt, version}
    results     {quiz, answerKey, attempts: [attempt + score, percentage],
                 createdAt, version}

Readers are strict about the identifiers the scoring pipeline depends on and
lenient about display-only fields, which fall back to neutral defaults.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from eduquiz.constants.quiz_constants import DOCUMENT_VERSION, MAX_PLAYER_NUMBER, MIN_PLAYER_NUMBER
from eduquiz.core.models import (
    PlayerAnswer,
    ProcessedAttempt,
    Quiz,
    QuizAnswer,
    QuizAnswerKey,
    QuizAttempt,
    QuizQuestion,
    QuizResults,
)

# Keys a file must carry to be treated as an attempt when scanning a folder.
ATTEMPT_REQUIRED_KEYS = ("quizId", "playerName", "answers")


class MalformedDocument(Exception):
    """Raised when a document is not valid JSON or lacks required fields."""

    def __init__(self, message: str, source: Path | str | None = None) -> None:
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


def parse_json(text: str, source: Path | str | None = None) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocument(f"Invalid JSON ({exc.msg} at line {exc.lineno}).", source) from exc


def dump_document(data: dict[str, Any]) -> str:
    """Serialize a document dict the way EduQuiz files are written."""
    return json.dumps(data, indent=2, ensure_ascii=False)


# --- Quiz ---------------------------------------------------------------


def quiz_from_dict(data: Any) -> Quiz:
    obj = _expect_object(data, "quiz")
    questions = [
        _question_from_dict(item)
        for item in _expect_list(_require(obj, "questions", "quiz"), "quiz.questions")
    ]
    return Quiz(
        id=_expect_str(_require(obj, "id", "quiz"), "quiz.id"),
        name=_optional_str(obj.get("name")),
        description=_optional_str(obj.get("description")),
        questions=tuple(questions),
        total_time_seconds=_optional_int(obj.get("totalTimeSeconds"), "quiz.totalTimeSeconds") or 0,
        random=bool(obj.get("random", False)),
    )


def quiz_to_dict(quiz: Quiz) -> dict[str, Any]:
    return {
        "id": quiz.id,
        "name": quiz.name,
        "description": quiz.description,
        "totalTimeSeconds": quiz.total_time_seconds,
        "random": quiz.random,
        "questions": [
            {
                "id": question.id,
                "question": question.question,
                "imageBase64": question.image_base64,
                "possibleAnswers": [
                    {"id": answer.id, "text": answer.text}
                    for answer in question.possible_answers
                ],
            }
            for question in quiz.questions
        ],
    }


def _question_from_dict(data: Any) -> QuizQuestion:
    obj = _expect_object(data, "question")
    answers = []
    for item in _expect_list(obj.get("possibleAnswers", []), "question.possibleAnswers"):
        answer = _expect_object(item, "answer")
        answers.append(
            QuizAnswer(
                id=_expect_str(_require(answer, "id", "answer"), "answer.id"),
                text=_optional_str(answer.get("text")),
            )
        )
    return QuizQuestion(
        id=_expect_str(_require(obj, "id", "question"), "question.id"),
        question=_optional_str(obj.get("question")),
        possible_answers=tuple(answers),
        image_base64=_optional_str(obj.get("imageBase64")),
    )


# --- Answer key ---------------------------------------------------------


def answer_key_from_dict(data: Any) -> QuizAnswerKey:
    obj = _expect_object(data, "answer key")
    raw_answers = _expect_object(_require(obj, "correctAnswers", "answer key"), "answerKey.correctAnswers")
    correct_answers: dict[str, str] = {}
    for question_id, answer_id in raw_answers.items():
        correct_answers[question_id] = _expect_str(answer_id, f"answerKey.correctAnswers.{question_id}")
    return QuizAnswerKey(
        quiz_id=_expect_str(_require(obj, "quizId", "answer key"), "answerKey.quizId"),
        correct_answers=correct_answers,
        version=_optional_str(obj.get("version"), DOCUMENT_VERSION),
        created_at=_optional_str(obj.get("createdAt")),
    )


def answer_key_to_dict(answer_key: QuizAnswerKey) -> dict[str, Any]:
    return {
        "quizId": answer_key.quiz_id,
        "correctAnswers": dict(answer_key.correct_answers),
        "version": answer_key.version,
        "createdAt": answer_key.created_at,
    }


# --- Attempts -----------------------------------------------------------


def looks_like_attempt(data: Any) -> bool:
    """Return True when ``data`` carries every key an attempt file must have.

    An empty ``answers`` list is a valid (unanswered) attempt.
    """
    if not isinstance(data, dict) or any(data.get(key) is None for key in ATTEMPT_REQUIRED_KEYS):
        return False
    return bool(data["quizId"]) and bool(data["playerName"])


def attempt_from_dict(data: Any) -> QuizAttempt:
    obj = _expect_object(data, "attempt")
    return QuizAttempt(**_attempt_fields(obj))


def attempt_to_dict(attempt: QuizAttempt) -> dict[str, Any]:
    document: dict[str, Any] = {
        "id": attempt.id,
        "quizId": attempt.quiz_id,
        "playerName": attempt.player_name,
    }
    if attempt.player_number is not None:
        document["playerNumber"] = attempt.player_number
    document["answers"] = [_player_answer_to_dict(answer) for answer in attempt.answers]
    document["totalTimeSeconds"] = attempt.total_time_seconds
    document["completedAt"] = attempt.completed_at
    document["version"] = attempt.version
    return document


def processed_attempt_from_dict(data: Any) -> ProcessedAttempt:
    obj = _expect_object(data, "processed attempt")
    return ProcessedAttempt(
        **_attempt_fields(obj),
        score=_optional_int(obj.get("score"), "attempt.score") or 0,
        percentage=_optional_int(obj.get("percentage"), "attempt.percentage") or 0,
    )


def processed_attempt_to_dict(attempt: ProcessedAttempt) -> dict[str, Any]:
    document = attempt_to_dict(attempt)
    document["score"] = attempt.score
    document["percentage"] = attempt.percentage
    return document


def _attempt_fields(obj: dict[str, Any]) -> dict[str, Any]:
    answers = [
        _player_answer_from_dict(item)
        for item in _expect_list(_require(obj, "answers", "attempt"), "attempt.answers")
    ]
    player_number = _optional_player_number(obj.get("playerNumber"))
    return {
        "id": _optional_str(obj.get("id")),
        "quiz_id": _expect_str(_require(obj, "quizId", "attempt"), "attempt.quizId"),
        "player_name": _expect_str(_require(obj, "playerName", "attempt"), "attempt.playerName"),
        "answers": tuple(answers),
        "total_time_seconds": _optional_int(obj.get("totalTimeSeconds"), "attempt.totalTimeSeconds") or 0,
        "completed_at": _optional_str(obj.get("completedAt")),
        "version": _optional_str(obj.get("version"), DOCUMENT_VERSION),
        "player_number": player_number,
    }


def _player_answer_from_dict(data: Any) -> PlayerAnswer:
    obj = _expect_object(data, "player answer")
    time_spent = _optional_number(obj.get("timeSpent"), "answer.timeSpent")
    return PlayerAnswer(
        question_id=_expect_str(_require(obj, "questionId", "player answer"), "answer.questionId"),
        # A missing selection is kept as an empty id and scored as incorrect.
        selected_answer_id=_optional_str(obj.get("selectedAnswerId")),
        time_spent=time_spent,
    )


def _player_answer_to_dict(answer: PlayerAnswer) -> dict[str, Any]:
    document: dict[str, Any] = {
        "questionId": answer.question_id,
        "selectedAnswerId": answer.selected_answer_id,
    }
    if answer.time_spent is not None:
        document["timeSpent"] = answer.time_spent
    return document


# --- Results ------------------------------------------------------------


def results_from_dict(data: Any) -> QuizResults:
    obj = _expect_object(data, "results")
    attempts = [
        processed_attempt_from_dict(item)
        for item in _expect_list(obj.get("attempts", []), "results.attempts")
    ]
    return QuizResults(
        quiz=quiz_from_dict(_require(obj, "quiz", "results")),
        answer_key=answer_key_from_dict(_require(obj, "answerKey", "results")),
        attempts=tuple(attempts),
        created_at=_optional_str(obj.get("createdAt")),
        version=_optional_str(obj.get("version"), DOCUMENT_VERSION),
    )


def results_to_dict(results: QuizResults) -> dict[str, Any]:
    return {
        "quiz": quiz_to_dict(results.quiz),
        "answerKey": answer_key_to_dict(results.answer_key),
        "attempts": [processed_attempt_to_dict(attempt) for attempt in results.attempts],
        "createdAt": results.created_at,
        "version": results.version,
    }


# --- Field helpers ------------------------------------------------------


def _require(obj: dict[str, Any], key: str, kind: str) -> Any:
    if key not in obj or obj[key] is None:
        raise MalformedDocument(f"The {kind} document is missing '{key}'.")
    return obj[key]


def _expect_object(value: Any, label: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedDocument(f"Expected {label} to be a JSON object.")
    return value


def _expect_list(value: Any, label: str) -> list[Any]:
    if not isinstance(value, list):
        raise MalformedDocument(f"Expected {label} to be a JSON array.")
    return value


def _expect_str(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise MalformedDocument(f"Expected {label} to be a string.")
    return value


def _optional_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _optional_number(value: Any, label: str) -> int | float | None:
    if value is None:
        return None
    # json accepts NaN, Infinity and overflowing literals such as 1e400.
    if isinstance(value, bool) or not isinstance(value, (int, float)) or (
        isinstance(value, float) and not math.isfinite(value)
    ):
        raise MalformedDocument(f"Expected {label} to be a finite number.")
    return value


def _optional_int(value: Any, label: str) -> int | None:
    number = _optional_number(value, label)
    return None if number is None else int(number)


def _optional_player_number(value: Any) -> int | None:
    number = _optional_number(value, "attempt.playerNumber")
    if number is None:
        return None
    if number != int(number) or not MIN_PLAYER_NUMBER <= number <= MAX_PLAYER_NUMBER:
        raise MalformedDocument(
            f"Expected attempt.playerNumber to be a whole number from {MIN_PLAYER_NUMBER} to {MAX_PLAYER_NUMBER}."
        )
    return int(number)
