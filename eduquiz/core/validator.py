"""Consistency checks between a quiz, its answer key and recorded attempts."""

from __future__ import annotations

from collections.abc import Iterable

from eduquiz.core.models import Quiz, QuizAnswerKey, QuizAttempt


class ValidationError(Exception):
    """Raised when documents handed to the reviewer do not belong together."""


class AnswerKeyMismatch(ValidationError):
    """The answer key was written for a different quiz."""

    def __init__(self, quiz_id: str, answer_key_quiz_id: str) -> None:
        self.quiz_id = quiz_id
        self.answer_key_quiz_id = answer_key_quiz_id
        super().__init__("Answer key does not match the selected quiz.")


class AttemptMismatch(ValidationError):
    """One or more attempts were recorded for a different quiz."""

    def __init__(self, quiz_id: str, mismatched: list[QuizAttempt]) -> None:
        self.quiz_id = quiz_id
        self.mismatched = mismatched
        players = ", ".join(sorted({a.player_name for a in mismatched}))
        super().__init__(f"Some quiz attempts do not match the selected quiz ({players}).")

    @property
    def foreign_quiz_ids(self) -> set[str]:
        return {attempt.quiz_id for attempt in self.mismatched}


def validate(quiz: Quiz, answer_key: QuizAnswerKey, attempts: Iterable[QuizAttempt]) -> None:
    """Raise a ValidationError subclass unless all documents share ``quiz.id``.

    Every mismatched attempt is reported, not only the first one.
    """
    if answer_key.quiz_id != quiz.id:
        raise AnswerKeyMismatch(quiz.id, answer_key.quiz_id)

    mismatched = [attempt for attempt in attempts if attempt.quiz_id != quiz.id]
    if mismatched:
        raise AttemptMismatch(quiz.id, mismatched)
