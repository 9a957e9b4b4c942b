"""Builds a results document from a quiz, its answer key and recorded attempts."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import logging

from eduquiz.constants.quiz_constants import DOCUMENT_VERSION
from eduquiz.core.models import Quiz, QuizAnswerKey, QuizAttempt, QuizResults
from eduquiz.core.scorer import score_attempt
from eduquiz.core.validator import validate
from eduquiz.utils.identifiers import utc_timestamp

logger = logging.getLogger(__name__)


def aggregate(
    quiz: Quiz,
    answer_key: QuizAnswerKey,
    attempts: Iterable[QuizAttempt],
    *,
    created_at: datetime | None = None,
) -> QuizResults:
    """Validate the documents and score every attempt.

    Raises the validator's error unchanged when the documents do not belong
    together; no partial results are produced. Attempts keep their input order.
    """
    attempts = list(attempts)
    validate(quiz, answer_key, attempts)

    processed = tuple(score_attempt(quiz, answer_key, attempt) for attempt in attempts)
    logger.debug("Scored %d attempt(s) for quiz %s", len(processed), quiz.id)
    return QuizResults(
        quiz=quiz,
        answer_key=answer_key,
        attempts=processed,
        created_at=utc_timestamp(created_at),
        version=DOCUMENT_VERSION,
    )
