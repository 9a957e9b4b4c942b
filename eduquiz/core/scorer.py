"""Scoring of a single attempt against an answer key."""

from __future__ import annotations

from eduquiz.core.models import PlayerAnswer, ProcessedAttempt, Quiz, QuizAnswerKey, QuizAttempt


def rounded_percentage(numerator: int, denominator: int) -> int:
    """Return ``numerator / denominator * 100`` rounded half up; 0 for an empty denominator."""
    if denominator <= 0:
        return 0
    return round_half_up(numerator * 100, denominator)


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half up for non-negative operands."""
    return (2 * numerator + denominator) // (2 * denominator)


def is_correct(answer_key: QuizAnswerKey, answer: PlayerAnswer) -> bool:
    # Unknown questions and empty selections never match.
    expected = answer_key.correct_answer_for(answer.question_id)
    return expected is not None and answer.selected_answer_id == expected


def score_attempt(quiz: Quiz, answer_key: QuizAnswerKey, attempt: QuizAttempt) -> ProcessedAttempt:
    """Compute the score and percentage for one attempt.

    Each quiz question is scored once, so the percentage stays within 0-100 and
    answers for questions outside the quiz are ignored. Skipped questions count
    against the taker.
    A quiz without questions scores 0%.
    """
    score = 0
    for question in quiz.questions:
        # Only the first answer recorded for a question counts.
        answer = attempt.answer_for(question.id)
        if answer is not None and is_correct(answer_key, answer):
            score += 1
    percentage = rounded_percentage(score, len(quiz.questions))
    return ProcessedAttempt.from_attempt(attempt, score=score, percentage=percentage)
