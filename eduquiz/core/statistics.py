"""Summary statistics and display helpers derived from a results document.

Nothing here is stored in the results document; every value is recomputed
from the processed attempts on demand.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key

from eduquiz.core.models import ProcessedAttempt, QuizAnswer, QuizAttempt, QuizQuestion, QuizResults
from eduquiz.core.scorer import is_correct, round_half_up, rounded_percentage


class PerformanceBand(Enum):
    """Coarse grading band shown next to a percentage."""

    GOOD = "success"
    FAIR = "warning"
    POOR = "error"


@dataclass(slots=True, frozen=True)
class QuestionStatistics:
    """How the attempts in a results document fared on one question."""

    question: QuizQuestion
    correct_answer: QuizAnswer | None
    correct_count: int
    attempt_count: int
    correct_rate: int


@dataclass(slots=True, frozen=True)
class AnswerReview:
    """A taker's answer to one question next to the expected answer."""

    question: QuizQuestion
    selected_answer: QuizAnswer | None
    correct_answer: QuizAnswer | None
    is_correct: bool
    answered: bool


def average_score(results: QuizResults) -> int:
    """Mean attempt percentage rounded half up; 0 when there are no attempts."""
    if not results.attempts:
        return 0
    total = sum(attempt.percentage for attempt in results.attempts)
    return round_half_up(total, len(results.attempts))


def question_correct_rate(results: QuizResults, question_id: str) -> int:
    """Percentage of attempts that answered ``question_id`` correctly.

    Attempts without an answer for the question still count toward the total.
    """
    correct = _count_correct(results, question_id)
    return rounded_percentage(correct, len(results.attempts))


def question_statistics(results: QuizResults) -> list[QuestionStatistics]:
    """Return per-question statistics in quiz order."""
    total = len(results.attempts)
    rows: list[QuestionStatistics] = []
    for question in results.quiz.questions:
        correct = _count_correct(results, question.id)
        rows.append(
            QuestionStatistics(
                question=question,
                correct_answer=question.find_answer(results.answer_key.correct_answer_for(question.id)),
                correct_count=correct,
                attempt_count=total,
                correct_rate=rounded_percentage(correct, total),
            )
        )
    return rows


def performance_band(percentage: int) -> PerformanceBand:
    if percentage >= 80:
        return PerformanceBand.GOOD
    if percentage >= 60:
        return PerformanceBand.FAIR
    return PerformanceBand.POOR


def display_sort_key(attempt: QuizAttempt) -> tuple[int, int, str]:
    """Numbered players first by number, then everyone else by name (case-insensitive)."""
    if attempt.player_number is not None:
        return (0, attempt.player_number, "")
    return (1, 0, (attempt.player_name or "").casefold())


def compare_attempts(first: QuizAttempt, second: QuizAttempt) -> int:
    """Comparator form of :func:`display_sort_key` for callers that sort with ``cmp``."""
    first_key = display_sort_key(first)
    second_key = display_sort_key(second)
    return (first_key > second_key) - (first_key < second_key)


def sort_attempts_for_display(attempts: Iterable[ProcessedAttempt]) -> list[ProcessedAttempt]:
    return sorted(attempts, key=cmp_to_key(compare_attempts))


def review_attempt(results: QuizResults, attempt: ProcessedAttempt) -> list[AnswerReview]:
    """Compare an attempt with the answer key question by question, in quiz order."""
    reviews: list[AnswerReview] = []
    for question in results.quiz.questions:
        player_answer = attempt.answer_for(question.id)
        correct_answer = question.find_answer(results.answer_key.correct_answer_for(question.id))
        reviews.append(
            AnswerReview(
                question=question,
                selected_answer=question.find_answer(player_answer.selected_answer_id) if player_answer else None,
                correct_answer=correct_answer,
                is_correct=player_answer is not None and is_correct(results.answer_key, player_answer),
                answered=player_answer is not None and bool(player_answer.selected_answer_id),
            )
        )
    return reviews


def _count_correct(results: QuizResults, question_id: str) -> int:
    count = 0
    for attempt in results.attempts:
        answer = attempt.answer_for(question_id)
        if answer is not None and is_correct(results.answer_key, answer):
            count += 1
    return count
