from __future__ import annotations

from functools import cmp_to_key

from eduquiz.core.aggregator import aggregate
from eduquiz.core.models import ProcessedAttempt, QuizAnswerKey, QuizResults
from eduquiz.core.statistics import (
    PerformanceBand,
    average_score,
    compare_attempts,
    performance_band,
    question_correct_rate,
    question_statistics,
    review_attempt,
    sort_attempts_for_display,
)


def _results_with_percentages(quiz, answer_key, percentages: list[int]) -> QuizResults:
    attempts = tuple(
        ProcessedAttempt(
            id=f"a{i}",
            quiz_id=quiz.id,
            player_name=f"P{i}",
            answers=(),
            percentage=value,
        )
        for i, value in enumerate(percentages)
    )
    return QuizResults(quiz=quiz, answer_key=answer_key, attempts=attempts)


def test_average_score(quiz, answer_key) -> None:
    assert average_score(_results_with_percentages(quiz, answer_key, [100, 50, 0])) == 50
    assert average_score(_results_with_percentages(quiz, answer_key, [100, 67])) == 84
    assert average_score(_results_with_percentages(quiz, answer_key, [])) == 0


def test_question_correct_rate_two_of_three(make_quiz, make_attempt) -> None:
    quiz = make_quiz(1)
    answer_key = QuizAnswerKey(quiz_id=quiz.id, correct_answers={"question-1": "a1"})
    attempts = [
        make_attempt({"question-1": "a1"}),
        make_attempt({"question-1": "a1"}),
        make_attempt({"question-1": "a2"}),
    ]

    results = aggregate(quiz, answer_key, attempts)

    assert question_correct_rate(results, "question-1") == 67


def test_unanswered_question_counts_in_denominator(quiz, answer_key, make_attempt) -> None:
    results = aggregate(
        quiz,
        answer_key,
        [make_attempt({"question-1": "question-1-a"}), make_attempt({})],
    )

    assert question_correct_rate(results, "question-1") == 50
    assert question_correct_rate(results, "question-2") == 0


def test_correct_rate_without_attempts_is_zero(quiz, answer_key) -> None:
    results = aggregate(quiz, answer_key, [])

    assert question_correct_rate(results, "question-1") == 0
    assert all(row.correct_rate == 0 for row in question_statistics(results))


def test_question_statistics_follow_quiz_order(quiz, answer_key, make_attempt) -> None:
    results = aggregate(
        quiz,
        answer_key,
        [
            make_attempt({"question-1": "question-1-a", "question-2": "question-2-b"}),
            make_attempt({"question-1": "question-1-a", "question-3": "question-3-a"}),
        ],
    )

    rows = question_statistics(results)

    assert [row.question.id for row in rows] == ["question-1", "question-2", "question-3"]
    assert [row.correct_count for row in rows] == [2, 0, 1]
    assert [row.correct_rate for row in rows] == [100, 0, 50]
    assert all(row.attempt_count == 2 for row in rows)
    assert rows[0].correct_answer is not None
    assert rows[0].correct_answer.text == "Alpha"


def test_display_order_numbers_first_then_names(make_attempt) -> None:
    attempts = [
        make_attempt(player_name="Two", player_number=2),
        make_attempt(player_name="One", player_number=1),
        make_attempt(player_name="Zed"),
        make_attempt(player_name="amy"),
    ]

    ordered = sort_attempts_for_display(attempts)

    assert [(a.player_number, a.player_name) for a in ordered] == [
        (1, "One"),
        (2, "Two"),
        (None, "amy"),
        (None, "Zed"),
    ]


def test_compare_attempts_is_a_comparator(make_attempt) -> None:
    numbered = make_attempt(player_name="Zed", player_number=10)
    named = make_attempt(player_name="Amy")

    assert compare_attempts(numbered, named) < 0
    assert compare_attempts(named, numbered) > 0
    assert compare_attempts(named, make_attempt(player_name="AMY")) == 0
    assert sorted([named, numbered], key=cmp_to_key(compare_attempts)) == [numbered, named]


def test_sort_for_display_does_not_reorder_results(quiz, answer_key, make_attempt) -> None:
    results = aggregate(
        quiz,
        answer_key,
        [make_attempt(player_name="b"), make_attempt(player_name="a")],
    )

    sort_attempts_for_display(results.attempts)

    assert [a.player_name for a in results.attempts] == ["b", "a"]


def test_performance_band_thresholds() -> None:
    assert performance_band(100) is PerformanceBand.GOOD
    assert performance_band(80) is PerformanceBand.GOOD
    assert performance_band(79) is PerformanceBand.FAIR
    assert performance_band(60) is PerformanceBand.FAIR
    assert performance_band(59) is PerformanceBand.POOR


def test_review_attempt_lists_each_question(quiz, answer_key, make_attempt) -> None:
    results = aggregate(
        quiz,
        answer_key,
        [make_attempt({"question-2": "question-2-b", "question-1": "question-1-a"})],
    )

    reviews = review_attempt(results, results.attempts[0])

    assert [r.question.id for r in reviews] == ["question-1", "question-2", "question-3"]
    assert [r.is_correct for r in reviews] == [True, False, False]
    assert [r.answered for r in reviews] == [True, True, False]
    assert reviews[1].selected_answer is not None
    assert reviews[1].selected_answer.text == "Beta"
    assert reviews[1].correct_answer is not None
    assert reviews[1].correct_answer.text == "Alpha"
    assert reviews[2].selected_answer is None
