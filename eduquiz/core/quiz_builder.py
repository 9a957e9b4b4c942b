"""Turns authored draft questions into a quiz and its separate answer key."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
import re
import string

from eduquiz.constants.quiz_constants import (
    DEFAULT_QUIZ_DESCRIPTION,
    DEFAULT_TIME_LIMIT_MINUTES,
    DOCUMENT_VERSION,
    MAX_ANSWER_OPTIONS,
    MAX_TIME_LIMIT_MINUTES,
    MIN_ANSWER_OPTIONS,
    MIN_TIME_LIMIT_MINUTES,
)
from eduquiz.core.models import Quiz, QuizAnswer, QuizAnswerKey, QuizQuestion
from eduquiz.utils.identifiers import generate_id, utc_timestamp

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")
_SLUG_INVALID = re.compile(r"[^a-z0-9]")


class QuizBuildError(ValueError):
    """Raised when authored content cannot be saved as a quiz."""


@dataclass(slots=True)
class DraftQuestion:
    """Editable question as entered by the author, correctness included."""

    text: str
    options: list[str] = field(default_factory=list)
    correct_index: int = 0
    image_base64: str = ""
    id: str | None = None


def sanitize_file_stem(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9]`` with ``_``."""
    return _NON_ALPHANUMERIC.sub("_", name)


def normalize_time_limit(value: str | int | None) -> int:
    """Clamp free-form minute input into the allowed range, defaulting when unusable."""
    if value is None:
        return DEFAULT_TIME_LIMIT_MINUTES
    if isinstance(value, str):
        stripped = value.strip()
        match = re.match(r"[+-]?\d+", stripped)
        if not match:
            return DEFAULT_TIME_LIMIT_MINUTES
        value = int(match.group())
    return max(MIN_TIME_LIMIT_MINUTES, min(MAX_TIME_LIMIT_MINUTES, int(value)))


def build_quiz(
    title: str,
    questions: Sequence[DraftQuestion],
    *,
    description: str = "",
    time_limit_minutes: int = DEFAULT_TIME_LIMIT_MINUTES,
    randomize: bool = False,
    quiz_id: str | None = None,
    created_at: datetime | None = None,
) -> tuple[Quiz, QuizAnswerKey]:
    """Validate the drafts and split them into a quiz and its answer key.

    Passing ``quiz_id`` keeps the identity of a quiz that is being edited so
    existing attempts still match it.
    """
    cleaned_title = title.strip()
    if not cleaned_title:
        raise QuizBuildError("Please enter a quiz title.")
    if not isinstance(time_limit_minutes, int) or not (
        MIN_TIME_LIMIT_MINUTES <= time_limit_minutes <= MAX_TIME_LIMIT_MINUTES
    ):
        raise QuizBuildError(
            f"Please enter a valid time limit between {MIN_TIME_LIMIT_MINUTES} "
            f"and {MAX_TIME_LIMIT_MINUTES} minutes."
        )
    if not questions:
        raise QuizBuildError("You must have at least one question.")

    quiz_id = quiz_id or generate_id("quiz-")
    quiz_questions: list[QuizQuestion] = []
    correct_answers: dict[str, str] = {}

    for index, draft in enumerate(questions):
        question, correct_answer_id = _build_question(index, draft)
        if question.id in correct_answers:
            raise QuizBuildError(f"Question {index + 1} reuses the id '{question.id}'.")
        quiz_questions.append(question)
        correct_answers[question.id] = correct_answer_id

    quiz = Quiz(
        id=quiz_id,
        name=cleaned_title,
        description=description.strip() or DEFAULT_QUIZ_DESCRIPTION,
        questions=tuple(quiz_questions),
        total_time_seconds=time_limit_minutes * 60,
        random=randomize,
    )
    answer_key = QuizAnswerKey(
        quiz_id=quiz_id,
        correct_answers=correct_answers,
        version=DOCUMENT_VERSION,
        created_at=utc_timestamp(created_at),
    )
    return quiz, answer_key


def draft_from_quiz(quiz: Quiz, answer_key: QuizAnswerKey | None = None) -> list[DraftQuestion]:
    """Rebuild editable drafts from a saved quiz; unknown answers fall back to the first option."""
    drafts: list[DraftQuestion] = []
    for question in quiz.questions:
        correct_index = 0
        if answer_key is not None:
            correct_id = answer_key.correct_answer_for(question.id)
            correct_index = next(
                (i for i, answer in enumerate(question.possible_answers) if answer.id == correct_id),
                0,
            )
        drafts.append(
            DraftQuestion(
                text=question.question,
                options=[answer.text for answer in question.possible_answers],
                correct_index=correct_index,
                image_base64=question.image_base64,
                id=question.id,
            )
        )
    return drafts


def _build_question(index: int, draft: DraftQuestion) -> tuple[QuizQuestion, str]:
    number = index + 1
    text = draft.text.strip()
    if not text:
        raise QuizBuildError(f"Question {number} is missing text.")

    # Blank options are dropped; the correct index refers to the option list as typed.
    filled = [(position, option.strip()) for position, option in enumerate(draft.options) if option.strip()]
    if len(filled) < MIN_ANSWER_OPTIONS:
        raise QuizBuildError(f"Question {number} needs at least {MIN_ANSWER_OPTIONS} answer options.")
    if len(filled) > MAX_ANSWER_OPTIONS:
        raise QuizBuildError(f"Question {number} can have at most {MAX_ANSWER_OPTIONS} answer options.")

    filled_positions = [position for position, _ in filled]
    if draft.correct_index not in filled_positions:
        raise QuizBuildError(f"Question {number} has an invalid correct answer selection.")

    question_id = _question_id(number, draft)
    answers = tuple(
        QuizAnswer(id=f"{question_id}-{string.ascii_lowercase[i]}", text=option)
        for i, (_, option) in enumerate(filled)
    )
    correct_answer = answers[filled_positions.index(draft.correct_index)]
    question = QuizQuestion(
        id=question_id,
        question=text,
        possible_answers=answers,
        image_base64=draft.image_base64 or "",
    )
    return question, correct_answer.id


def _question_id(number: int, draft: DraftQuestion) -> str:
    if draft.id:
        return draft.id
    slug = _SLUG_INVALID.sub("-", draft.text.strip().lower())[:20]
    return f"q{number}-{slug}"
