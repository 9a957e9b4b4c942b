"""Service for running one taker through a quiz and recording the attempt."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
import random
import time

from eduquiz.constants.quiz_constants import DOCUMENT_VERSION, MAX_PLAYER_NUMBER, MIN_PLAYER_NUMBER
from eduquiz.core.models import PlayerAnswer, Quiz, QuizAttempt, QuizQuestion
from eduquiz.utils.identifiers import generate_id, utc_timestamp


class QuizSessionError(RuntimeError):
    """Raised when a taker action is not allowed in the current session state."""


class QuizSession:
    """Tracks question position, selected answers and elapsed time for one taker."""

    def __init__(
        self,
        quiz: Quiz,
        player_name: str,
        player_number: int | None = None,
        *,
        seed: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        cleaned_name = player_name.strip()
        if not cleaned_name:
            raise QuizSessionError("Please enter your name.")
        if player_number is not None and (
            isinstance(player_number, bool)
            or not isinstance(player_number, int)
            or not MIN_PLAYER_NUMBER <= player_number <= MAX_PLAYER_NUMBER
        ):
            raise QuizSessionError(
                f"Player number must be a positive integer ({MIN_PLAYER_NUMBER}-{MAX_PLAYER_NUMBER}) or left empty."
            )
        if not quiz.questions:
            raise QuizSessionError("Quiz does not contain any questions.")

        self._quiz = quiz
        self._player_name = cleaned_name
        self._player_number = player_number
        self._clock = clock

        self._questions: list[QuizQuestion] = list(quiz.questions)
        if quiz.random:
            random.Random(seed).shuffle(self._questions)

        # Insertion order is the order in which questions were first answered.
        self._selected: dict[str, str] = {}
        self._position: int = 0
        self._started_at: float = clock()
        self._attempt: QuizAttempt | None = None

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def player_name(self) -> str:
        return self._player_name

    @property
    def player_number(self) -> int | None:
        return self._player_number

    @property
    def questions(self) -> tuple[QuizQuestion, ...]:
        """Questions in presentation order (shuffled when the quiz is random)."""
        return tuple(self._questions)

    @property
    def position(self) -> int:
        return self._position

    @property
    def current_question(self) -> QuizQuestion:
        return self._questions[self._position]

    def is_last_question(self) -> bool:
        return self._position == len(self._questions) - 1

    def is_completed(self) -> bool:
        return self._attempt is not None

    def select_answer(self, question_id: str, answer_id: str) -> None:
        self._ensure_running()
        question = self._quiz.find_question(question_id)
        if question is None:
            raise QuizSessionError(f"Unknown question '{question_id}'.")
        if question.find_answer(answer_id) is None:
            raise QuizSessionError(f"Unknown answer '{answer_id}' for question '{question_id}'.")
        self._selected[question_id] = answer_id

    def selected_answer(self, question_id: str) -> str | None:
        return self._selected.get(question_id)

    def answered_count(self) -> int:
        return len(self._selected)

    def next_question(self) -> bool:
        """Advance to the next question. Returns False when already on the last one."""
        if self.is_last_question():
            return False
        self._position += 1
        return True

    def previous_question(self) -> bool:
        if self._position == 0:
            return False
        self._position -= 1
        return True

    def elapsed_seconds(self) -> float:
        return max(0.0, self._clock() - self._started_at)

    def time_remaining(self) -> int | None:
        """Whole seconds left, or None for an untimed quiz."""
        if self._quiz.total_time_seconds <= 0:
            return None
        return max(0, self._quiz.total_time_seconds - int(self.elapsed_seconds()))

    def is_expired(self) -> bool:
        remaining = self.time_remaining()
        return remaining is not None and remaining == 0

    def complete(self, completed_at: datetime | None = None) -> QuizAttempt:
        """Finish the session and return the recorded attempt."""
        if self._attempt is not None:
            raise QuizSessionError("This quiz attempt has already been submitted.")
        self._attempt = build_attempt(
            self._quiz.id,
            self._selected,
            time_taken_seconds=round(self.elapsed_seconds()),
            player_name=self._player_name,
            player_number=self._player_number,
            completed_at=completed_at,
        )
        return self._attempt

    def _ensure_running(self) -> None:
        if self._attempt is not None:
            raise QuizSessionError("This quiz attempt has already been submitted.")
        if self.is_expired():
            raise QuizSessionError("Time is up for this quiz.")


def build_attempt(
    quiz_id: str,
    answers: Mapping[str, str],
    *,
    time_taken_seconds: int,
    player_name: str,
    player_number: int | None = None,
    completed_at: datetime | None = None,
) -> QuizAttempt:
    """Create a freshly identified attempt from a question id -> answer id mapping."""
    return QuizAttempt(
        id=generate_id("attempt_"),
        quiz_id=quiz_id,
        player_name=player_name,
        answers=tuple(
            PlayerAnswer(question_id=question_id, selected_answer_id=answer_id)
            for question_id, answer_id in answers.items()
        ),
        total_time_seconds=time_taken_seconds,
        completed_at=utc_timestamp(completed_at),
        version=DOCUMENT_VERSION,
        player_number=player_number,
    )
