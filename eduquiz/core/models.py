"""Domain models for quizzes, answer keys, attempts and results."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from eduquiz.constants.quiz_constants import DOCUMENT_VERSION


@dataclass(slots=True, frozen=True)
class QuizAnswer:
    """Selectable answer option. Correctness lives only in the answer key."""

    id: str
    text: str


@dataclass(slots=True, frozen=True)
class QuizQuestion:
    """Question prompt with its ordered answer options."""

    id: str
    question: str
    possible_answers: tuple[QuizAnswer, ...]
    image_base64: str = ""  # empty string means no image

    def find_answer(self, answer_id: str | None) -> QuizAnswer | None:
        return next((a for a in self.possible_answers if a.id == answer_id), None)


@dataclass(slots=True, frozen=True)
class Quiz:
    """Quiz definition distributed to takers."""

    id: str
    name: str
    description: str
    questions: tuple[QuizQuestion, ...]
    total_time_seconds: int = 0  # 0 = untimed
    random: bool = False

    def find_question(self, question_id: str) -> QuizQuestion | None:
        return next((q for q in self.questions if q.id == question_id), None)


@dataclass(slots=True, frozen=True)
class QuizAnswerKey:
    """Author-only mapping of question id to correct answer id."""

    quiz_id: str
    correct_answers: Mapping[str, str]
    version: str = DOCUMENT_VERSION
    created_at: str = ""

    def correct_answer_for(self, question_id: str) -> str | None:
        return self.correct_answers.get(question_id)


@dataclass(slots=True, frozen=True)
class PlayerAnswer:
    """Answer selected by a taker for one question."""

    question_id: str
    selected_answer_id: str
    time_spent: float | None = None


@dataclass(slots=True, frozen=True)
class QuizAttempt:
    """One taker's recorded answers. Contains no correctness information."""

    id: str
    quiz_id: str
    player_name: str
    answers: tuple[PlayerAnswer, ...]
    total_time_seconds: int = 0
    completed_at: str = ""
    version: str = DOCUMENT_VERSION
    player_number: int | None = None

    def answer_for(self, question_id: str) -> PlayerAnswer | None:
        return next((a for a in self.answers if a.question_id == question_id), None)


@dataclass(slots=True, frozen=True)
class ProcessedAttempt(QuizAttempt):
    """Attempt enriched with its score once combined with an answer key."""

    score: int = 0
    percentage: int = 0

    @classmethod
    def from_attempt(cls, attempt: QuizAttempt, score: int, percentage: int) -> "ProcessedAttempt":
        return cls(
            id=attempt.id,
            quiz_id=attempt.quiz_id,
            player_name=attempt.player_name,
            answers=attempt.answers,
            total_time_seconds=attempt.total_time_seconds,
            completed_at=attempt.completed_at,
            version=attempt.version,
            player_number=attempt.player_number,
            score=score,
            percentage=percentage,
        )


@dataclass(slots=True, frozen=True)
class QuizResults:
    """A quiz, its answer key and every scored attempt."""

    quiz: Quiz
    answer_key: QuizAnswerKey
    attempts: tuple[ProcessedAttempt, ...] = field(default_factory=tuple)
    created_at: str = ""
    version: str = DOCUMENT_VERSION

    def find_attempt(self, attempt_id: str) -> ProcessedAttempt | None:
        return next((a for a in self.attempts if a.id == attempt_id), None)
