"""Utilities for importing quiz questions from a plain-text file.

File format (one question per numbered block):

    31. Question text. Further lines that are not options are appended
        to the question text.
    A. First option
    *B. Correct option, marked with a leading * or +
    C. A trailing * or + also marks the correct option*
    D. Up to six options, A-F

Example:

    1. What is 2 + 2?
    A. 3
    *B. 4
    C. 5

Questions with fewer than two filled options are skipped. A question without a
marked option defaults to the first one being correct, so authors should
review imported quizzes before saving them.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re

from eduquiz.constants.quiz_constants import MAX_ANSWER_OPTIONS, MIN_ANSWER_OPTIONS
from eduquiz.core.quiz_builder import DraftQuestion

_QUESTION_LINE = re.compile(r"^(\d+)\.\s*(.+)$")
_OPTION_LINE = re.compile(r"^([*+]?)([A-Fa-f])\.\s*(.+)$")
_CORRECT_MARKS = ("*", "+")


class QuizImportError(Exception):
    """Raised when a text file does not contain any importable question."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for the source file and the questions parsed from it."""

    source_path: Path
    questions: list[DraftQuestion]


def load_quiz_text(file_path: Path) -> ImportedQuiz:
    if file_path.suffix.lower() not in (".txt", ".text"):
        raise QuizImportError("Please select a .txt file.")
    text = file_path.read_text(encoding="utf-8")
    return ImportedQuiz(source_path=file_path, questions=parse_quiz_text(text))


def parse_quiz_text(text: str) -> list[DraftQuestion]:
    questions: list[DraftQuestion] = []
    current: DraftQuestion | None = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        question_match = _QUESTION_LINE.match(line)
        if question_match:
            if current is not None and _is_complete(current):
                questions.append(current)
            current = DraftQuestion(text=question_match.group(2).strip())
            continue

        if current is None:
            continue

        option_match = _OPTION_LINE.match(line)
        if option_match:
            mark, letter, rest = option_match.groups()
            index = ord(letter.upper()) - ord("A")
            while len(current.options) <= index:
                current.options.append("")
            option_text = rest.strip()
            is_correct = mark in _CORRECT_MARKS
            if option_text.endswith(_CORRECT_MARKS):
                option_text = option_text[:-1].strip()
                is_correct = True
            current.options[index] = option_text
            if is_correct:
                current.correct_index = index
            continue

        current.text = f"{current.text} {line}"

    if current is not None and _is_complete(current):
        questions.append(current)

    if not questions:
        raise QuizImportError("No valid questions found in the file. Check format and try again.")
    return questions


def _is_complete(question: DraftQuestion) -> bool:
    filled = sum(1 for option in question.options if option.strip())
    return (
        bool(question.text)
        and MIN_ANSWER_OPTIONS <= filled <= MAX_ANSWER_OPTIONS
        and question.correct_index < len(question.options)
    )
