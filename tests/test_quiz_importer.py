from __future__ import annotations

from pathlib import Path

import pytest

from eduquiz.core.quiz_importer import QuizImportError, load_quiz_text, parse_quiz_text

SAMPLE = """\
Chapter 3 review

1. What is 2 + 2?
A. 3
*B. 4
C. 5

2. Which planet is
known as the red planet?
a. Venus
b. Mars+
c. Jupiter
"""


def test_parse_numbered_questions() -> None:
    questions = parse_quiz_text(SAMPLE)

    assert len(questions) == 2
    assert questions[0].text == "What is 2 + 2?"
    assert questions[0].options == ["3", "4", "5"]
    assert questions[0].correct_index == 1


def test_continuation_lines_and_trailing_marker() -> None:
    second = parse_quiz_text(SAMPLE)[1]

    assert second.text == "Which planet is known as the red planet?"
    assert second.options == ["Venus", "Mars", "Jupiter"]
    assert second.correct_index == 1


def test_unmarked_question_defaults_to_first_option() -> None:
    questions = parse_quiz_text("1. Pick one\nA. yes\nB. no\n")

    assert questions[0].correct_index == 0


def test_questions_with_too_few_options_are_skipped() -> None:
    questions = parse_quiz_text("1. Lonely\nA. only\n2. Fine\nA. one\n+B. two\n")

    assert [q.text for q in questions] == ["Fine"]
    assert questions[0].correct_index == 1


def test_file_without_questions_is_rejected() -> None:
    with pytest.raises(QuizImportError, match="No valid questions found"):
        parse_quiz_text("just some notes\nA. not attached to a question\n")


def test_load_quiz_text_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "review.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    imported = load_quiz_text(path)

    assert imported.source_path == path
    assert len(imported.questions) == 2


def test_load_quiz_text_requires_text_file(tmp_path: Path) -> None:
    path = tmp_path / "review.docx"
    path.write_text(SAMPLE, encoding="utf-8")

    with pytest.raises(QuizImportError, match="txt"):
        load_quiz_text(path)
