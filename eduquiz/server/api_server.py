"""FastAPI server exposing the EduQuiz workflows to the desktop shell."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field
import uvicorn

from eduquiz.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from eduquiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from eduquiz.constants.quiz_constants import (
    DEFAULT_TIME_LIMIT_MINUTES,
    MAX_PLAYER_NUMBER,
    MIN_PLAYER_NUMBER,
)
from eduquiz.core.aggregator import aggregate
from eduquiz.core.documents import (
    MalformedDocument,
    answer_key_from_dict,
    answer_key_to_dict,
    attempt_from_dict,
    attempt_to_dict,
    parse_json,
    quiz_from_dict,
    quiz_to_dict,
    results_from_dict,
    results_to_dict,
)
from eduquiz.core.models import QuizResults
from eduquiz.core.quiz_builder import DraftQuestion, QuizBuildError, build_quiz
from eduquiz.core.quiz_importer import QuizImportError, parse_quiz_text
from eduquiz.core.results_exporter import results_to_csv
from eduquiz.core.services.file_store import QuizFileStore
from eduquiz.core.services.quiz_session import build_attempt
from eduquiz.core.statistics import (
    average_score,
    performance_band,
    question_statistics,
    review_attempt,
    sort_attempts_for_display,
)
from eduquiz.core.validator import ValidationError

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[Exception], int] = {
    ValidationError: 409,
    MalformedDocument: 422,
    QuizImportError: 422,
    QuizBuildError: 422,
    FileNotFoundError: 404,
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PathPayload(_CamelModel):
    """Payload naming a file or folder to load."""

    path: str


class SaveAttemptPayload(_CamelModel):
    """Answers submitted by a taker when a quiz is completed."""

    quiz_id: str = Field(alias="quizId")
    answers: dict[str, str]
    time_taken_seconds: int = Field(alias="timeTakenSeconds", ge=0)
    player_name: str = Field(alias="playerName", min_length=1)
    player_number: int | None = Field(
        default=None,
        alias="playerNumber",
        ge=MIN_PLAYER_NUMBER,
        le=MAX_PLAYER_NUMBER,
    )


class ProcessResultsPayload(_CamelModel):
    """Documents the reviewer has loaded and wants scored."""

    quiz: dict[str, Any]
    answer_key: dict[str, Any] = Field(alias="answerKey")
    attempts: list[dict[str, Any]]


class ResultsPayload(_CamelModel):
    results: dict[str, Any]
    path: str | None = None


class ReviewPayload(_CamelModel):
    results: dict[str, Any]
    attempt_id: str = Field(alias="attemptId")


class SaveQuizPayload(_CamelModel):
    """Quiz and answer key, as objects or JSON strings, plus the target folder."""

    quiz: dict[str, Any] | str
    answer_key: dict[str, Any] | str = Field(alias="answerKey")
    directory: str


class DraftQuestionPayload(_CamelModel):
    text: str
    options: list[str]
    correct_index: int = Field(default=0, alias="correctIndex")
    image_base64: str = Field(default="", alias="imageBase64")
    id: str | None = None


class BuildQuizPayload(_CamelModel):
    title: str
    description: str = ""
    time_limit_minutes: int = Field(default=DEFAULT_TIME_LIMIT_MINUTES, alias="timeLimitMinutes")
    randomize: bool = False
    quiz_id: str | None = Field(default=None, alias="quizId")
    questions: list[DraftQuestionPayload]


class ImportTextPayload(_CamelModel):
    text: str


def _get_file_store_dependency(file_store: QuizFileStore):
    def dependency() -> QuizFileStore:
        return file_store

    return dependency


def _install_error_handlers(app: FastAPI) -> None:
    for error_type, status_code in _ERROR_STATUS.items():

        async def handler(request: Request, exc: Exception, status_code: int = status_code) -> JSONResponse:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        app.add_exception_handler(error_type, handler)


def _load_document(value: dict[str, Any] | str) -> Any:
    return parse_json(value) if isinstance(value, str) else value


def _summarize_results(results: QuizResults) -> dict[str, Any]:
    return {
        "results": results_to_dict(results),
        "averageScore": average_score(results),
        "questionStatistics": [
            {
                "questionId": row.question.id,
                "question": row.question.question,
                "correctAnswerId": row.correct_answer.id if row.correct_answer else None,
                "correctAnswerText": row.correct_answer.text if row.correct_answer else None,
                "correctCount": row.correct_count,
                "attemptCount": row.attempt_count,
                "correctRate": row.correct_rate,
                "band": performance_band(row.correct_rate).value,
            }
            for row in question_statistics(results)
        ],
        "displayOrder": [attempt.id for attempt in sort_attempts_for_display(results.attempts)],
    }


def create_api_app(file_store: QuizFileStore | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided file store."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    store_dep = _get_file_store_dependency(file_store or QuizFileStore())
    _install_error_handlers(app)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"name": APP_NAME, "version": APP_VERSION, "license": APP_LICENSE}

    # --- Loading ---

    @app.post("/quiz/load")
    def load_quiz(payload: PathPayload, store: QuizFileStore = Depends(store_dep)) -> dict[str, Any]:
        return quiz_to_dict(store.load_quiz(payload.path))

    @app.post("/answer-key/load")
    def load_answer_key(payload: PathPayload, store: QuizFileStore = Depends(store_dep)) -> dict[str, Any]:
        return answer_key_to_dict(store.load_answer_key(payload.path))

    @app.post("/attempts/load-file")
    def load_attempt_file(payload: PathPayload, store: QuizFileStore = Depends(store_dep)) -> dict[str, Any]:
        return attempt_to_dict(store.load_attempt(payload.path))

    @app.post("/attempts/load-folder")
    def load_attempt_folder(
        payload: PathPayload,
        store: QuizFileStore = Depends(store_dep),
    ) -> list[dict[str, Any]]:
        return [attempt_to_dict(attempt) for attempt in store.load_attempts_from_folder(payload.path)]

    # --- Taking ---

    @app.post("/attempts", status_code=201)
    def save_attempt(payload: SaveAttemptPayload, store: QuizFileStore = Depends(store_dep)) -> dict[str, Any]:
        player_name = payload.player_name.strip()
        if not player_name:
            raise HTTPException(status_code=422, detail="Please enter your name.")
        attempt = build_attempt(
            payload.quiz_id,
            payload.answers,
            time_taken_seconds=payload.time_taken_seconds,
            player_name=player_name,
            player_number=payload.player_number,
        )
        path = store.save_attempt(attempt)
        return {"success": True, "path": str(path), "attempt": attempt_to_dict(attempt)}

    # --- Reviewing ---

    @app.post("/results/process")
    def process_results(payload: ProcessResultsPayload) -> dict[str, Any]:
        results = aggregate(
            quiz_from_dict(payload.quiz),
            answer_key_from_dict(payload.answer_key),
            [attempt_from_dict(item) for item in payload.attempts],
        )
        return _summarize_results(results)

    @app.post("/results/review")
    def review_results(payload: ReviewPayload) -> list[dict[str, Any]]:
        results = results_from_dict(payload.results)
        attempt = results.find_attempt(payload.attempt_id)
        if attempt is None:
            raise HTTPException(status_code=404, detail=f"No attempt with id '{payload.attempt_id}' in these results.")
        return [
            {
                "questionId": review.question.id,
                "question": review.question.question,
                "selectedAnswerId": review.selected_answer.id if review.selected_answer else None,
                "selectedAnswerText": review.selected_answer.text if review.selected_answer else None,
                "correctAnswerId": review.correct_answer.id if review.correct_answer else None,
                "correctAnswerText": review.correct_answer.text if review.correct_answer else None,
                "isCorrect": review.is_correct,
                "answered": review.answered,
            }
            for review in review_attempt(results, attempt)
        ]

    @app.post("/results/csv", response_class=PlainTextResponse)
    def results_csv(payload: ResultsPayload) -> PlainTextResponse:
        csv_text = results_to_csv(results_from_dict(payload.results))
        return PlainTextResponse(csv_text, media_type="text/csv")

    @app.post("/results/export")
    def export_results(payload: ResultsPayload, store: QuizFileStore = Depends(store_dep)) -> dict[str, Any]:
        path = store.save_results_csv(results_from_dict(payload.results), payload.path)
        return {"success": True, "path": str(path)}

    # --- Authoring ---

    @app.post("/quiz/build")
    def build(payload: BuildQuizPayload) -> dict[str, Any]:
        quiz, answer_key = build_quiz(
            payload.title,
            [
                DraftQuestion(
                    text=question.text,
                    options=list(question.options),
                    correct_index=question.correct_index,
                    image_base64=question.image_base64,
                    id=question.id,
                )
                for question in payload.questions
            ],
            description=payload.description,
            time_limit_minutes=payload.time_limit_minutes,
            randomize=payload.randomize,
            quiz_id=payload.quiz_id,
        )
        return {"quiz": quiz_to_dict(quiz), "answerKey": answer_key_to_dict(answer_key)}

    @app.post("/quiz/save")
    def save_quiz(payload: SaveQuizPayload, store: QuizFileStore = Depends(store_dep)) -> dict[str, Any]:
        quiz = quiz_from_dict(_load_document(payload.quiz))
        answer_key = answer_key_from_dict(_load_document(payload.answer_key))
        quiz_path, key_path = store.save_quiz_files(payload.directory, quiz, answer_key)
        return {"success": True, "quizPath": str(quiz_path), "answerKeyPath": str(key_path)}

    @app.post("/quiz/import-text")
    def import_text(payload: ImportTextPayload) -> dict[str, Any]:
        drafts = parse_quiz_text(payload.text)
        return {
            "questions": [
                {"text": draft.text, "options": draft.options, "correctIndex": draft.correct_index}
                for draft in drafts
            ]
        }

    return app


def run_api_server(
    file_store: QuizFileStore | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Run the FastAPI server in the foreground until interrupted."""
    uvicorn.run(create_api_app(file_store), host=host, port=port, log_level="info")
