"""
FastAPI 앱: 퀴즈 생성 요청(백그라운드 생성), 상태 조회, 재생성, 수동 편집.
"""

import logging

from fastapi import BackgroundTasks, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from partyquiz.api.schemas import (
    QuizCreateResponse,
    QuizRegenerateRequest,
    QuizShowResponse,
    QuizUpdateRequest,
)
from partyquiz.db.models import Quiz, QuizStatus
from partyquiz.schema.request import GenerationRequest
from partyquiz.services.generation_job import run_generation
from partyquiz.services.quiz_records import (
    QuizDataInvalidError,
    QuizNotFoundError,
    QuizStateError,
    quiz_record_service,
)

logger = logging.getLogger(__name__)


def _show(quiz: Quiz) -> QuizShowResponse:
    response = QuizShowResponse(
        id=quiz.id,
        status=quiz.status,
        theme=quiz.theme,
        generation_params=quiz.generation_params,
    )
    if quiz.status == QuizStatus.READY.value:
        response.quiz = quiz.quiz_data
    elif quiz.status == QuizStatus.FAILED.value:
        response.error_message = quiz.error_message
    return response


def create_app():
    from fastapi import FastAPI
    app = FastAPI(
        title="Party Quiz API",
        description="테마·참가자 정보로 파티 퀴즈 생성 (LLM + YouTube/Wikimedia 미디어 보강)",
        version="0.1.0",
    )

    @app.post(
        "/api/quizzes",
        response_model=QuizCreateResponse,
        status_code=201,
        summary="퀴즈 생성 요청",
        description="레코드를 generating 상태로 만들고 백그라운드에서 생성한다. 상태는 GET으로 폴링.",
    )
    def quiz_create(body: GenerationRequest, background_tasks: BackgroundTasks) -> QuizCreateResponse:
        quiz = quiz_record_service.create(body)
        background_tasks.add_task(run_generation, quiz.id, quiz.generation_params)
        return QuizCreateResponse(quiz_id=quiz.id, status=quiz.status)

    @app.get(
        "/api/quizzes/{quiz_id:int}",
        response_model=QuizShowResponse,
        response_model_exclude_none=True,
        summary="퀴즈 상태/내용 조회",
    )
    def quiz_show(quiz_id: int) -> QuizShowResponse:
        try:
            quiz = quiz_record_service.get(quiz_id)
        except QuizNotFoundError:
            raise HTTPException(status_code=404, detail="Quiz not found")
        return _show(quiz)

    @app.post(
        "/api/quizzes/{quiz_id:int}/regenerate",
        response_model=QuizCreateResponse,
        summary="퀴즈 재생성",
        description="저장된 파라미터(또는 일부 교체한 파라미터)로 다시 생성.",
    )
    def quiz_regenerate(
        quiz_id: int,
        background_tasks: BackgroundTasks,
        body: QuizRegenerateRequest | None = None,
    ) -> QuizCreateResponse:
        overrides = None
        if body and body.generation_params:
            overrides = body.generation_params.model_dump(mode="json", exclude_none=True)
        try:
            quiz = quiz_record_service.regenerate(quiz_id, overrides)
        except QuizNotFoundError:
            raise HTTPException(status_code=404, detail="Quiz not found")
        except QuizStateError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])
        background_tasks.add_task(run_generation, quiz.id, quiz.generation_params)
        return QuizCreateResponse(quiz_id=quiz.id, status=quiz.status)

    @app.put(
        "/api/quizzes/{quiz_id:int}",
        response_model=QuizShowResponse,
        response_model_exclude_none=True,
        summary="퀴즈 수동 편집",
        description="ready 상태 퀴즈의 JSON을 교체. 스키마 검증 실패 시 validation_errors 반환.",
    )
    def quiz_update(quiz_id: int, body: QuizUpdateRequest):
        try:
            quiz = quiz_record_service.update_quiz_data(quiz_id, body.quiz_data)
        except QuizNotFoundError:
            raise HTTPException(status_code=404, detail="Quiz not found")
        except QuizStateError as e:
            return JSONResponse(status_code=422, content={"error": str(e)})
        except QuizDataInvalidError as e:
            logger.info("퀴즈 편집 검증 실패 quiz_id=%s 위반 %d건", quiz_id, len(e.violations))
            return JSONResponse(
                status_code=422,
                content={"error": "Invalid quiz data", "validation_errors": e.violations},
            )
        return _show(quiz)

    return app


app = create_app()
