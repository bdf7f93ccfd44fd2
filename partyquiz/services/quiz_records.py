"""
퀴즈 레코드 수명주기: 생성 요청 접수, 조회, 재생성(파라미터 교체 가능), 수동 편집.
생성 자체는 generation_job.run_generation이 백그라운드에서 수행한다.
"""

import logging
from typing import Any

from pydantic import ValidationError

from partyquiz.db.connection import get_session
from partyquiz.db.models import Quiz, QuizStatus
from partyquiz.db.repositories.quiz import quiz_repo
from partyquiz.schema.request import GenerationRequest
from partyquiz.services.schema_validator import validate_quiz

logger = logging.getLogger(__name__)

REGENERATE_FIELDS = (
    "theme",
    "participants",
    "countries",
    "rounds",
    "questions_per_round",
    "brainrot_level",
    "allowed_types",
)


class QuizNotFoundError(LookupError):
    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"Quiz not found: {quiz_id}")
        self.quiz_id = quiz_id


class QuizStateError(RuntimeError):
    """현재 상태에서 허용되지 않는 전이."""


class QuizDataInvalidError(ValueError):
    def __init__(self, violations: list[str]) -> None:
        super().__init__("Invalid quiz data")
        self.violations = violations


def merge_generation_params(stored: dict[str, Any], overrides: dict[str, Any] | None) -> dict[str, Any]:
    """저장된 파라미터 위에 새 값(None 아닌 것만)을 덮어쓴다."""
    merged = dict(stored)
    for key in REGENERATE_FIELDS:
        if overrides and overrides.get(key) is not None:
            merged[key] = overrides[key]
    return merged


class QuizRecordService:
    def create(self, req: GenerationRequest) -> Quiz:
        with get_session() as session:
            quiz = quiz_repo.create(
                session,
                theme=req.theme,
                generation_params=req.model_dump(mode="json"),
            )
        logger.info("퀴즈 레코드 생성 quiz_id=%s theme=%r", quiz.id, req.theme)
        return quiz

    def get(self, quiz_id: int) -> Quiz:
        with get_session() as session:
            quiz = quiz_repo.get_by_id(session, quiz_id)
        if not quiz:
            raise QuizNotFoundError(quiz_id)
        return quiz

    def regenerate(self, quiz_id: int, overrides: dict[str, Any] | None = None) -> Quiz:
        """
        generating으로 리셋하고 사용할 파라미터를 확정한다. 새 파라미터는 검증 후 저장.
        이미 생성 중인 레코드는 거부(레코드당 동시 생성 1건).
        ValidationError는 호출자에게 그대로 전달된다.
        """
        with get_session() as session:
            quiz = quiz_repo.get_by_id(session, quiz_id)
            if not quiz:
                raise QuizNotFoundError(quiz_id)
            if quiz.status == QuizStatus.GENERATING.value:
                raise QuizStateError("Quiz is already generating")

            new_params = None
            if overrides:
                merged = merge_generation_params(quiz.generation_params, overrides)
                new_params = GenerationRequest.model_validate(merged).model_dump(mode="json")
            quiz = quiz_repo.reset_for_generation(session, quiz, new_params)
        logger.info("퀴즈 재생성 요청 quiz_id=%s new_params=%s", quiz_id, new_params is not None)
        return quiz

    def update_quiz_data(self, quiz_id: int, quiz_data: Any) -> Quiz:
        """ready 상태 퀴즈만 수정 가능. 스키마 + 저장된 allowed_types로 검증."""
        with get_session() as session:
            quiz = quiz_repo.get_by_id(session, quiz_id)
            if not quiz:
                raise QuizNotFoundError(quiz_id)
            if quiz.status != QuizStatus.READY.value:
                raise QuizStateError("Can only edit ready quizzes")
            violations = validate_quiz(quiz_data, quiz.generation_params.get("allowed_types"))
            if violations:
                raise QuizDataInvalidError(violations)
            return quiz_repo.update_quiz_data(session, quiz, quiz_data)


quiz_record_service = QuizRecordService()
