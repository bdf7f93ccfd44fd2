"""
백그라운드 생성 작업: 저장된 파라미터로 퀴즈를 생성해 레코드를 ready / failed로 전이.
"""

import logging
from typing import Any

from partyquiz.db.connection import get_session
from partyquiz.db.repositories.quiz import quiz_repo
from partyquiz.quiz.generator import GenerationError, QuizGenerator, build_quiz_generator
from partyquiz.schema.request import GenerationRequest

logger = logging.getLogger(__name__)


def run_generation(
    quiz_id: int,
    generation_params: dict[str, Any],
    generator: QuizGenerator | None = None,
) -> None:
    """
    단일 생성 작업. GenerationError는 실패 메시지로 기록하고 종료,
    예상하지 못한 예외는 failed 기록 후 다시 던진다.
    """
    try:
        req = GenerationRequest.model_validate(generation_params)
        quiz = (generator or build_quiz_generator()).generate(req)
    except GenerationError as e:
        logger.error("퀴즈 생성 실패 quiz_id=%s: %s", quiz_id, e)
        with get_session() as session:
            quiz_repo.mark_failed(session, quiz_id, str(e))
        return
    except Exception as e:
        logger.exception("퀴즈 생성 중 예외 quiz_id=%s", quiz_id)
        with get_session() as session:
            quiz_repo.mark_failed(session, quiz_id, str(e))
        raise

    with get_session() as session:
        quiz_repo.mark_ready(session, quiz_id, quiz.to_json_dict())
    logger.info("퀴즈 생성 완료 quiz_id=%s 라운드=%d", quiz_id, len(quiz.rounds))
