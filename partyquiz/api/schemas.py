"""
API 요청/응답 스키마.
"""

from typing import Any

from pydantic import BaseModel, Field

from partyquiz.schema.request import BrainrotLevel, Participant, QuestionType


class QuizCreateResponse(BaseModel):
    """생성/재생성 접수 응답."""

    quiz_id: int
    status: str = Field(..., description="generating | ready | failed")


class QuizShowResponse(BaseModel):
    """퀴즈 조회 응답. ready면 quiz, failed면 error_message 포함."""

    id: int
    status: str
    theme: str
    generation_params: dict[str, Any]
    quiz: dict[str, Any] | None = None
    error_message: str | None = None


class GenerationParamsOverride(BaseModel):
    """재생성 시 바꿀 파라미터. 비운 항목은 저장된 값 유지."""

    theme: str | None = None
    participants: list[Participant] | None = None
    countries: list[str] | None = None
    rounds: int | None = Field(None, ge=1)
    questions_per_round: int | None = Field(None, ge=1)
    brainrot_level: BrainrotLevel | None = None
    allowed_types: list[QuestionType] | None = None


class QuizRegenerateRequest(BaseModel):
    generation_params: GenerationParamsOverride | None = None


class QuizUpdateRequest(BaseModel):
    quiz_data: dict[str, Any] = Field(..., description="수정된 퀴즈 JSON 전체")
