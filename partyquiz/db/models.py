"""
SQLModel 테이블 정의: 퀴즈 레코드.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

# PostgreSQL에서는 JSONB, 그 외(sqlite 테스트 등)에서는 일반 JSON
JSONType = JSON().with_variant(JSONB, "postgresql")


class QuizStatus(str, Enum):
    GENERATING = "generating"
    READY = "ready"
    FAILED = "failed"


class Quiz(SQLModel, table=True):
    """생성 요청 1건 = 1행. generating → ready | failed, 재생성 시 generating으로 리셋."""

    __tablename__ = "quizzes"

    id: int | None = Field(default=None, primary_key=True)
    theme: str = Field(nullable=False)
    status: str = Field(default=QuizStatus.GENERATING.value, nullable=False, index=True)
    generation_params: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONType, nullable=False))
    quiz_data: dict[str, Any] | None = Field(default=None, sa_column=Column(JSONType, nullable=True))
    error_message: str | None = Field(default=None, sa_column=Column(Text, nullable=True))
    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=func.now()),
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), onupdate=func.now()),
    )
