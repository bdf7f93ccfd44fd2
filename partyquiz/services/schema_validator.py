"""
퀴즈 JSON 스키마 검증: 위반 사항을 사람이 읽을 수 있는 문자열 목록으로 돌려준다.
"""

import json
import logging
from functools import lru_cache
from typing import Any, Iterable

from pydantic import ValidationError

from partyquiz.schema.quiz import QuizDocument

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def quiz_json_schema() -> dict[str, Any]:
    """QuizDocument에서 만든 JSON Schema (프롬프트/검증 공통 기준)."""
    return QuizDocument.model_json_schema()


def format_violations(exc: ValidationError) -> list[str]:
    violations: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "(root)"
        violations.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return violations


def _context(allowed_types: Iterable[str] | None) -> dict[str, Any] | None:
    if allowed_types is None:
        return None
    return {"allowed_types": list(allowed_types)}


def validate_quiz(data: Any, allowed_types: Iterable[str] | None = None) -> list[str]:
    """임의의 JSON 값을 검증. 유효하면 빈 리스트."""
    try:
        QuizDocument.model_validate(data, context=_context(allowed_types))
    except ValidationError as exc:
        return format_violations(exc)
    return []


def parse_quiz(raw: str, allowed_types: Iterable[str] | None = None) -> tuple[QuizDocument | None, list[str]]:
    """
    LLM 원문을 JSON으로 파싱 후 검증.
    반환: (문서, []) 또는 (None, 위반 목록). JSON 파싱 실패도 위반으로 취급한다.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.error("JSON 파싱 실패: %s", exc)
        return None, [f"Invalid JSON: {exc}"]
    try:
        quiz = QuizDocument.model_validate(data, context=_context(allowed_types))
    except ValidationError as exc:
        return None, format_violations(exc)
    return quiz, []
