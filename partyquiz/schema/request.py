"""
퀴즈 생성 요청 스키마 + 청중 통계.
"""

from typing import Any, Iterable, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

QuestionType = Literal["text", "audio", "video", "image", "true_false", "multiple_choice"]
BrainrotLevel = Literal["low", "medium", "high"]

ALL_QUESTION_TYPES: list[str] = ["text", "audio", "video", "image", "true_false", "multiple_choice"]


class Participant(BaseModel):
    name: str = ""
    age: int | None = Field(default=None, ge=0, le=150)
    country: str | None = None


class GenerationRequest(BaseModel):
    """퀴즈 생성 파라미터. 한 번 접수되면 변경하지 않는다."""

    model_config = ConfigDict(frozen=True)

    theme: str = Field(min_length=1)
    participants: list[Participant] = Field(default_factory=list)
    countries: list[str] | None = None
    rounds: int = Field(default=3, ge=1)
    questions_per_round: int = Field(default=7, ge=1)
    brainrot_level: BrainrotLevel = "medium"
    allowed_types: list[QuestionType] = Field(default_factory=lambda: list(ALL_QUESTION_TYPES), min_length=1)

    @field_validator("theme")
    @classmethod
    def strip_theme(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("theme must not be blank")
        return v

    @field_validator("allowed_types")
    @classmethod
    def dedupe_types(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))

    @property
    def resolved_countries(self) -> list[str]:
        """명시된 countries가 있으면 그대로, 없으면 참가자 국가를 등장 순서대로 중복 제거."""
        if self.countries:
            return list(self.countries)
        seen = [p.country.strip() for p in self.participants if p.country and p.country.strip()]
        return list(dict.fromkeys(seen))

    @property
    def total_questions(self) -> int:
        return self.rounds * self.questions_per_round


def compute_audience_stats(participants: Iterable[Participant | Mapping[str, Any]]) -> dict[str, Any]:
    """참가자 나이의 min/max/avg(소수 1자리). 나이 정보가 하나도 없으면 빈 dict."""
    ages: list[int] = []
    for p in participants or []:
        age = p.get("age") if isinstance(p, Mapping) else p.age
        if age is not None:
            ages.append(age)
    if not ages:
        return {}
    return {
        "min": min(ages),
        "max": max(ages),
        "avg": round(sum(ages) / len(ages), 1),
    }
