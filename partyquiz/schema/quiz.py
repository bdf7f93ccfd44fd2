"""
생성된 퀴즈 문서(QuizDocument) 스키마.
LLM 응답 검증과 프롬프트에 넣는 JSON Schema 모두 이 모델이 기준이다.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from partyquiz.schema.request import QuestionType

Difficulty = Literal["easy", "medium", "hard"]
MediaProvider = Literal["youtube", "static"]

# LLM에게 쓰게 하는 임시 YouTube ID. 보강 단계에서 실제 검색 결과로 교체된다.
PLACEHOLDER_VIDEO_ID = "dQw4w9WgXcQ"
DEFAULT_CLIP_START = 10
DEFAULT_CLIP_END = 25

TRUE_FALSE_CHOICES = ["True", "False"]


class QuizLocale(BaseModel):
    primary: str = Field(min_length=1)
    countries: list[str] = Field(default_factory=list)


class QuizMedia(BaseModel):
    model_config = ConfigDict(extra="allow")

    provider: MediaProvider
    mode: Literal["audio", "video"] | None = None
    video_id: str | None = None
    start_sec: int | None = Field(default=None, ge=0)
    end_sec: int | None = Field(default=None, ge=0)
    image_url: str | None = None

    @model_validator(mode="after")
    def check_provider_fields(self):
        if self.provider == "youtube":
            missing = [k for k in ("video_id", "start_sec", "end_sec") if getattr(self, k) is None]
            if missing:
                raise ValueError(f"youtube media requires {', '.join(missing)}")
            if not self.video_id.strip():
                raise ValueError("youtube media requires a non-empty video_id")
            if self.end_sec <= self.start_sec:
                raise ValueError("end_sec must be greater than start_sec")
        else:
            if not self.image_url:
                raise ValueError("static media requires image_url")
            if not self.image_url.startswith(("http://", "https://")):
                raise ValueError("image_url must be an absolute http(s) URL")
        return self


class QuizAnswer(BaseModel):
    display: str = Field(min_length=1)
    explanation: str | None = None


class AntiSpoiler(BaseModel):
    max_replays: int | None = Field(default=None, ge=1)
    auto_stop: bool | None = None


class QuizQuestion(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    type: QuestionType
    difficulty: Difficulty
    prompt: str = Field(min_length=1)
    answer: QuizAnswer
    media: QuizMedia | None = None
    choices: list[str] | None = None
    correct_choice_index: int | None = None
    anti_spoiler: AntiSpoiler | None = None

    @field_validator("type")
    @classmethod
    def type_allowed(cls, v: str, info: ValidationInfo) -> str:
        allowed = (info.context or {}).get("allowed_types")
        if allowed and v not in allowed:
            raise ValueError(f"question type '{v}' is not in allowed_types {list(allowed)}")
        return v

    @model_validator(mode="after")
    def check_type_shape(self):
        if self.type == "multiple_choice":
            if not self.choices or len(self.choices) < 2:
                raise ValueError("multiple_choice requires at least 2 choices")
            if self.correct_choice_index is None:
                raise ValueError("multiple_choice requires correct_choice_index")
            if not 0 <= self.correct_choice_index < len(self.choices):
                raise ValueError(
                    f"correct_choice_index {self.correct_choice_index} out of range for {len(self.choices)} choices"
                )
        elif self.type == "true_false":
            if self.choices != TRUE_FALSE_CHOICES:
                raise ValueError('true_false choices must be ["True", "False"]')
            if self.correct_choice_index not in (0, 1):
                raise ValueError("true_false correct_choice_index must be 0 or 1")
        elif self.type in ("audio", "video"):
            if self.media is None:
                raise ValueError(f"{self.type} question requires media")
        elif self.type == "image":
            if self.media is None or self.media.provider != "static":
                raise ValueError("image question requires static media with image_url")
        return self


class QuizRound(BaseModel):
    round_index: int = Field(ge=1)
    title: str = Field(min_length=1)
    difficulty: Difficulty
    questions: list[QuizQuestion] = Field(min_length=1)


class QuizDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    subtitle: str
    locale: QuizLocale
    difficulty_curve: str
    rounds: list[QuizRound] = Field(min_length=1)

    def iter_questions(self):
        for rnd in self.rounds:
            yield from rnd.questions

    def to_json_dict(self) -> dict[str, Any]:
        """저장/응답용 dict. LLM이 생략한 선택 필드는 다시 넣지 않는다."""
        return self.model_dump(mode="json", exclude_none=True)
