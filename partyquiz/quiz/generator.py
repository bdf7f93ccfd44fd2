"""
퀴즈 생성 오케스트레이터: 프롬프트 → LLM → 스키마 검증 → (1회) 복구 → 미디어 보강.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Callable

from partyquiz.core.config import settings
from partyquiz.quiz.prompts import build_repair_prompt, build_system_prompt, build_user_prompt
from partyquiz.schema.quiz import QuizDocument, QuizQuestion
from partyquiz.schema.request import GenerationRequest, compute_audience_stats
from partyquiz.services.llm import LLMClient, LLMError, OpenAIChatClient
from partyquiz.services.schema_validator import parse_quiz, quiz_json_schema
from partyquiz.services.wikimedia_search import WikimediaSearchService, placeholder_image_url
from partyquiz.services.youtube_search import SearchError, YoutubeSearchService, choose_clip_window

logger = logging.getLogger(__name__)

SEARCH_MAX_RESULTS = 3


class GenerationError(RuntimeError):
    """LLM 전송 실패 또는 복구 후에도 스키마를 만족하지 못한 경우."""


class Attempt(str, Enum):
    FIRST = "first"
    REPAIR = "repair"


# 복구는 정확히 한 번: REPAIR 다음 상태는 없다.
NEXT_ATTEMPT: dict[Attempt, Attempt | None] = {
    Attempt.FIRST: Attempt.REPAIR,
    Attempt.REPAIR: None,
}


class QuizGenerator:
    def __init__(
        self,
        llm_client: LLMClient,
        video_search: YoutubeSearchService | None = None,
        image_search: WikimediaSearchService | None = None,
        rng: random.Random | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.llm_client = llm_client
        self.video_search = video_search
        self.image_search = image_search
        self._rng = rng or random.Random()
        self._max_workers = max_workers or settings.ENRICHMENT_WORKERS
        self._schema = quiz_json_schema()

    def generate(self, req: GenerationRequest) -> QuizDocument:
        audience_stats = compute_audience_stats(req.participants)
        system_prompt = build_system_prompt(self._schema)
        user_prompt = build_user_prompt(req, audience_stats)

        attempt: Attempt | None = Attempt.FIRST
        while attempt is not None:
            logger.info("LLM 퀴즈 생성 호출 중 (attempt=%s, theme=%r)", attempt.value, req.theme)
            content = self._call_llm(system_prompt, user_prompt)
            quiz, violations = parse_quiz(content, req.allowed_types)
            if quiz is not None:
                break
            logger.warning("스키마 검증 실패 (attempt=%s) 위반 %d건: %s", attempt.value, len(violations), violations[:5])
            user_prompt = build_repair_prompt(violations, self._schema, previous_response=content)
            attempt = NEXT_ATTEMPT[attempt]
        else:
            raise GenerationError("Failed to generate valid quiz after repair attempt")

        self._warn_on_count_mismatch(quiz, req)
        return self.enrich(quiz)

    def _call_llm(self, system_prompt: str, user_prompt: str) -> str:
        try:
            return self.llm_client.complete(system_prompt, user_prompt, response_format="json")
        except LLMError as exc:
            raise GenerationError(f"OpenAI API error: {exc}") from exc

    def _warn_on_count_mismatch(self, quiz: QuizDocument, req: GenerationRequest) -> None:
        counts = [len(r.questions) for r in quiz.rounds]
        if len(counts) != req.rounds or any(c != req.questions_per_round for c in counts):
            logger.warning(
                "요청과 문항 수 불일치 요청=%dx%d 응답=%s",
                req.rounds,
                req.questions_per_round,
                counts,
            )

    # ----- 미디어 보강 -----

    def enrich(self, quiz: QuizDocument) -> QuizDocument:
        """문항별로 독립적으로 보강. 한 문항의 실패가 다른 문항이나 전체 생성을 막지 않는다."""
        steps: list[tuple[str, Callable[[QuizQuestion], bool], Callable[[QuizQuestion], tuple[QuizQuestion, bool]]]] = []
        if self.video_search is not None:
            steps.append(("YouTube", _wants_video, self.enrich_video_question))
        else:
            logger.warning("YouTube 서비스 없음 → 영상/오디오 보강 생략")
        if self.image_search is not None:
            steps.append(("Wikimedia", _wants_image, self.enrich_image_question))
        else:
            logger.warning("Wikimedia 서비스 없음 → 이미지 보강 생략")

        for name, wants, enrich_one in steps:
            targets = [q.id for q in quiz.iter_questions() if wants(q)]
            if not targets:
                continue
            logger.info("%s 보강 시작 (대상 %d문항)", name, len(targets))
            quiz, enriched = self._apply(quiz, wants, enrich_one)
            logger.info("%s enrichment summary: %d/%d questions enriched", name, enriched, len(targets))
        return quiz

    def _apply(
        self,
        quiz: QuizDocument,
        wants: Callable[[QuizQuestion], bool],
        enrich_one: Callable[[QuizQuestion], tuple[QuizQuestion, bool]],
    ) -> tuple[QuizDocument, int]:
        def run(question: QuizQuestion) -> tuple[QuizQuestion, bool]:
            return enrich_one(question) if wants(question) else (question, False)

        enriched = 0
        rounds = []
        with ThreadPoolExecutor(max_workers=self._max_workers) as ex:
            for rnd in quiz.rounds:
                outcomes = list(ex.map(run, rnd.questions))
                updated = [question for question, _ in outcomes]
                enriched += sum(1 for _, hit in outcomes if hit)
                rounds.append(rnd.model_copy(update={"questions": updated}))
        return quiz.model_copy(update={"rounds": rounds}), enriched

    def enrich_video_question(self, question: QuizQuestion) -> tuple[QuizQuestion, bool]:
        """
        실제 YouTube 검색 결과로 video_id와 재생 구간 교체.
        (문항, 검색 결과 사용 여부) 반환. 실패/무결과면 원래 문항 그대로.
        """
        query = question.answer.display.strip()
        if not query:
            logger.warning("문항 %s answer.display 없음 → 건너뜀", question.id)
            return question, False
        try:
            results = self.video_search.smart_search(query, type=question.type, max_results=SEARCH_MAX_RESULTS)
        except Exception:
            logger.exception("문항 %s YouTube 보강 실패", question.id)
            return question, False
        if not results:
            logger.warning("YouTube 결과 없음: %s", query)
            return question, False

        video = results[0]
        start_sec, end_sec = choose_clip_window(video.duration_seconds, self._rng)
        media = question.media.model_copy(
            update={"video_id": video.video_id, "start_sec": start_sec, "end_sec": end_sec}
        )
        logger.info("보강 완료 %s: %s (%s)", question.id, video.title, video.video_id)
        return question.model_copy(update={"media": media}), True

    def enrich_image_question(self, question: QuizQuestion) -> tuple[QuizQuestion, bool]:
        """Wikimedia 검색 결과로 image_url 교체. 결과가 없으면 대체 이미지(검색 결과 사용 아님)."""
        query = question.answer.display.strip()
        if not query:
            logger.warning("문항 %s answer.display 없음 → 건너뜀", question.id)
            return question, False
        try:
            results = self.image_search.smart_search(query, max_results=SEARCH_MAX_RESULTS)
        except Exception:
            logger.exception("문항 %s Wikimedia 보강 실패", question.id)
            return question, False

        if results:
            image_url = results[0].url
            logger.info("보강 완료 %s: %s (%s)", question.id, results[0].title, image_url)
        else:
            image_url = placeholder_image_url(query)
            logger.warning("Wikimedia 결과 없음 → 대체 이미지 사용 %s", question.id)
        media = question.media.model_copy(update={"image_url": image_url})
        return question.model_copy(update={"media": media}), bool(results)


def _wants_video(question: QuizQuestion) -> bool:
    return question.type in ("audio", "video") and question.media is not None and question.media.provider == "youtube"


def _wants_image(question: QuizQuestion) -> bool:
    return question.type == "image" and question.media is not None and question.media.provider == "static"


def build_quiz_generator(llm_client: LLMClient | None = None) -> QuizGenerator:
    """기본 구성: OpenAI + (가능하면) YouTube/Wikimedia. 검색 서비스 생성 실패는 '사용 불가'로 처리."""
    try:
        video_search = YoutubeSearchService()
        logger.info("YouTube 서비스 초기화 완료")
    except SearchError as exc:
        video_search = None
        logger.warning("YouTube 서비스 사용 불가: %s", exc)

    try:
        image_search = WikimediaSearchService()
        logger.info("Wikimedia 서비스 초기화 완료")
    except SearchError as exc:
        image_search = None
        logger.warning("Wikimedia 서비스 사용 불가: %s", exc)

    return QuizGenerator(
        llm_client or OpenAIChatClient(),
        video_search=video_search,
        image_search=image_search,
    )
