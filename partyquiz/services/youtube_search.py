"""
YouTube Data API v3 검색: 키워드 검색 → 영상 상세(길이 포함) 조회, 스마트 검색, 클립 구간 계산.
"""

import logging
import random
import re
from typing import Any

import httpx
from pydantic import BaseModel

from partyquiz.core.config import settings

logger = logging.getLogger(__name__)

MUSIC_CATEGORY_ID = "10"
DEFAULT_DURATION_SEC = 300

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")

SMART_SEARCH_KEYWORDS = {
    "audio": ["official music video", "official audio", "official video", "lyrics video"],
    "video": ["official video", "official music video", "music video"],
}


class SearchError(RuntimeError):
    """검색 서비스 사용 불가(설정 누락) 또는 API 오류."""


class VideoResult(BaseModel):
    video_id: str
    title: str = ""
    channel: str | None = None
    duration_seconds: int | None = None
    thumbnail: str | None = None


def parse_duration(iso_duration: str | None) -> int | None:
    """ISO 8601 길이(PT#H#M#S) → 초. 형식이 맞지 않으면 None (예외 없음)."""
    if not iso_duration or not isinstance(iso_duration, str):
        return None
    match = _DURATION_RE.fullmatch(iso_duration.strip())
    if not match or not any(match.groups()):
        return None
    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def choose_clip_window(duration: int | None, rng: random.Random | None = None) -> tuple[int, int]:
    """
    재생 구간(start_sec, end_sec) 선택.
    시작은 영상 앞 1/3 안, 처음 5초 이전 금지, 끝에서 20초 이내 금지. 길이 10~15초, 끝은 duration-1 이하.
    예외: 2초 미만 영상은 end > start를 만족할 구간이 없으므로 (0, 1).
    """
    rng = rng or random
    duration = int(duration) if duration and duration > 0 else DEFAULT_DURATION_SEC
    latest_start = min(duration // 3, duration - 20)
    if latest_start >= 5:
        start = rng.randint(5, latest_start)
    else:
        # 짧은 영상: 가능한 한 5초에 가깝게, 최소 1초 재생 여유
        start = max(0, min(5, duration - 2))
    end = min(start + rng.randint(10, 15), duration - 1)
    if end <= start:
        end = start + 1
    return start, end


class YoutubeSearchService:
    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: httpx.Client | None = None,
        base_url: str | None = None,
    ) -> None:
        self._api_key = api_key or settings.YOUTUBE_API_KEY
        if not self._api_key:
            raise SearchError("YouTube API key not configured")
        self._base_url = (base_url or settings.YOUTUBE_API_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=settings.SEARCH_TIMEOUT)

    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.get(f"{self._base_url}/{path}", params={**params, "key": self._api_key})
        except httpx.HTTPError as exc:
            raise SearchError(f"YouTube request failed: {exc}") from exc
        if response.is_error:
            logger.error("YouTube API 오류 %s - %s", response.status_code, response.text[:500])
            raise SearchError(f"YouTube {path} failed: {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise SearchError(f"YouTube {path} returned invalid JSON") from exc

    def search(
        self,
        query: str,
        max_results: int = 5,
        video_category: str | None = None,
    ) -> list[VideoResult]:
        """키워드 검색 후 후보 영상 상세 정보(길이 포함)까지 조회."""
        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "maxResults": max_results,
            "videoEmbeddable": "true",
            "videoSyndicated": "true",
            "order": "relevance",
            "safeSearch": "none",
        }
        if video_category:
            params["videoCategoryId"] = video_category

        data = self._get("search", params)
        video_ids = [
            item["id"]["videoId"]
            for item in data.get("items") or []
            if isinstance(item, dict)
            and isinstance(item.get("id"), dict)
            and isinstance(item["id"].get("videoId"), str)
        ]
        if not video_ids:
            return []
        return self.get_video_details(video_ids)

    def get_video_details(self, video_ids: list[str]) -> list[VideoResult]:
        data = self._get("videos", {"part": "snippet,contentDetails", "id": ",".join(video_ids)})
        results: list[VideoResult] = []
        for item in data.get("items") or []:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                logger.warning("YouTube videos 응답 항목 형식 오류 → 건너뜀: %r", item)
                continue
            snippet = item.get("snippet") or {}
            details = item.get("contentDetails") or {}
            thumbs = snippet.get("thumbnails") or {}
            results.append(
                VideoResult(
                    video_id=item["id"],
                    title=snippet.get("title") or "",
                    channel=snippet.get("channelTitle"),
                    duration_seconds=parse_duration(details.get("duration")),
                    thumbnail=(thumbs.get("medium") or {}).get("url"),
                )
            )
        return results

    def search_music(self, query: str, max_results: int = 5) -> list[VideoResult]:
        results = self.search(f"{query} official music video", max_results=max_results, video_category=MUSIC_CATEGORY_ID)
        if results:
            return results
        return self.search(f"{query} official audio", max_results=max_results, video_category=MUSIC_CATEGORY_ID)

    def search_movie_clip(self, query: str, max_results: int = 5) -> list[VideoResult]:
        return self.search(f"{query} movie scene clip", max_results=max_results)

    def smart_search(self, query: str, type: str = "video", max_results: int = 3) -> list[VideoResult]:
        """
        문항 유형별 키워드를 순서대로 붙여 검색, 처음으로 결과가 나온 집합을 사용.
        그 안에서 제목에 "official"이 들어간 결과를 우선, 없으면 전체 반환. 모두 비면 [].
        """
        keywords = SMART_SEARCH_KEYWORDS.get(type, [""])
        category = MUSIC_CATEGORY_ID if type == "audio" else None
        for keyword in keywords:
            search_query = f"{query} {keyword}" if keyword else query
            results = self.search(search_query, max_results=max_results, video_category=category)
            if results:
                official = [r for r in results if "official" in r.title.lower()]
                return official or results
        return []
