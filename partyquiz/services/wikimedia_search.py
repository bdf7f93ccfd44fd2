"""
Wikimedia Commons 이미지 검색. 어떤 오류도 빈 결과로 바꿔 보강 단계를 멈추지 않는다.
"""

import logging
from urllib.parse import quote_plus

import httpx
from pydantic import BaseModel, ValidationError

from partyquiz.core.config import settings
from partyquiz.services.youtube_search import SearchError

logger = logging.getLogger(__name__)

SMART_SEARCH_QUALIFIERS = ["logo", "character", "artwork", "poster", "photo"]
FILE_NAMESPACE = 6


class ImageResult(BaseModel):
    title: str
    url: str
    thumb_url: str | None = None
    width: int | None = None
    height: int | None = None


def _page_index(page: dict) -> int:
    index = page.get("index")
    return index if isinstance(index, int) else 0


def placeholder_image_url(text: str | None) -> str:
    """검색 결과가 없을 때 쓰는 대체 이미지."""
    return f"https://via.placeholder.com/800x600/4A5568/FFFFFF?text={quote_plus(text or 'Image')}"


class WikimediaSearchService:
    def __init__(self, *, client: httpx.Client | None = None, api_url: str | None = None) -> None:
        self._api_url = api_url or settings.WIKIMEDIA_API_URL
        if not self._api_url:
            raise SearchError("Wikimedia API URL not configured")
        self._client = client or httpx.Client(
            timeout=settings.SEARCH_TIMEOUT,
            headers={"User-Agent": settings.HTTP_USER_AGENT},
        )

    def search(self, query: str, max_results: int = 5) -> list[ImageResult]:
        params = {
            "action": "query",
            "format": "json",
            "generator": "search",
            "gsrsearch": f"{query} filetype:bitmap",
            "gsrlimit": max_results,
            "gsrnamespace": FILE_NAMESPACE,
            "prop": "imageinfo",
            "iiprop": "url|size|mime",
            "iiurlwidth": 800,
        }
        try:
            response = self._client.get(self._api_url, params=params)
            response.raise_for_status()
            pages = (response.json().get("query") or {}).get("pages") or {}
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.error("Wikimedia 검색 오류 query=%r: %s", query, exc)
            return []

        # formatversion=1은 {pageid: page}, formatversion=2는 [page, ...]
        if isinstance(pages, dict):
            pages = list(pages.values())
        elif not isinstance(pages, list):
            logger.error("Wikimedia 응답 형식 오류 query=%r: pages=%r", query, type(pages).__name__)
            return []
        pages = [p for p in pages if isinstance(p, dict)]

        results: list[ImageResult] = []
        for page in sorted(pages, key=_page_index):
            infos = page.get("imageinfo") or []
            info = infos[0] if isinstance(infos, list) and infos and isinstance(infos[0], dict) else {}
            if not isinstance(info.get("url"), str):
                continue
            try:
                result = ImageResult(
                    title=str(page.get("title") or "").removeprefix("File:"),
                    url=info["url"],
                    thumb_url=info.get("thumburl"),
                    width=info.get("width"),
                    height=info.get("height"),
                )
            except ValidationError as exc:
                logger.warning("Wikimedia 결과 항목 건너뜀 query=%r: %s", query, exc)
                continue
            results.append(result)
        return results

    def smart_search(self, query: str, max_results: int = 3) -> list[ImageResult]:
        """그대로 검색 후, 비면 logo → character → artwork → poster → photo 순으로 재시도."""
        results = self.search(query, max_results=max_results)
        if results:
            return results
        for qualifier in SMART_SEARCH_QUALIFIERS:
            results = self.search(f"{query} {qualifier}", max_results=max_results)
            if results:
                return results
        return []
