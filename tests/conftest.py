"""
공통 픽스처: 테스트용 환경 변수(sqlite DB, 더미 OpenAI 키), LLM/검색 스텁, 퀴즈 JSON 빌더.
환경 변수는 partyquiz import 전에 설정해야 한다.
"""

import json
import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="partyquiz_tests_"))
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["YOUTUBE_API_KEY"] = ""

from partyquiz.schema.quiz import PLACEHOLDER_VIDEO_ID  # noqa: E402
from partyquiz.schema.request import GenerationRequest  # noqa: E402

ANSWERS = {
    "audio": "Artist - Song Title",
    "video": "Movie Title scene",
    "image": "Eiffel Tower",
}


def _question(qid: str, qtype: str, difficulty: str) -> dict:
    question = {
        "id": qid,
        "type": qtype,
        "difficulty": difficulty,
        "prompt": f"Question {qid}?",
        "answer": {"display": ANSWERS.get(qtype, f"Answer {qid}")},
    }
    if qtype == "multiple_choice":
        question["choices"] = ["Mars", "Venus", "Jupiter", "Saturn"]
        question["correct_choice_index"] = 0
    elif qtype == "true_false":
        question["choices"] = ["True", "False"]
        question["correct_choice_index"] = 1
    elif qtype in ("audio", "video"):
        question["media"] = {
            "provider": "youtube",
            "mode": qtype,
            "video_id": PLACEHOLDER_VIDEO_ID,
            "start_sec": 10,
            "end_sec": 25,
        }
    elif qtype == "image":
        question["media"] = {
            "provider": "static",
            "image_url": "https://upload.wikimedia.org/wikipedia/commons/a/a8/Tour_Eiffel.jpg",
        }
    return question


def build_quiz(rounds: int = 3, per_round: int = 5, types: tuple[str, ...] = ("text", "multiple_choice")) -> dict:
    difficulties = ["easy", "medium", "hard"]
    quiz_rounds = []
    n = 0
    for r in range(rounds):
        difficulty = difficulties[min(r, 2)]
        questions = []
        for _ in range(per_round):
            n += 1
            questions.append(_question(f"q_{n:03d}", types[(n - 1) % len(types)], difficulty))
        quiz_rounds.append(
            {"round_index": r + 1, "title": f"Round {r + 1}", "difficulty": difficulty, "questions": questions}
        )
    return {
        "id": "qz_test_001",
        "title": "Test Quiz",
        "subtitle": "Simple test",
        "locale": {"primary": "en", "countries": ["US"]},
        "difficulty_curve": "progressive",
        "rounds": quiz_rounds,
    }


class StubLLM:
    """응답을 순서대로 돌려준다(마지막 응답은 반복). Exception이면 raise."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def complete(self, system_prompt, user_prompt, *, response_format="json", temperature=None):
        self.calls.append({"system": system_prompt, "user": user_prompt, "response_format": response_format})
        item = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(item, Exception):
            raise item
        return item


class StubSearch:
    """smart_search 스텁. query별 결과(리스트 또는 Exception) 지정, 없으면 default."""

    def __init__(self, default=None, by_query: dict | None = None):
        self.default = default if default is not None else []
        self.by_query = by_query or {}
        self.calls: list[tuple] = []

    def smart_search(self, query, type=None, max_results=3):
        self.calls.append((query, type, max_results))
        item = self.by_query.get(query, self.default)
        if isinstance(item, Exception):
            raise item
        return list(item)


@pytest.fixture
def make_quiz():
    return build_quiz


@pytest.fixture
def quiz_json():
    def _dump(**kwargs) -> str:
        return json.dumps(build_quiz(**kwargs))

    return _dump


@pytest.fixture
def stub_llm():
    return StubLLM


@pytest.fixture
def stub_search():
    return StubSearch


@pytest.fixture
def space_request():
    return GenerationRequest(
        theme="Space Exploration",
        participants=[{"name": "Alice", "age": 28, "country": "US"}],
        rounds=3,
        questions_per_round=5,
        brainrot_level="medium",
        allowed_types=["text", "multiple_choice"],
    )


@pytest.fixture
def music_request():
    return GenerationRequest(
        theme="Famous Songs",
        participants=[{"name": "Alice", "age": 28, "country": "US"}],
        rounds=1,
        questions_per_round=2,
        allowed_types=["audio", "video"],
    )
