"""
생성 요청 모델: 기본값, 국가 도출, 청중 나이 통계.
"""

import pytest
from pydantic import ValidationError

from partyquiz.schema.request import ALL_QUESTION_TYPES, GenerationRequest, Participant, compute_audience_stats


def test_audience_stats_empty():
    assert compute_audience_stats([]) == {}


def test_audience_stats_from_dicts():
    stats = compute_audience_stats([{"age": 25}, {"age": 35}, {"age": 30}])
    assert stats == {"min": 25, "max": 35, "avg": 30.0}


def test_audience_stats_rounds_to_one_decimal_and_skips_missing_ages():
    participants = [Participant(name="a", age=20), Participant(name="b"), Participant(name="c", age=21), {"age": 21}]
    assert compute_audience_stats(participants) == {"min": 20, "max": 21, "avg": 20.7}


def test_audience_stats_without_any_age():
    assert compute_audience_stats([{"name": "x"}, Participant(name="y")]) == {}


def test_request_defaults():
    req = GenerationRequest(theme="  90s music ")
    assert req.theme == "90s music"
    assert req.rounds == 3
    assert req.questions_per_round == 7
    assert req.brainrot_level == "medium"
    assert req.allowed_types == ALL_QUESTION_TYPES
    assert req.total_questions == 21


def test_countries_derived_from_participants_in_order():
    req = GenerationRequest(
        theme="Food",
        participants=[
            {"name": "a", "country": "FR"},
            {"name": "b", "country": "US"},
            {"name": "c", "country": "FR"},
            {"name": "d"},
        ],
    )
    assert req.resolved_countries == ["FR", "US"]


def test_explicit_countries_win():
    req = GenerationRequest(theme="Food", participants=[{"country": "FR"}], countries=["UK"])
    assert req.resolved_countries == ["UK"]


def test_allowed_types_deduplicated():
    req = GenerationRequest(theme="x", allowed_types=["text", "audio", "text"])
    assert req.allowed_types == ["text", "audio"]


@pytest.mark.parametrize(
    "payload",
    [
        {"theme": "   "},
        {"theme": "x", "allowed_types": []},
        {"theme": "x", "allowed_types": ["essay"]},
        {"theme": "x", "rounds": 0},
        {"theme": "x", "brainrot_level": "extreme"},
    ],
)
def test_invalid_requests_rejected(payload):
    with pytest.raises(ValidationError):
        GenerationRequest.model_validate(payload)
