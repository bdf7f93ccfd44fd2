"""
스키마 검증: 유효 문서, 유형별 규칙 위반, allowed_types, JSON 파싱 실패.
"""

import json

from partyquiz.services.schema_validator import parse_quiz, quiz_json_schema, validate_quiz


def _first_question(quiz: dict) -> dict:
    return quiz["rounds"][0]["questions"][0]


def test_valid_quiz_has_no_violations(make_quiz):
    quiz = make_quiz(types=("text", "multiple_choice", "true_false", "audio", "video", "image"))
    assert validate_quiz(quiz) == []


def test_missing_top_level_fields_reported():
    violations = validate_quiz({"title": "Test"})
    assert "rounds: Field required" in violations
    assert "id: Field required" in violations


def test_non_object_is_invalid():
    assert validate_quiz([1, 2, 3])
    assert validate_quiz(None)


def test_multiple_choice_index_out_of_range(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1, types=("multiple_choice",))
    _first_question(quiz)["correct_choice_index"] = 4
    violations = validate_quiz(quiz)
    assert len(violations) == 1
    assert violations[0].startswith("rounds.0.questions.0")
    assert "out of range" in violations[0]


def test_multiple_choice_without_index(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1, types=("multiple_choice",))
    del _first_question(quiz)["correct_choice_index"]
    assert any("requires correct_choice_index" in v for v in validate_quiz(quiz))


def test_true_false_requires_exact_choices(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1, types=("true_false",))
    _first_question(quiz)["choices"] = ["Yes", "No"]
    assert any("true_false choices" in v for v in validate_quiz(quiz))

    _first_question(quiz)["choices"] = ["True", "False"]
    _first_question(quiz)["correct_choice_index"] = 2
    assert any("0 or 1" in v for v in validate_quiz(quiz))


def test_audio_requires_media(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1, types=("audio",))
    del _first_question(quiz)["media"]
    assert any("audio question requires media" in v for v in validate_quiz(quiz))


def test_youtube_media_requires_ids_and_window(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1, types=("video",))
    del _first_question(quiz)["media"]["video_id"]
    assert any("requires video_id" in v for v in validate_quiz(quiz))

    quiz = make_quiz(rounds=1, per_round=1, types=("video",))
    _first_question(quiz)["media"]["end_sec"] = 5
    assert any("end_sec must be greater than start_sec" in v for v in validate_quiz(quiz))


def test_static_media_requires_absolute_url(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1, types=("image",))
    _first_question(quiz)["media"]["image_url"] = "tower.jpg"
    assert any("absolute http(s) URL" in v for v in validate_quiz(quiz))


def test_unknown_question_type_rejected(make_quiz):
    quiz = make_quiz(rounds=1, per_round=1)
    _first_question(quiz)["type"] = "essay"
    violations = validate_quiz(quiz)
    assert violations and violations[0].startswith("rounds.0.questions.0.type")


def test_allowed_types_enforced_only_when_given(make_quiz):
    quiz = make_quiz(rounds=1, per_round=2, types=("text", "audio"))
    assert validate_quiz(quiz) == []
    violations = validate_quiz(quiz, allowed_types=["text"])
    assert violations == [
        "rounds.0.questions.1.type: Value error, question type 'audio' is not in allowed_types ['text']"
    ]


def test_parse_quiz_reports_invalid_json():
    quiz, violations = parse_quiz("not json at all")
    assert quiz is None
    assert violations[0].startswith("Invalid JSON:")


def test_parse_quiz_keeps_extra_top_level_keys(make_quiz):
    payload = make_quiz(rounds=1, per_round=1)
    payload["audience"] = {"participants": []}
    quiz, violations = parse_quiz(json.dumps(payload))
    assert violations == []
    assert quiz.to_json_dict()["audience"] == {"participants": []}


def test_json_schema_describes_quiz_document():
    schema = quiz_json_schema()
    assert schema["title"] == "QuizDocument"
    assert set(schema["required"]) >= {"id", "title", "rounds"}
    assert "QuizQuestion" in schema["$defs"]
