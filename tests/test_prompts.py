"""
프롬프트 빌더: 스키마/제약 포함 여부, 파라미터 삽입, 말투 수준, 복구 프롬프트.
"""

from partyquiz.quiz.prompts import BRAINROT_TONES, build_repair_prompt, build_system_prompt, build_user_prompt
from partyquiz.schema.quiz import PLACEHOLDER_VIDEO_ID
from partyquiz.schema.request import GenerationRequest, compute_audience_stats
from partyquiz.services.schema_validator import quiz_json_schema


def test_system_prompt_embeds_schema_and_rules():
    prompt = build_system_prompt(quiz_json_schema())
    assert '"QuizDocument"' in prompt
    assert "correct_choice_index" in prompt
    assert '["True","False"]' in prompt
    assert "NEVER include the song/movie/character title" in prompt
    assert prompt.endswith("Return ONLY JSON. No markdown, no extra text.")


def test_user_prompt_interpolates_parameters(space_request):
    stats = compute_audience_stats(space_request.participants)
    prompt = build_user_prompt(space_request, stats)

    assert 'THEME: "Space Exploration"' in prompt
    assert '- Countries: ["US"]' in prompt
    assert '["text", "multiple_choice"]' in prompt
    assert "- Rounds: 3" in prompt
    assert "- Questions per round: 5" in prompt
    assert "ALL 15 questions" in prompt
    assert "28-28 (avg: 28.0)" in prompt
    assert PLACEHOLDER_VIDEO_ID in prompt


def test_user_prompt_without_ages():
    req = GenerationRequest(theme="Cats")
    prompt = build_user_prompt(req, {})
    assert "Audience age range: unknown" in prompt
    assert "an international audience" in prompt


def test_each_brainrot_level_has_its_own_register():
    examples = set()
    for level, (_, example) in BRAINROT_TONES.items():
        prompt = build_user_prompt(GenerationRequest(theme="Cats", brainrot_level=level), {})
        assert f"TONE ({level})" in prompt
        assert example in prompt
        examples.add(example)
    assert len(examples) == 3


def test_prompts_are_deterministic(space_request):
    assert build_user_prompt(space_request, {}) == build_user_prompt(space_request, {})


def test_repair_prompt_lists_violations_and_schema():
    schema = quiz_json_schema()
    prompt = build_repair_prompt(["rounds: Field required", "id: Field required"], schema, previous_response='{"title": "x"}')

    assert "Fix ONLY the JSON structure" in prompt
    assert "Do not change the topic or counts." in prompt
    assert "- rounds: Field required" in prompt
    assert "- id: Field required" in prompt
    assert '{"title": "x"}' in prompt
    assert '"QuizDocument"' in prompt


def test_repair_prompt_without_previous_response():
    prompt = build_repair_prompt(["Invalid JSON: Expecting value"], quiz_json_schema())
    assert "Your previous response" not in prompt
    assert "Invalid JSON: Expecting value" in prompt
