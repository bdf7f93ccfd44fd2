"""
퀴즈 생성 프롬프트: system / user / repair. 입력만으로 결정되는 순수 함수들.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from partyquiz.schema.quiz import DEFAULT_CLIP_END, DEFAULT_CLIP_START, PLACEHOLDER_VIDEO_ID
from partyquiz.schema.request import GenerationRequest

BRAINROT_TONES = {
    "low": (
        "Professional and clear. Straightforward trivia phrasing, no slang.",
        "Which planet is known as the Red Planet?",
    ),
    "medium": (
        "Casual and playful. Light humour and a friendly, chatty register.",
        "Okay space fans, which planet is basically rocking a permanent sunburn?",
    ),
    "high": (
        "Heavy internet slang and meme energy. Chaotic but still understandable.",
        "No cap, which planet is giving main-character red energy fr fr?",
    ),
}


def _pretty(schema: dict[str, Any]) -> str:
    return json.dumps(schema, ensure_ascii=False, indent=2)


def build_system_prompt(schema: dict[str, Any]) -> str:
    return f"""
You are Thinkn't, a quiz master that generates quizzes for team building.

CRITICAL: Your output MUST be valid JSON matching this EXACT schema:

```json
{_pretty(schema)}
```

ABSOLUTE REQUIREMENTS - FAILURE TO FOLLOW THESE WILL RESULT IN REJECTION:

1. THEME ADHERENCE: EVERY SINGLE QUESTION must be directly related to the provided theme.
   - If theme is "90s music", ALL questions must be about 90s songs, artists, albums, etc.
   - Do NOT include generic trivia questions unrelated to the theme.

2. QUESTION TYPES: Use ONLY the question types listed in "allowed_types".
   - If allowed_types is ["audio", "video"], you MUST NOT use text, image, multiple_choice, or true_false.
   - Respect this constraint strictly for every question.

3. DIFFICULTY PROGRESSION:
   - Round difficulty follows round_index: the first round is easy, the last round is hard,
     rounds in between are medium.
   - Every question MUST include: id, type, difficulty (easy|medium|hard), prompt, answer.display.

4. MEDIA REQUIREMENTS:
   - audio and video questions MUST include a media object.
   - For YouTube: provider "youtube", mode "audio" or "video", video_id (11-character YouTube ID),
     start_sec and end_sec as integers (seconds), end_sec greater than start_sec.
   - For images: provider "static" and image_url with a complete, REAL URL to an actual accessible image.
   - NEVER use placeholder URLs like "example.com".
   - ANTI-SPOILER: for audio/video/image questions NEVER include the song/movie/character title or the
     answer itself in the prompt.

5. MULTIPLE CHOICE & TRUE/FALSE:
   - For multiple_choice: provide 4 choices and correct_choice_index (0-based).
   - For true_false: choices MUST be ["True","False"] and correct_choice_index must be 0 or 1.

6. CONTENT GUIDELINES:
   - Keep content inclusive and safe for work.
   - Avoid politics, religion, sexual content, and personal attacks.
   - Match the provided brainrot level tone.

Return ONLY JSON. No markdown, no extra text.
""".strip()


def build_user_prompt(req: GenerationRequest, audience_stats: dict[str, Any]) -> str:
    participants = [p.model_dump(exclude_none=True) for p in req.participants]
    countries = req.resolved_countries
    allowed = json.dumps(req.allowed_types)
    tone, example = BRAINROT_TONES[req.brainrot_level]
    if audience_stats:
        age_line = f"{audience_stats['min']}-{audience_stats['max']} (avg: {audience_stats['avg']})"
    else:
        age_line = "unknown (assume a mixed adult audience)"
    recognizable = ", ".join(countries) if countries else "an international audience"

    return f"""
========================================
THEME: "{req.theme}"
========================================

CRITICAL: Every question MUST be about "{req.theme}". Do NOT include generic trivia!

REQUIREMENTS:
- Participants: {json.dumps(participants, ensure_ascii=False)}
- Countries: {json.dumps(countries, ensure_ascii=False)}
- ALLOWED QUESTION TYPES (use ONLY these): {allowed}
- Rounds: {req.rounds}
- Questions per round: {req.questions_per_round}
- Brainrot level: {req.brainrot_level}
- Audience age range: {age_line}

THEME REQUIREMENTS:
- ALL {req.total_questions} questions must relate directly to: "{req.theme}"
- Content should be recognizable for people from: {recognizable}
- If the theme is about music, prefer audio questions with real song clips (when allowed)
- If the theme is about movies, prefer video questions with real movie clips (when allowed)
- Make questions progressively harder: round 1 easy, round {req.rounds} hard

TONE ({req.brainrot_level}):
- {tone}
- Example: "{example}"

STRICT TYPE CONSTRAINT:
You may ONLY use these question types: {allowed}
Do NOT use any other question types!

MEDIA INSTRUCTIONS:
For YouTube videos/audio:
- Use placeholder video_id "{PLACEHOLDER_VIDEO_ID}" - we will replace it with actual search results
- Set start_sec to {DEFAULT_CLIP_START} and end_sec to {DEFAULT_CLIP_END} as defaults - we will adjust these automatically
- DO NOT reveal the answer in the prompt - make them guess from the clip!
- Make sure answer.display contains searchable text (e.g., "Artist - Song Title" or "Movie Title scene")

For images:
- Use REAL Wikimedia Commons URLs: "https://upload.wikimedia.org/wikipedia/commons/..."
- Choose iconic images related to "{req.theme}"
- DO NOT use placeholder URLs
- Only use image questions for public domain content (historical figures, landmarks, nature, etc.)

Remember: Theme is "{req.theme}" - EVERY question must be about this topic!
""".strip()


def build_repair_prompt(
    violations: Iterable[str],
    schema: dict[str, Any],
    previous_response: str | None = None,
) -> str:
    errors = "\n".join(f"- {v}" for v in violations) or "- (unknown validation error)"
    previous = ""
    if previous_response:
        previous = f"\nYour previous response:\n{previous_response}\n"
    return f"""
Your JSON did not match the required schema. Fix ONLY the JSON structure to satisfy the schema.
Do not change the topic or counts.

Required schema:
```json
{_pretty(schema)}
```

Validation errors found:
{errors}
{previous}
Return ONLY the corrected JSON matching the schema above.
""".strip()
