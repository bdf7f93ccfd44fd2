"""
OpenAI Chat Completions 기반 LLM 클라이언트.
"""

from typing import Protocol

from openai import OpenAI, OpenAIError

from partyquiz.core.config import settings


class LLMError(RuntimeError):
    """LLM 호출(전송/API) 실패."""


class LLMClient(Protocol):
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        response_format: str = "json",
        temperature: float | None = None,
    ) -> str: ...


class OpenAIChatClient:
    def __init__(self, client: OpenAI | None = None, model: str | None = None) -> None:
        self._client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.REQUEST_TIMEOUT,
        )
        self._model = model or settings.OPENAI_MODEL

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        response_format: str = "json",
        temperature: float | None = None,
    ) -> str:
        kwargs = {}
        if response_format == "json":
            kwargs["response_format"] = {"type": "json_object"}
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=settings.OPENAI_TEMPERATURE if temperature is None else temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                **kwargs,
            )
        except OpenAIError as exc:
            raise LLMError(str(exc)) from exc
        return response.choices[0].message.content or "{}"
