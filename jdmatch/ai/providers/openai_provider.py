from __future__ import annotations

from typing import Optional, Sequence

from openai import AsyncOpenAI

from jdmatch.ai.errors import InvalidCredentialsError, MalformedResponseError, SafetyBlockedError
from jdmatch.ai.types import ChatMessage


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 0,
        temperature: float = 0.2,
    ):
        self._model = model
        self._temperature = temperature
        key = (api_key or "").strip()
        if not key:
            raise InvalidCredentialsError("The AI provider API key is not configured.")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def complete_json(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=payload,
            temperature=self._temperature,
            response_format={"type": "json_object"},
        )

        if not response.choices:
            raise MalformedResponseError("The AI returned no answer.")
        choice = response.choices[0]
        if choice.finish_reason == "content_filter" or getattr(choice.message, "refusal", None):
            raise SafetyBlockedError()

        content = choice.message.content or ""
        if not content.strip():
            raise MalformedResponseError("The AI returned an empty answer.")
        return content
