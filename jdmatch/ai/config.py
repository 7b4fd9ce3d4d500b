import os
from dataclasses import dataclass

from jdmatch.core.config import _get_env_float, _get_env_int

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

_DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.5-flash",
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None
    timeout_s: float
    temperature: float
    sdk_max_retries: int


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "")).strip()

    if provider == "gemini":
        api_key = os.getenv("GOOGLE_API_KEY")
        base_url = os.getenv("GEMINI_BASE_URL") or GEMINI_OPENAI_BASE_URL
    else:
        api_key = os.getenv("OPENAI_API_KEY")
        base_url = os.getenv("OPENAI_BASE_URL") or None

    return AIConfig(
        provider=provider,
        model=model,
        api_key=(api_key or "").strip() or None,
        base_url=base_url,
        timeout_s=_get_env_float("AI_TIMEOUT_S", 60.0),
        temperature=_get_env_float("AI_TEMPERATURE", 0.2),
        # Rate limits are retried by jdmatch.ai.retry, not by the SDK.
        sdk_max_retries=max(0, _get_env_int("OPENAI_MAX_RETRIES", 0)),
    )
