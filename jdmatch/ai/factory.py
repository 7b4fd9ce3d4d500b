from jdmatch.ai.config import load_ai_config
from jdmatch.ai.types import AIClient

from jdmatch.ai.providers.openai_provider import OpenAIProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    # Gemini is reached through its OpenAI-compatible endpoint.
    if cfg.provider in {"openai", "gemini"}:
        return OpenAIProvider(
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.sdk_max_retries,
            temperature=cfg.temperature,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
