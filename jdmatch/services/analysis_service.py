from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from jdmatch.ai.errors import AnalysisError, MalformedResponseError
from jdmatch.ai.factory import get_ai_client
from jdmatch.ai.retry import RetryPolicy, call_with_retry, default_retry_policy
from jdmatch.ai.types import AIClient
from jdmatch.schemas.analysis import AnalysisResult
from jdmatch.services.prompts import build_analysis_messages

logger = logging.getLogger(__name__)


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    first_newline = stripped.find("\n")
    if first_newline == -1:
        return stripped
    body = stripped[first_newline + 1 :]
    if body.rstrip().endswith("```"):
        body = body.rstrip()[:-3]
    return body.strip()


def parse_analysis(raw: str) -> AnalysisResult:
    """Validate the model's JSON answer against the analysis schema."""
    try:
        data: Any = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as exc:
        logger.warning("analysis_invalid_json chars=%s: %s", len(raw), exc)
        raise MalformedResponseError("The AI response was not valid JSON.") from exc

    if not isinstance(data, dict):
        raise MalformedResponseError("The AI response was not a JSON object.")

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as exc:
        logger.warning("analysis_schema_invalid errors=%s", exc.error_count())
        raise MalformedResponseError("The AI response did not match the expected report format.") from exc


async def analyze_resume(
    resume_text: str,
    job_description: str,
    *,
    client: AIClient | None = None,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AnalysisResult:
    try:
        ai = client or get_ai_client()
    except ValueError as exc:
        raise AnalysisError(str(exc), code="provider_unsupported") from exc

    messages = build_analysis_messages(resume_text, job_description)
    started = time.perf_counter()
    outcome = await call_with_retry(
        lambda: ai.complete_json(messages),
        policy or default_retry_policy(),
        sleep=sleep,
        label="analysis",
    )
    latency_ms = int((time.perf_counter() - started) * 1000)

    if not outcome.ok:
        logger.warning(
            "analysis_failed kind=%s attempts=%s latency_ms=%s",
            outcome.kind,
            outcome.attempts,
            latency_ms,
        )
        raise outcome.error

    result = parse_analysis(outcome.value)
    logger.info(
        "analysis_completed attempts=%s latency_ms=%s overall=%s rewrites=%s",
        outcome.attempts,
        latency_ms,
        result.overall_match,
        len(result.rewrites),
    )
    return result
