from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Literal, TypeVar

from jdmatch.ai.errors import AnalysisError, classify_ai_error
from jdmatch.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
OutcomeKind = Literal["success", "retryable_failure", "terminal_failure"]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff_seconds: float = 5.0

    def delay_for(self, attempt: int) -> float:
        """Linear backoff: 5s after the first failure, 10s after the second."""
        return attempt * self.backoff_seconds


def default_retry_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=settings.ai_max_attempts, backoff_seconds=settings.ai_backoff_seconds)


@dataclass(frozen=True)
class CallOutcome(Generic[T]):
    kind: OutcomeKind
    value: T | None = None
    error: AnalysisError | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.kind == "success"


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    classify: Callable[[BaseException], AnalysisError] = classify_ai_error,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "ai_call",
) -> CallOutcome[T]:
    attempt = 0
    while True:
        attempt += 1
        try:
            value = await operation()
        except Exception as exc:  # noqa: BLE001 - every failure is classified into the outcome
            error = classify(exc)
            if error is not exc:
                error.__cause__ = exc
            if not error.retryable:
                logger.warning("%s_failed attempt=%s code=%s: %s", label, attempt, error.code, exc)
                return CallOutcome(kind="terminal_failure", error=error, attempts=attempt)
            if attempt >= policy.max_attempts:
                logger.warning("%s_retries_exhausted attempts=%s code=%s", label, attempt, error.code)
                return CallOutcome(kind="retryable_failure", error=error, attempts=attempt)
            delay = policy.delay_for(attempt)
            logger.info(
                "%s_retrying attempt=%s/%s delay_s=%.1f code=%s",
                label,
                attempt,
                policy.max_attempts,
                delay,
                error.code,
            )
            await sleep(delay)
            continue
        return CallOutcome(kind="success", value=value, attempts=attempt)
