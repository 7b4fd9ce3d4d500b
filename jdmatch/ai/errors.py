from __future__ import annotations

import openai

# Last-resort markers for providers that only report the cause in the message text.
_RATE_LIMIT_MARKERS = ("RESOURCE_EXHAUSTED", "429")
_SAFETY_MARKERS = ("SAFETY",)
_CREDENTIAL_MARKERS = ("API_KEY_INVALID", "API key not valid", "Incorrect API key")

_SAFETY_CODES = {"content_filter", "content_policy_violation"}
_CREDENTIAL_CODES = {"invalid_api_key", "API_KEY_INVALID"}


class AnalysisError(RuntimeError):
    code = "analysis_failed"
    status_code = 500
    title = "Analysis failed."
    default_detail = "Something went wrong while analyzing your resume. Please try again."
    retryable = False

    def __init__(self, detail: str | None = None, *, code: str | None = None):
        message = detail or self.default_detail
        super().__init__(message)
        self.detail = message
        if code is not None:
            self.code = code

    def to_payload(self) -> dict[str, str]:
        return {"code": self.code, "error": self.title, "detail": self.detail}


class RateLimitedError(AnalysisError):
    code = "rate_limited"
    status_code = 429
    title = "The AI is a bit busy right now."
    default_detail = "Please wait 30 seconds and try again. The provider limits how many requests can run per minute."
    retryable = True


class SafetyBlockedError(AnalysisError):
    code = "safety_blocked"
    status_code = 400
    title = "Content was blocked by safety filters."
    default_detail = "The input triggered the AI provider's safety filters. Try rephrasing."


class InvalidCredentialsError(AnalysisError):
    code = "invalid_credentials"
    status_code = 401
    title = "Invalid API key."
    default_detail = "The AI provider API key is missing or invalid."


class MalformedResponseError(AnalysisError):
    code = "malformed_response"
    status_code = 502
    title = "The AI returned an unexpected response."
    default_detail = "The analysis could not be read. Please try again."


def classify_ai_error(exc: BaseException) -> AnalysisError:
    """Map a provider exception onto the typed failure the caller reports."""
    if isinstance(exc, AnalysisError):
        return exc

    status = getattr(exc, "status_code", None)
    code = str(getattr(exc, "code", "") or "")

    if isinstance(exc, openai.RateLimitError) or status == 429:
        return RateLimitedError()
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)) or status in {401, 403}:
        return InvalidCredentialsError()
    if code in _SAFETY_CODES:
        return SafetyBlockedError()
    if code in _CREDENTIAL_CODES:
        return InvalidCredentialsError()

    message = str(exc)
    if any(marker in message for marker in _SAFETY_MARKERS):
        return SafetyBlockedError()
    if any(marker in message for marker in _RATE_LIMIT_MARKERS):
        return RateLimitedError()
    if any(marker in message for marker in _CREDENTIAL_MARKERS):
        return InvalidCredentialsError()
    return AnalysisError(message or None)
