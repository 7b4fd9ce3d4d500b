from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    max_upload_bytes: int
    export_font_path: str | None
    ai_max_attempts: int
    ai_backoff_seconds: float
    highlight_seconds: float
    session_ttl_minutes: int
    session_max_count: int
    session_purge_interval_s: int


def load_settings() -> Settings:
    return Settings(
        rate_limit=_get_env("RATE_LIMIT", "10/minute") or "10/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:3000",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        export_font_path=_get_env("EXPORT_FONT_PATH"),
        ai_max_attempts=max(1, _get_env_int("AI_MAX_ATTEMPTS", 3)),
        ai_backoff_seconds=max(0.0, _get_env_float("AI_BACKOFF_SECONDS", 5.0)),
        highlight_seconds=max(0.0, _get_env_float("HIGHLIGHT_SECONDS", 1.5)),
        session_ttl_minutes=max(1, _get_env_int("SESSION_TTL_MINUTES", 60)),
        session_max_count=max(1, _get_env_int("SESSION_MAX_COUNT", 500)),
        session_purge_interval_s=max(1, _get_env_int("SESSION_PURGE_INTERVAL_S", 300)),
    )


settings = load_settings()
