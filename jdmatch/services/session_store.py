from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from jdmatch.core.config import settings
from jdmatch.services.session import ResumeMatchSession

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):
    pass


class SessionStore:
    """In-memory sessions keyed by id. Nothing is written to disk."""

    def __init__(self, ttl_seconds: float, max_sessions: int, clock: Callable[[], float] = time.monotonic):
        self._ttl_seconds = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, tuple[ResumeMatchSession, float]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def add(self, session: ResumeMatchSession) -> None:
        with self._lock:
            while len(self._sessions) >= self._max_sessions:
                oldest = min(self._sessions, key=lambda key: self._sessions[key][1])
                del self._sessions[oldest]
                logger.info("session_evicted session=%s", oldest)
            self._sessions[session.session_id] = (session, self._clock())

    def get(self, session_id: str) -> ResumeMatchSession:
        now = self._clock()
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None or now - entry[1] > self._ttl_seconds:
                self._sessions.pop(session_id, None)
                raise SessionNotFound(session_id)
            session = entry[0]
            self._sessions[session_id] = (session, now)
            return session

    def discard(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        cutoff = self._clock() - self._ttl_seconds
        with self._lock:
            expired = [key for key, (_, touched) in self._sessions.items() if touched < cutoff]
            for key in expired:
                del self._sessions[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


session_store = SessionStore(
    ttl_seconds=settings.session_ttl_minutes * 60,
    max_sessions=settings.session_max_count,
)
