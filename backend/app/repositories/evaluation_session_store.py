from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from app.telemetry.tracing import emit_event

if TYPE_CHECKING:
    from app.services.evaluation_service import EvaluationSession

logger = logging.getLogger(__name__)

DEFAULT_IDLE_LIMIT_SECONDS = 2 * 60 * 60
DEFAULT_MAX_SESSIONS = 500


class EvaluationSessionStore:
    """In-process registry of open evaluation forms, keyed by session id.

    Only touched from the event loop thread and never across an ``await``.
    Forms left idle longer than ``idle_limit_seconds`` are dropped, and the
    least recently used form is evicted once ``max_sessions`` are open.
    A form with a submission in flight is never dropped.
    """

    def __init__(
        self,
        *,
        idle_limit_seconds: float = DEFAULT_IDLE_LIMIT_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._idle_limit_seconds = idle_limit_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: dict[str, EvaluationSession] = {}
        self._last_seen: dict[str, float] = {}

    def add(self, session: EvaluationSession) -> None:
        self.expire_idle()
        while len(self._sessions) >= self._max_sessions:
            if not self._evict_least_recent():
                break
        self._sessions[session.id] = session
        self._last_seen[session.id] = self._clock()

    def get(self, session_id: str) -> EvaluationSession | None:
        self.expire_idle()
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self._clock()
        return session

    def discard(self, session_id: str) -> EvaluationSession | None:
        self._last_seen.pop(session_id, None)
        return self._sessions.pop(session_id, None)

    def expire_idle(self) -> list[str]:
        cutoff = self._clock() - self._idle_limit_seconds
        expired = [
            session_id
            for session_id, seen in self._last_seen.items()
            if seen < cutoff and not self._sessions[session_id].in_flight
        ]
        for session_id in expired:
            self._drop(session_id, "idle")
        return expired

    def _evict_least_recent(self) -> bool:
        candidates = [
            (seen, session_id)
            for session_id, seen in self._last_seen.items()
            if not self._sessions[session_id].in_flight
        ]
        if not candidates:
            return False
        _, session_id = min(candidates)
        self._drop(session_id, "capacity")
        return True

    def _drop(self, session_id: str, reason: str) -> None:
        self.discard(session_id)
        logger.info("Dropped evaluation form %s (%s)", session_id, reason)
        emit_event("evaluation.expired", session_id=session_id, attributes={"reason": reason})

    def __len__(self) -> int:
        return len(self._sessions)


_store = EvaluationSessionStore()


def get_session_store() -> EvaluationSessionStore:
    return _store
