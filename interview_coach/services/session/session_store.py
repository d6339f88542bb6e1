import logging
from collections import OrderedDict
from typing import Callable

from interview_coach.core.config import settings
from interview_coach.core.exceptions import SessionNotFoundError
from interview_coach.services.session.interview_session import InterviewSession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory registry of interview sessions.

    Sessions are ordered by last access; once `max_sessions` is exceeded the
    least recently used one is evicted.
    """

    def __init__(self, session_factory: Callable[[], InterviewSession], max_sessions: int = None):
        self._session_factory = session_factory
        self._sessions: "OrderedDict[str, InterviewSession]" = OrderedDict()
        self.max_sessions = max_sessions or settings.MAX_SESSIONS

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self) -> InterviewSession:
        session = self._session_factory()
        self._sessions[session.session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted session {evicted_id} (capacity {self.max_sessions})")
        logger.info(f"Created session {session.session_id} ({len(self._sessions)} active)")
        return session

    def get(self, session_id: str) -> InterviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Interview session not found: {session_id}")
        self._sessions.move_to_end(session_id)
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(f"Interview session not found: {session_id}")
        logger.info(f"Deleted session {session_id}")
