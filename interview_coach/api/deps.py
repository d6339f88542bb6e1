from functools import lru_cache

from interview_coach.core.config import settings
from interview_coach.services.pipeline.llm_service import LLMService
from interview_coach.services.session.interview_session import InterviewSession
from interview_coach.services.session.session_store import SessionStore


@lru_cache
def get_llm_service() -> LLMService:
    """Shared LLMService; the Gemini client itself is created on first use."""
    return LLMService()


@lru_cache
def get_session_store() -> SessionStore:
    """
    Dependency providing the process-wide session registry.
    Sessions are built by a factory so the API key check happens per session.
    """
    def factory() -> InterviewSession:
        return InterviewSession(
            llm_service=get_llm_service(),
            api_key_configured=settings.api_key_configured,
        )
    return SessionStore(session_factory=factory)
