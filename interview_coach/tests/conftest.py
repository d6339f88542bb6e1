"""
Shared fixtures for interview coach tests.

The Gemini service is always replaced by AsyncMock doubles; no test talks to the network.
"""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from interview_coach.services.session.interview_session import InterviewSession
from interview_coach.services.session.session_store import SessionStore

SAMPLE_QUESTIONS = [
    "Tell me about a time you debugged a production incident.",
    "How would you design a rate limiter for a public API?",
    "Why do you want to work on our platform team?",
]

SAMPLE_FEEDBACK = """**Overall Score:** 82/100

**Score Breakdown:**
- **Clarity & Conciseness (from transcript):** 8/10
- **Relevance to Role (from transcript):** 9/10
- **Confidence & Engagement (from video analysis):** 6/10
- **Facial Expression Appropriateness (from video analysis):** 3/10
- **Technical/Behavioral Prowess (from transcript content):** 7/10

### Overall Impression
The candidate answered clearly and stayed on topic.

### Strengths
- The answer to Q1 described a concrete incident.
- The rate limiter design covered sliding windows.
"""


@pytest.fixture
def sample_questions():
    return list(SAMPLE_QUESTIONS)


@pytest.fixture
def sample_feedback():
    return SAMPLE_FEEDBACK


@pytest.fixture
def video_data_url():
    """A tiny but well-formed recorded answer."""
    payload = base64.b64encode(b"fake webm bytes").decode("ascii")
    return f"data:video/webm;codecs=vp9;base64,{payload}"


@pytest.fixture
def fake_llm_service(sample_questions, sample_feedback):
    """LLMService double whose calls succeed with canned results."""
    service = MagicMock()
    service.generate_questions = AsyncMock(return_value=sample_questions)
    service.generate_feedback = AsyncMock(return_value=sample_feedback)
    return service


@pytest.fixture
def session(fake_llm_service):
    return InterviewSession(llm_service=fake_llm_service, session_id="test-session")


@pytest.fixture
def session_store(fake_llm_service):
    return SessionStore(
        session_factory=lambda: InterviewSession(llm_service=fake_llm_service),
        max_sessions=10,
    )
