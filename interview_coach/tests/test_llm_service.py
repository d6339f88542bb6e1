"""
Unit tests for interview_coach.services.pipeline.llm_service.

Tests the LLMService class with a mocked GenAI client.
"""

from unittest.mock import MagicMock

import pytest
from google.genai import types
from google.genai.errors import ClientError

from interview_coach.core.config import settings
from interview_coach.core.exceptions import AIResponseError, AIServiceError, ConfigurationError
from interview_coach.schemas.interview import InlineMedia, InterviewEntry
from interview_coach.services.pipeline.llm_service import LLMService
from interview_coach.services.pipeline.rate_limiter import ServiceRateLimiter


def _response(text):
    response = MagicMock()
    response.text = text
    return response


class TestLLMService:
    """Tests for LLMService class."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.models.generate_content.return_value = _response('["Q1?", "Q2?", "Q3?", "Q4?"]')
        return client

    @pytest.fixture
    def service(self, client):
        return LLMService(
            client_factory=lambda: client,
            limiter=ServiceRateLimiter({"gemini": 1000, "default": 1000}),
        )

    @pytest.mark.asyncio
    async def test_generate_questions(self, service, client):
        """Questions are parsed from the JSON reply and truncated to the requested count."""
        questions = await service.generate_questions("Backend engineer", 3)

        assert questions == ["Q1?", "Q2?", "Q3?"]
        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == settings.GEMINI_MODEL
        assert "generate 3 diverse interview questions" in kwargs["contents"]
        assert "Backend engineer" in kwargs["contents"]
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].temperature == settings.QUESTION_TEMPERATURE

    @pytest.mark.asyncio
    async def test_generate_questions_fenced_reply(self, service, client):
        client.models.generate_content.return_value = _response('```json\n["Only one?"]\n```')

        assert await service.generate_questions("JD", 3) == ["Only one?"]

    @pytest.mark.asyncio
    async def test_generate_questions_bad_shape(self, service, client):
        """A reply that is not a list of strings is a response error."""
        client.models.generate_content.return_value = _response('{"questions": []}')

        with pytest.raises(AIResponseError) as exc_info:
            await service.generate_questions("JD", 3)

        assert exc_info.value.message == (
            "Failed to generate questions: AI did not return a valid array of question strings."
        )

    @pytest.mark.asyncio
    async def test_generate_questions_empty_reply(self, service, client):
        client.models.generate_content.return_value = _response(None)

        with pytest.raises(AIResponseError, match="empty response"):
            await service.generate_questions("JD", 3)

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self, service, client):
        """Non-retryable API errors surface as AIServiceError with context."""
        client.models.generate_content.side_effect = ClientError(
            400, {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
        )

        with pytest.raises(AIServiceError) as exc_info:
            await service.generate_questions("JD", 3)

        assert exc_info.value.message.startswith("Failed to generate questions:")
        assert "API key not valid" in exc_info.value.message
        assert client.models.generate_content.call_count == 1

    @pytest.mark.asyncio
    async def test_missing_api_key_propagates(self):
        """Configuration errors are not rewrapped."""
        def no_client():
            raise ConfigurationError("API_KEY environment variable is not set. Please ensure it's configured.")

        service = LLMService(client_factory=no_client)

        with pytest.raises(ConfigurationError, match="API_KEY"):
            await service.generate_questions("JD", 3)
        with pytest.raises(ConfigurationError, match="API_KEY"):
            await service.generate_feedback("JD", [])


class TestFeedbackRequest:
    """Tests for the multi-part feedback request."""

    @pytest.fixture
    def client(self, sample_feedback):
        client = MagicMock()
        client.models.generate_content.return_value = _response(sample_feedback)
        return client

    @pytest.fixture
    def service(self, client):
        return LLMService(
            client_factory=lambda: client,
            limiter=ServiceRateLimiter({"gemini": 1000, "default": 1000}),
        )

    @pytest.fixture
    def entries(self, video_data_url):
        return [
            InterviewEntry(question="Q1?", answer="First answer"),
            InterviewEntry(question="Q2?", answer="Second answer", video_data_url=video_data_url),
            InterviewEntry(question="Q3?", answer="Third answer", video_data_url="data:broken"),
        ]

    def test_build_feedback_parts(self, service, entries):
        """Each answer gets its transcript plus either the video and guideline or a note."""
        parts = service.build_feedback_parts("Backend engineer", entries)

        assert len(parts) == 9
        assert "You are an expert interview coach" in parts[0].text
        assert "Backend engineer" in parts[0].text

        assert "Question 1: Q1?" in parts[1].text
        assert "User's Transcribed Spoken Answer 1: First answer" in parts[1].text
        assert parts[2].text.startswith("(No video provided for Question 1.")

        assert "Question 2: Q2?" in parts[3].text
        assert parts[4].inline_data.mime_type == "video/webm;codecs=vp9"
        assert parts[4].inline_data.data == b"fake webm bytes"
        assert parts[5].text.startswith("(Video Analysis Guideline for Question 2 Video")

        assert "Question 3: Q3?" in parts[6].text
        assert parts[7].text.startswith("(Video for Question 3 was not available")

        assert "**Overall Score:** [value]/100" in parts[8].text
        assert "**Score Breakdown:**" in parts[8].text

    @pytest.mark.asyncio
    async def test_generate_feedback(self, service, client, entries, sample_feedback):
        feedback = await service.generate_feedback("Backend engineer", entries)

        assert feedback == sample_feedback
        kwargs = client.models.generate_content.call_args.kwargs
        assert isinstance(kwargs["contents"], types.Content)
        assert kwargs["contents"].role == "user"
        assert len(kwargs["contents"].parts) == 9
        assert kwargs["config"].temperature == settings.FEEDBACK_TEMPERATURE

    @pytest.mark.asyncio
    async def test_generate_feedback_failure(self, service, client, entries):
        client.models.generate_content.side_effect = RuntimeError("connection reset")

        with pytest.raises(AIServiceError, match="Failed to generate feedback: connection reset"):
            await service.generate_feedback("JD", entries)

    def test_video_bytes_come_from_validator(self, client, video_data_url):
        """The request part carries the bytes the validator already decoded."""
        validator = MagicMock()
        validator.parse.return_value = InlineMedia(mime_type="video/webm", data=b"decoded once")
        service = LLMService(client_factory=lambda: client, media_validator=validator)

        parts = service.build_feedback_parts("JD", [InterviewEntry(question="Q?", answer="A", video_data_url=video_data_url)])

        validator.parse.assert_called_once_with(video_data_url)
        assert parts[2].inline_data.data == b"decoded once"
        assert parts[2].inline_data.mime_type == "video/webm"
