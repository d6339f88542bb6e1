"""
Unit tests for interview_coach.core.llm (lazy GenAI client).
"""

from unittest.mock import patch

import pytest

from interview_coach.core import llm
from interview_coach.core.config import settings
from interview_coach.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def fresh_client():
    llm.reset_genai_client()
    yield
    llm.reset_genai_client()


def test_missing_key_raises(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "  ")

    with pytest.raises(ConfigurationError, match="API_KEY environment variable is not set"):
        llm.get_genai_client()


def test_client_created_once(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")

    with patch("interview_coach.core.llm.genai.Client") as client_cls:
        first = llm.get_genai_client()
        second = llm.get_genai_client()

    assert first is second
    client_cls.assert_called_once()
    assert client_cls.call_args.kwargs["api_key"] == "test-key"
    assert client_cls.call_args.kwargs["http_options"].timeout == settings.GEMINI_REQUEST_TIMEOUT * 1000


def test_init_failure_is_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")

    with patch("interview_coach.core.llm.genai.Client", side_effect=ValueError("bad key")):
        with pytest.raises(ConfigurationError, match="Failed to initialize AI Service: bad key"):
            llm.get_genai_client()
