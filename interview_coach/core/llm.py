import logging
from typing import Optional

from google import genai
from google.genai import types

from interview_coach.core.config import settings
from interview_coach.core.exceptions import ConfigurationError

"""
Generative-AI client configuration.

This module provides:
- A lazily created GenAI SDK client (created on first use so that a missing
  API key surfaces as an error screen instead of a crash at startup)
- The HTTP timeout applied to every Gemini request
"""

logger = logging.getLogger(__name__)

_genai_client: Optional[genai.Client] = None


def get_api_key() -> str:
    """Return the configured Gemini API key or raise ConfigurationError."""
    api_key = settings.GEMINI_API_KEY.strip()
    if not api_key:
        raise ConfigurationError(
            "API_KEY environment variable is not set. Please ensure it's configured."
        )
    return api_key


def get_genai_client() -> genai.Client:
    """Get or create the GenAI SDK client instance."""
    global _genai_client
    if _genai_client is None:
        api_key = get_api_key()
        try:
            _genai_client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=settings.GEMINI_REQUEST_TIMEOUT * 1000),
            )
        except Exception as e:
            logger.error(f"Failed to initialize GenAI client: {e}")
            raise ConfigurationError(
                f"Failed to initialize AI Service: {e}. Ensure API_KEY is valid."
            ) from e
    return _genai_client


def reset_genai_client() -> None:
    """Drop the cached client (used when settings change, e.g. in tests)."""
    global _genai_client
    _genai_client = None
