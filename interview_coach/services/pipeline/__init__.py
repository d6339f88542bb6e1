"""
AI Pipeline Package

Architecture:
- llm_service.py: Gemini calls for question and feedback generation
- llm_parser.py: JSON-in-markdown response parsing
- media_validator.py: Recorded answer (data URL) validation
- rate_limiter.py: Per-minute rate limiting and retry of transient errors
"""

from .llm_service import LLMService
from .media_validator import MediaValidator
from .llm_parser import parse_json_from_markdown, parse_question_list

__all__ = [
    'LLMService',
    'MediaValidator',
    'parse_json_from_markdown',
    'parse_question_list',
]
