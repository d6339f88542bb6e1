from typing import Any
import logging
import json
import re

from interview_coach.core.exceptions import AIResponseError

logger = logging.getLogger(__name__)

# A whole reply wrapped in a ``` fence, with an optional language tag
_FENCE_PATTERN = re.compile(r'^```(\w*)?\s*\n?(.*?)\n?\s*```$', re.DOTALL)


def strip_markdown_fence(raw_text: str) -> str:
    """Return the fenced body if the whole reply is a ``` block, else the trimmed text."""
    text = raw_text.strip()
    match = _FENCE_PATTERN.match(text)
    if match and match.group(2):
        text = match.group(2).strip()
    return text


def parse_json_from_markdown(raw_text: str) -> Any:
    """
    Parse a JSON reply that may be wrapped in a markdown code fence.

    Raises:
        AIResponseError: If the (unfenced) text is not valid JSON.
    """
    json_str = strip_markdown_fence(raw_text or "")
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {e}")
        logger.error(f"Raw output (first 500 chars): {str(raw_text)[:500]}...")
        raise AIResponseError(
            f"Failed to parse AI's JSON response. Raw response: {raw_text}",
            details={"position": e.pos},
        ) from e


def parse_question_list(raw_text: str, limit: int) -> list[str]:
    """
    Parse the question-generation reply into at most `limit` question strings.

    Raises:
        AIResponseError: If the reply is not a JSON array of strings.
    """
    questions = parse_json_from_markdown(raw_text)
    if not isinstance(questions, list) or not all(isinstance(q, str) for q in questions):
        raise AIResponseError("AI did not return a valid array of question strings.")
    return questions[:limit]
