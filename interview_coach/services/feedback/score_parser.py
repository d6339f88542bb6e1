import logging
import re

from interview_coach.schemas.interview import ParsedFeedback, Score, SubScore

logger = logging.getLogger(__name__)

# **Overall Score:** 82/100
OVERALL_SCORE_PATTERN = re.compile(r'\*\*Overall Score:\*\*\s*(\d+)/(\d+)')

# **Score Breakdown:** followed by one or more "- **Category:** 8/10" lines
SCORE_BREAKDOWN_PATTERN = re.compile(
    r'\*\*Score Breakdown:\*\*(?:\r\n|\r|\n)((?:-\s*\*\*(.*?):\*\*\s*(\d+)/(\d+)(?:\r\n|\r|\n?))+)'
)

SUB_SCORE_LINE_PATTERN = re.compile(r'-\s*\*\*(.*?):\*\*\s*(\d+)/(\d+)')

_BLANK_LINE_PATTERN = re.compile(r'^\s*[\r\n]', re.MULTILINE)


def _to_int(digits: str):
    """int() of a captured digit run, or None when it is too long to convert."""
    try:
        return int(digits)
    except ValueError:
        logger.warning(f"Ignoring unparseable score number ({len(digits)} digits)")
        return None


def parse_scores(feedback_text: str) -> ParsedFeedback:
    """
    Extract the overall score and the category breakdown from the AI feedback.

    Both score sections are removed from the returned markdown, and so are blank
    lines. A section that is missing is simply absent from the result.
    """
    overall_score = None
    sub_scores: list[SubScore] = []
    remaining_feedback = feedback_text

    overall_match = OVERALL_SCORE_PATTERN.search(feedback_text)
    if overall_match:
        value, max_value = _to_int(overall_match.group(1)), _to_int(overall_match.group(2))
        if value is not None and max_value is not None:
            overall_score = Score(value=value, max=max_value)
        remaining_feedback = OVERALL_SCORE_PATTERN.sub('', remaining_feedback, count=1).strip()

    breakdown_match = SCORE_BREAKDOWN_PATTERN.search(remaining_feedback)
    if breakdown_match:
        sub_score_block = breakdown_match.group(1)
        remaining_feedback = SCORE_BREAKDOWN_PATTERN.sub('', remaining_feedback, count=1).strip()

        for match in SUB_SCORE_LINE_PATTERN.finditer(sub_score_block):
            value, max_value = _to_int(match.group(2)), _to_int(match.group(3))
            if value is None or max_value is None:
                continue
            sub_scores.append(SubScore(
                category=match.group(1).strip(),
                value=value,
                max=max_value,
            ))

    if overall_score is None:
        logger.warning("No overall score found in feedback")

    remaining_feedback = _BLANK_LINE_PATTERN.sub('', remaining_feedback)

    return ParsedFeedback(
        overall_score=overall_score,
        sub_scores=sub_scores,
        remaining_feedback=remaining_feedback,
    )
