from datetime import datetime
from typing import Optional, Sequence
import logging

from interview_coach.schemas.interview import InterviewEntry, ParsedFeedback

logger = logging.getLogger(__name__)

SEPARATOR = "=================================================="


class ReportGenerator:
    """
    Service responsible for generating a downloadable report of an interview session.
    Handles only formatting logic.
    """

    @staticmethod
    def generate_txt_report(
        job_description: str,
        entries: Sequence[InterviewEntry],
        feedback: ParsedFeedback,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """
        Generate a human-readable text report of an interview session.

        Args:
            job_description: The job description the interview was based on.
            entries: Answered questions in order.
            feedback: Parsed feedback (scores and remaining markdown).
            generated_at: Timestamp for the header (defaults to now).

        Returns:
            Formatted string content of the report.
        """
        generated_at = generated_at or datetime.now()
        lines = []
        lines.append("AI INTERVIEW COACH - SESSION REPORT")
        lines.append(SEPARATOR)
        lines.append(f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append(SEPARATOR)
        lines.append("")
        lines.append("JOB DESCRIPTION")
        lines.append("---------------")
        lines.append(job_description)
        lines.append("")
        lines.append(SEPARATOR)
        lines.append("")

        lines.append("SCORES")
        lines.append("------")
        if feedback.overall_score:
            lines.append(f"Overall: {feedback.overall_score.value}/{feedback.overall_score.max}")
        else:
            lines.append("Overall: not available")
        for sub_score in feedback.sub_scores:
            lines.append(f"  - {sub_score.category}: {sub_score.value}/{sub_score.max}")
        lines.append("")
        lines.append(SEPARATOR)
        lines.append("")

        lines.append("TRANSCRIPT")
        lines.append("----------")
        for idx, entry in enumerate(entries, 1):
            lines.append(f"Q{idx}. {entry.question}")
            lines.append(f"A{idx}. {entry.answer or '(no answer recorded)'}")
            if entry.video_data_url:
                lines.append("     [video recorded]")
            lines.append("")
        lines.append(SEPARATOR)
        lines.append("")

        lines.append("FEEDBACK")
        lines.append("--------")
        lines.append(feedback.remaining_feedback)

        logger.info(f"Generated report for {len(entries)} answer(s)")
        return "\n".join(lines)
