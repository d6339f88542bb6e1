"""
Interview session state machine.

Phases run in a straight line:
input -> generating questions -> interviewing -> generating feedback -> feedback ready.
Any failure moves the session to the error phase; `reset` returns to input from anywhere.
"""
from __future__ import annotations
import logging
import uuid
from typing import Iterable, Optional

from interview_coach.core.constants import DEFAULT_NUM_QUESTIONS
from interview_coach.core.exceptions import PhaseTransitionError
from interview_coach.core.logger import set_correlation_id
from interview_coach.schemas.interview import (
    AppPhase,
    EntrySummary,
    InterviewEntry,
    SessionState,
)
from interview_coach.services.pipeline.llm_service import LLMService

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = (
    "API_KEY environment variable is not set. "
    "This application requires a valid Gemini API key to function."
)
QUESTIONS_FAILED_MESSAGE = "Failed to generate interview questions. Please check your API key and try again."
FEEDBACK_FAILED_MESSAGE = "Failed to generate feedback. Please try again."
INTERVIEW_STATE_MESSAGE = "An issue occurred during the interview phase. Please restart."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class InterviewSession:
    """
    One user's interview, from job description to scored feedback.

    Holds the job description, the generated questions, the answered entries
    and the raw feedback text. Question and feedback generation are delegated
    to LLMService; their failures are absorbed into the ERROR phase.
    """

    def __init__(self, llm_service: LLMService, session_id: str = None, api_key_configured: bool = True):
        self.llm_service = llm_service
        self.session_id = session_id or str(uuid.uuid4())
        self.api_key_configured = api_key_configured
        # Bumped by reset; AI results from an older generation are dropped
        self._generation = 0
        self._set_initial_state()

        if not api_key_configured:
            self.fail(MISSING_API_KEY_MESSAGE)

    def _set_initial_state(self) -> None:
        self.phase = AppPhase.JOB_INPUT
        self.job_description = ""
        self.questions: list[str] = []
        self.current_question_index = 0
        self.entries: list[InterviewEntry] = []
        self.feedback = ""
        self.error: Optional[str] = None
        self.selected_num_questions = DEFAULT_NUM_QUESTIONS

    def _require_phase(self, operation: str, allowed: Iterable[AppPhase]) -> None:
        allowed = tuple(allowed)
        if self.phase not in allowed:
            raise PhaseTransitionError(
                f"Cannot {operation} while in phase {self.phase.value}",
                details={"phase": self.phase.value, "allowed": [p.value for p in allowed]},
            )

    def _transition(self, phase: AppPhase) -> None:
        logger.info(f"Phase {self.phase.value} -> {phase.value}")
        self.phase = phase

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.info(f"Session {self.session_id} was reset; dropping result of an earlier request")
            return True
        return False

    # --- Transitions ---

    def fail(self, message: Optional[str]) -> None:
        """Move to the error phase; reachable from every phase."""
        self.error = message or UNKNOWN_ERROR_MESSAGE
        logger.error(f"Session {self.session_id} failed: {self.error}")
        self._transition(AppPhase.ERROR)

    def reset(self) -> None:
        """Manual edge back to the job-description screen; clears everything."""
        set_correlation_id(self.session_id)
        self._generation += 1
        self._set_initial_state()
        logger.info(f"Session {self.session_id} reset")
        if not self.api_key_configured:
            self.fail(MISSING_API_KEY_MESSAGE)

    async def start_interview(self, job_description: str, num_questions: int) -> None:
        """
        Generate questions for the job description and begin interviewing.

        Raises:
            PhaseTransitionError: If called outside the input phase.
        """
        self._require_phase("start an interview", [AppPhase.JOB_INPUT])
        set_correlation_id(self.session_id)

        self.job_description = job_description
        self.selected_num_questions = num_questions
        self.error = None
        self._transition(AppPhase.GENERATING_QUESTIONS)

        generation = self._generation
        try:
            questions = await self.llm_service.generate_questions(job_description, num_questions)
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.error(f"Error generating questions: {e}", exc_info=True)
            self.fail(str(e) or QUESTIONS_FAILED_MESSAGE)
            return

        if self._is_stale(generation):
            return

        if not questions:
            self.fail(INTERVIEW_STATE_MESSAGE)
            return

        self.questions = list(questions)
        self.entries = []
        self.current_question_index = 0
        self._transition(AppPhase.INTERVIEWING)

    async def submit_answer(self, answer: str, video_data_url: Optional[str] = None) -> None:
        """
        Record the answer to the current question. After the last question the
        whole session is sent off for feedback.

        Raises:
            PhaseTransitionError: If called outside the interviewing phase.
        """
        self._require_phase("submit an answer", [AppPhase.INTERVIEWING])
        set_correlation_id(self.session_id)

        if not self.questions or self.current_question_index >= len(self.questions):
            self.fail(INTERVIEW_STATE_MESSAGE)
            return

        self.entries.append(InterviewEntry(
            question=self.questions[self.current_question_index],
            answer=(answer or "").strip(),
            video_data_url=video_data_url or None,
        ))
        logger.info(
            f"Answer {len(self.entries)}/{len(self.questions)} recorded "
            f"({'with' if video_data_url else 'without'} video)"
        )

        if self.current_question_index < len(self.questions) - 1:
            self.current_question_index += 1
            return

        self.error = None
        self._transition(AppPhase.GENERATING_FEEDBACK)
        generation = self._generation
        try:
            feedback = await self.llm_service.generate_feedback(self.job_description, list(self.entries))
        except Exception as e:
            if self._is_stale(generation):
                return
            logger.error(f"Error generating feedback: {e}", exc_info=True)
            self.fail(str(e) or FEEDBACK_FAILED_MESSAGE)
            return

        if self._is_stale(generation):
            return

        self.feedback = feedback
        self._transition(AppPhase.FEEDBACK_READY)

    # --- Views ---

    @property
    def current_question(self) -> Optional[str]:
        if self.phase != AppPhase.INTERVIEWING or self.current_question_index >= len(self.questions):
            return None
        return self.questions[self.current_question_index]

    @property
    def question_number(self) -> Optional[int]:
        return self.current_question_index + 1 if self.current_question is not None else None

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def is_last_question(self) -> bool:
        return self.question_number is not None and self.question_number == self.total_questions

    @property
    def loading_message(self) -> Optional[str]:
        if self.phase == AppPhase.GENERATING_QUESTIONS:
            return f"Generating {self.selected_num_questions} interview questions..."
        if self.phase == AppPhase.GENERATING_FEEDBACK:
            return "Analyzing your answers and video, then generating feedback..."
        return None

    def snapshot(self) -> SessionState:
        return SessionState(
            session_id=self.session_id,
            phase=self.phase,
            job_description=self.job_description,
            selected_num_questions=self.selected_num_questions,
            total_questions=self.total_questions,
            question_number=self.question_number,
            current_question=self.current_question,
            is_last_question=self.is_last_question,
            entries=[
                EntrySummary(question=e.question, answer=e.answer, has_video=bool(e.video_data_url))
                for e in self.entries
            ],
            loading_message=self.loading_message,
            error=self.error if self.phase == AppPhase.ERROR else None,
        )
