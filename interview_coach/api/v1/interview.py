import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response

from interview_coach.api.deps import get_session_store
from interview_coach.core.config import settings
from interview_coach.core.constants import (
    APP_TITLE,
    DEFAULT_NUM_QUESTIONS,
    NUM_QUESTIONS_OPTIONS,
    PLACEHOLDER_JOB_DESCRIPTION,
)
from interview_coach.core.exceptions import PhaseTransitionError
from interview_coach.core.logger import set_correlation_id
from interview_coach.schemas.interview import (
    AnswerSubmission,
    AppConfig,
    AppPhase,
    FeedbackView,
    SessionState,
    StartInterviewRequest,
)
from interview_coach.services.feedback.renderer import render_feedback
from interview_coach.services.feedback.report_generator import ReportGenerator
from interview_coach.services.feedback.score_parser import parse_scores
from interview_coach.services.session.interview_session import InterviewSession
from interview_coach.services.session.session_store import SessionStore

logger = logging.getLogger(__name__)

interview_router = APIRouter()


def _get_session(session_id: str, store: SessionStore) -> InterviewSession:
    session = store.get(session_id)
    set_correlation_id(session.session_id)
    return session


def _require_feedback(session: InterviewSession) -> None:
    if session.phase != AppPhase.FEEDBACK_READY:
        raise PhaseTransitionError(
            f"Feedback is not ready (phase {session.phase.value})",
            details={"phase": session.phase.value},
        )


@interview_router.get("/config", response_model=AppConfig)
async def get_config():
    """Static settings the job-description screen needs."""
    return AppConfig(
        title=APP_TITLE,
        num_questions_options=NUM_QUESTIONS_OPTIONS,
        default_num_questions=DEFAULT_NUM_QUESTIONS,
        placeholder_job_description=PLACEHOLDER_JOB_DESCRIPTION,
        api_key_configured=settings.api_key_configured,
    )


@interview_router.post("/sessions", response_model=SessionState, status_code=201)
async def create_session(store: SessionStore = Depends(get_session_store)):
    session = store.create()
    set_correlation_id(session.session_id)
    return session.snapshot()


@interview_router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _get_session(session_id, store).snapshot()


@interview_router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)
    return Response(status_code=204)


@interview_router.post("/sessions/{session_id}/start", response_model=SessionState)
async def start_interview(
    session_id: str,
    request: StartInterviewRequest,
    store: SessionStore = Depends(get_session_store),
):
    """
    Generates the interview questions for a job description.
    Returns the session in INTERVIEWING on success, or ERROR with the reason.
    """
    session = _get_session(session_id, store)
    logger.info(f"Starting interview with {request.num_questions} question(s)")
    await session.start_interview(request.job_description, request.num_questions)
    return session.snapshot()


@interview_router.post("/sessions/{session_id}/answers", response_model=SessionState)
async def submit_answer(
    session_id: str,
    submission: AnswerSubmission,
    store: SessionStore = Depends(get_session_store),
):
    """
    Records the answer to the current question.
    The last answer triggers feedback generation before the response is returned.
    """
    session = _get_session(session_id, store)
    await session.submit_answer(submission.answer, submission.video_data_url)
    return session.snapshot()


@interview_router.post("/sessions/{session_id}/reset", response_model=SessionState)
async def reset_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = _get_session(session_id, store)
    session.reset()
    return session.snapshot()


@interview_router.get("/sessions/{session_id}/feedback", response_model=FeedbackView)
async def get_feedback(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Scores and display blocks parsed out of the AI feedback."""
    session = _get_session(session_id, store)
    _require_feedback(session)

    parsed = parse_scores(session.feedback)
    return FeedbackView(
        overall_score=parsed.overall_score,
        sub_scores=parsed.sub_scores,
        remaining_feedback=parsed.remaining_feedback,
        blocks=render_feedback(parsed.remaining_feedback),
    )


@interview_router.get("/sessions/{session_id}/report")
async def download_report(session_id: str, store: SessionStore = Depends(get_session_store)):
    """
    Download the transcript and feedback as a TXT file.
    """
    session = _get_session(session_id, store)
    _require_feedback(session)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    download_filename = f"interview_{timestamp}_feedback.txt"

    text_content = ReportGenerator.generate_txt_report(
        session.job_description,
        session.entries,
        parse_scores(session.feedback),
    )
    logger.info(f"Generating download text file: {download_filename}")

    return Response(
        content=text_content,
        media_type="text/plain",
        headers={
            "Content-Disposition": f'attachment; filename="{download_filename}"'
        }
    )
