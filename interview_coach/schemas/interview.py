from enum import Enum
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from interview_coach.core.constants import DEFAULT_NUM_QUESTIONS, NUM_QUESTIONS_OPTIONS

# --- Interview State Models ---

class AppPhase(str, Enum):
    """The mutually exclusive phases an interview session moves through."""
    JOB_INPUT = "JOB_INPUT"
    GENERATING_QUESTIONS = "GENERATING_QUESTIONS"
    INTERVIEWING = "INTERVIEWING"
    GENERATING_FEEDBACK = "GENERATING_FEEDBACK"
    FEEDBACK_READY = "FEEDBACK_READY"
    ERROR = "ERROR"


class InterviewEntry(BaseModel):
    """A single captured question/answer/media record for one interview turn."""
    question: str
    answer: str
    video_data_url: Optional[str] = Field(
        default=None,
        description="Base64 data URL of the recorded answer video (data:<mime>;base64,<payload>).",
    )


class InlineMedia(BaseModel):
    """Decoded parts of a data URL, ready to be sent as inline data."""
    mime_type: str
    data: bytes = Field(..., description="Decoded media bytes.")


# --- Feedback Models ---

class ScoreTier(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Score(BaseModel):
    """A value out of a maximum, e.g. 82/100."""
    GOOD_THRESHOLD: ClassVar[float] = 70.0
    FAIR_THRESHOLD: ClassVar[float] = 50.0

    value: int
    max: int

    @computed_field
    @property
    def percentage(self) -> float:
        return self.value * 100 / self.max if self.max > 0 else 0.0

    @computed_field
    @property
    def tier(self) -> ScoreTier:
        if self.percentage >= self.GOOD_THRESHOLD:
            return ScoreTier.GOOD
        if self.percentage >= self.FAIR_THRESHOLD:
            return ScoreTier.FAIR
        return ScoreTier.POOR


class SubScore(Score):
    """A per-category score from the score breakdown (bands are wider than the overall score)."""
    FAIR_THRESHOLD: ClassVar[float] = 40.0

    category: str


class ParsedFeedback(BaseModel):
    """Feedback text decomposed into scores and the residual markdown."""
    overall_score: Optional[Score] = None
    sub_scores: list[SubScore] = Field(default_factory=list)
    remaining_feedback: str = ""


class FeedbackLine(BaseModel):
    kind: Literal["h1", "h2", "h3", "item", "rule", "paragraph"]
    text: str = ""


class FeedbackBlock(BaseModel):
    """One blank-line separated block of the feedback markdown."""
    kind: Literal["highlight", "list", "section"]
    heading: Optional[str] = None
    lines: list[FeedbackLine] = Field(default_factory=list)


class FeedbackView(ParsedFeedback):
    """API response for the feedback screen."""
    blocks: list[FeedbackBlock] = Field(default_factory=list)


# --- Frontend/API State Models ---

class StartInterviewRequest(BaseModel):
    job_description: str = Field(..., description="The job description to tailor the questions to.")
    num_questions: int = Field(default=DEFAULT_NUM_QUESTIONS, description="How many questions to generate.")

    @field_validator("job_description")
    @classmethod
    def job_description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Job description must not be empty.")
        return value.strip()

    @field_validator("num_questions")
    @classmethod
    def num_questions_is_option(cls, value: int) -> int:
        if value not in NUM_QUESTIONS_OPTIONS:
            raise ValueError(f"num_questions must be one of {NUM_QUESTIONS_OPTIONS}")
        return value


class AnswerSubmission(BaseModel):
    answer: str = Field(default="", description="Transcribed spoken answer.")
    video_data_url: Optional[str] = None


class EntrySummary(BaseModel):
    """An answered turn without the (large) media payload."""
    question: str
    answer: str
    has_video: bool = False


class SessionState(BaseModel):
    """
    Schema for the API response/Frontend state.
    Everything the browser needs to render the screen for the current phase.
    """
    session_id: str
    phase: AppPhase
    job_description: str = ""
    selected_num_questions: int
    total_questions: int = 0
    question_number: Optional[int] = None
    current_question: Optional[str] = None
    is_last_question: bool = False
    entries: list[EntrySummary] = Field(default_factory=list)
    loading_message: Optional[str] = None
    error: Optional[str] = Field(default=None, description="Error message shown on the error screen.")


class AppConfig(BaseModel):
    title: str
    num_questions_options: list[int]
    default_num_questions: int
    placeholder_job_description: str
    api_key_configured: bool
