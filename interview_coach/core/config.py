from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from dotenv import load_dotenv



# Path to the .env file
CONFIG_DIR = Path(__file__).resolve().parent
# .env lives in the project root (two levels up from interview_coach/core)
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

# Load environment variables from .env file
load_dotenv(ENV_FILE_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore',
        populate_by_name=True,
    )


    DEBUG_MODE: bool = False


    # Accept the bare API_KEY name as well as GEMINI_API_KEY
    GEMINI_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Sampling temperatures
    QUESTION_TEMPERATURE: float = 0.7
    FEEDBACK_TEMPERATURE: float = 0.5  # Lower to keep the critique grounded in the transcript

    # Service Specific Limits (Requests Per Minute)
    GEMINI_RPM: int = 15

    # Retry Configuration
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY: float = 1.0
    RETRY_MAX_DELAY: float = 60.0

    # Gemini API request timeout (seconds); video analysis can be slow
    GEMINI_REQUEST_TIMEOUT: int = 120

    # Recorded answer limits
    MAX_VIDEO_SIZE_MB: int = 50

    # In-memory session registry capacity
    MAX_SESSIONS: int = 100

    @property
    def api_key_configured(self) -> bool:
        return bool(self.GEMINI_API_KEY.strip())


# Initialize settings
settings = Settings()
