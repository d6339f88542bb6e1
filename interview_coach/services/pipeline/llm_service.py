import asyncio
import logging
import time
from typing import Callable, Optional, Sequence

from google import genai
from google.genai import types

from interview_coach.core.config import settings
from interview_coach.core.exceptions import (
    AIResponseError,
    AIServiceError,
    ConfigurationError,
    InvalidMediaError,
)
from interview_coach.core.llm import get_genai_client
from interview_coach.core.logger import log_async_execution_time
from interview_coach.core.prompts import (
    FEEDBACK_INSTRUCTIONS_PROMPT,
    feedback_entry_prompt,
    feedback_intro_prompt,
    generate_questions_prompt,
    no_video_prompt,
    video_guideline_prompt,
    video_unavailable_prompt,
)
from interview_coach.schemas.interview import InterviewEntry
from interview_coach.services.pipeline.llm_parser import parse_question_list
from interview_coach.services.pipeline.media_validator import MediaValidator
from interview_coach.services.pipeline.rate_limiter import ServiceRateLimiter, safe_api_call

logger = logging.getLogger(__name__)


class LLMService:
    """
    Service for the two Gemini interactions: question generation and session feedback.
    """

    def __init__(
        self,
        client_factory: Callable[[], genai.Client] = get_genai_client,
        media_validator: Optional[MediaValidator] = None,
        limiter: Optional[ServiceRateLimiter] = None,
        model: Optional[str] = None,
    ):
        self._client_factory = client_factory
        self.media_validator = media_validator or MediaValidator(logger=logger)
        self.limiter = limiter
        self.model = model or settings.GEMINI_MODEL

    async def _generate(self, contents, config: types.GenerateContentConfig, label: str) -> str:
        """Run one generate_content call through the rate limiter and return its text."""
        client = self._client_factory()

        async def _async_wrapper():
            return await asyncio.to_thread(
                client.models.generate_content,
                model=self.model,
                contents=contents,
                config=config,
            )

        logger.info(f"Gemini API call started for {label}")
        start_time = time.perf_counter()
        response = await safe_api_call(_async_wrapper, service='gemini', limiter=self.limiter)
        elapsed = time.perf_counter() - start_time
        logger.info(f"Gemini API call completed in {elapsed:.2f}s for {label}")

        response_text = response.text if response.text else ""
        if not response_text.strip():
            raise AIResponseError("AI returned an empty response.")
        logger.debug(f"[{label}] Response preview: {response_text[:200]}...")
        return response_text

    @log_async_execution_time
    async def generate_questions(self, job_description: str, num_questions: int) -> list[str]:
        """
        Ask Gemini for interview questions tailored to a job description.

        Args:
            job_description: The job description text.
            num_questions: Number of questions requested; extra questions are dropped.

        Returns:
            Ordered list of question strings.

        Raises:
            ConfigurationError: If the API key is missing.
            AIServiceError: On any API or parsing failure.
        """
        prompt = generate_questions_prompt(job_description, num_questions)
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            temperature=settings.QUESTION_TEMPERATURE,
        )
        try:
            response_text = await self._generate(prompt, config, "question generation")
            questions = parse_question_list(response_text, num_questions)
        except ConfigurationError:
            raise
        except AIResponseError as e:
            logger.error(f"Error generating questions with Gemini API: {e}")
            raise AIResponseError(f"Failed to generate questions: {e.message}", details=e.details) from e
        except Exception as e:
            logger.error(f"Error generating questions with Gemini API: {e}", exc_info=True)
            raise AIServiceError(f"Failed to generate questions: {e}") from e

        logger.info(f"Generated {len(questions)} question(s)")
        return questions

    def build_feedback_parts(self, job_description: str, entries: Sequence[InterviewEntry]) -> list[types.Part]:
        """
        Build the multi-part feedback request: intro, then per answer the transcript,
        the recorded video with its analysis guideline (or a note that there is none),
        then the scoring instructions.
        """
        parts = [types.Part.from_text(text=feedback_intro_prompt(job_description))]

        for number, entry in enumerate(entries, 1):
            parts.append(types.Part.from_text(text=feedback_entry_prompt(number, entry.question, entry.answer)))
            if not entry.video_data_url:
                parts.append(types.Part.from_text(text=no_video_prompt(number)))
                continue
            try:
                media = self.media_validator.parse(entry.video_data_url)
                parts.append(types.Part.from_bytes(data=media.data, mime_type=media.mime_type))
                parts.append(types.Part.from_text(text=video_guideline_prompt(number)))
            except InvalidMediaError as e:
                logger.warning(f"Could not process video for Q{number}: {e.message}")
                parts.append(types.Part.from_text(text=video_unavailable_prompt(number)))

        parts.append(types.Part.from_text(text=FEEDBACK_INSTRUCTIONS_PROMPT))
        return parts

    @log_async_execution_time
    async def generate_feedback(self, job_description: str, entries: Sequence[InterviewEntry]) -> str:
        """
        Ask Gemini to score and critique a completed interview.

        Returns:
            The raw markdown feedback, expected to start with the score section.

        Raises:
            ConfigurationError: If the API key is missing.
            AIServiceError: On any API failure or an empty reply.
        """
        parts = self.build_feedback_parts(job_description, entries)
        video_count = sum(1 for part in parts if part.inline_data is not None)
        logger.info(f"Requesting feedback for {len(entries)} answer(s) with {video_count} video(s)")

        config = types.GenerateContentConfig(temperature=settings.FEEDBACK_TEMPERATURE)
        try:
            return await self._generate(
                types.Content(role="user", parts=parts),
                config,
                "feedback generation",
            )
        except ConfigurationError:
            raise
        except AIResponseError as e:
            logger.error(f"Error generating feedback with Gemini API: {e}")
            raise AIResponseError(f"Failed to generate feedback: {e.message}") from e
        except Exception as e:
            logger.error(f"Error generating feedback with Gemini API: {e}", exc_info=True)
            raise AIServiceError(f"Failed to generate feedback: {e}") from e
