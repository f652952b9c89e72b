"""Wrapper for Google Gemini API interactions.

Gemini writes an alternative, free-form version of the marks summary. Its
output is model-generated, so callers should treat it as best effort and keep
core.summary.format_summary as the reference rendering.
"""

import json
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

import google.generativeai as genai
from google.api_core import exceptions as google_api_exceptions

import config
from core.summary import format_date, rank_students
from utils.logger import get_logger
from utils.error_handler import ConfigError, SummaryGenerationError

logger = get_logger()

class GeminiClient:
    """Provides methods to interact with the Google Gemini API."""

    def __init__(self, api_key: Optional[str] = config.GEMINI_API_KEY, model_name: str = config.GEMINI_MODEL):
        """Initializes the GeminiClient.

        Args:
            api_key: The Gemini API key. Defaults to the value from config.
            model_name: The Gemini model to prompt.

        Raises:
            ConfigError: If the API key is not provided or the client cannot be configured.
        """
        logger.debug("Initializing GeminiClient...")
        if not api_key:
            logger.error("Gemini API Key is missing. Check config.py and environment variables.")
            raise ConfigError("GEMINI_API_KEY not found or provided.")
        try:
            genai.configure(api_key=api_key)
            self.model = genai.GenerativeModel(model_name)
        except Exception as e:
            logger.critical(f"Failed to configure Gemini API: {e}", exc_info=config.DEBUG)
            raise ConfigError(f"Failed to configure Gemini API: {e}") from e
        logger.info(f"GeminiClient initialized successfully with model: {model_name}")

    def build_summary_prompt(
        self,
        class_name: str,
        subject_name: str,
        students: Sequence[Mapping[str, Any]],
        as_of: datetime,
        prompt_template: str = config.GEMINI_SUMMARY_PROMPT_TEMPLATE,
    ) -> str:
        """Fills the summary prompt template.

        Raises:
            InvalidScore: If a student's score is missing or not a finite number.
        """
        # Validated here so the model never sees a null or NaN score
        rank_students(students)
        students_json = json.dumps(
            [{"name": student.get("name"), "marks": student.get("score")} for student in students],
            ensure_ascii=False,
        )
        return prompt_template.format(
            institution_name=config.INSTITUTION_NAME,
            date=format_date(as_of),
            class_name=class_name,
            subject_name=subject_name,
            students_json=students_json,
        )

    def generate_summary(
        self,
        class_name: str,
        subject_name: str,
        students: Sequence[Mapping[str, Any]],
        as_of: Optional[datetime] = None,
    ) -> str:
        """Asks Gemini to write the marks summary for a class and subject.

        Args:
            class_name: The class the cohort belongs to.
            subject_name: The subject the marks are for.
            students: {name, score} entries.
            as_of: Date printed in the summary; defaults to now.

        Returns:
            The generated message text.

        Raises:
            InvalidScore: If a score is missing or not a finite number.
            SummaryGenerationError: If the API fails, blocks the request, or returns nothing.
        """
        prompt = self.build_summary_prompt(class_name, subject_name, students, as_of or datetime.now())

        logger.info(f"Generating Gemini summary for {class_name!r} / {subject_name!r} ({len(students)} students)...")
        if config.DEBUG:
            logger.debug(f"Generated prompt (first 500 chars):\n{prompt[:500]}...")

        try:
            response = self.model.generate_content(prompt)
        except google_api_exceptions.GoogleAPIError as e:
            logger.error(f"Gemini API error during summary generation: {e}", exc_info=config.DEBUG)
            if isinstance(e, google_api_exceptions.PermissionDenied):
                raise SummaryGenerationError("Permission denied calling Gemini API (403). Check API key/permissions.") from e
            if isinstance(e, google_api_exceptions.ResourceExhausted):
                raise SummaryGenerationError("Gemini API rate limit exceeded (429). Please try again later.") from e
            if isinstance(e, google_api_exceptions.InvalidArgument):
                raise SummaryGenerationError(f"Invalid request sent to Gemini API (400): {e}") from e
            raise SummaryGenerationError(f"Gemini API error: {e}") from e

        if not response.candidates:
            logger.error(f"Gemini response missing candidates. Prompt feedback: {getattr(response, 'prompt_feedback', None)}")
            raise SummaryGenerationError("Summary generation failed: response was empty or blocked.")

        candidate = response.candidates[0]
        parts = candidate.content.parts if candidate.content else None
        text = "".join(part.text for part in parts) if parts else ""
        if not text.strip():
            if candidate.finish_reason == genai.types.FinishReason.SAFETY:
                logger.error(f"Summary generation stopped due to safety. Ratings: {candidate.safety_ratings}")
                raise SummaryGenerationError("Summary generation blocked due to safety settings.")
            logger.warning(f"Gemini returned an empty summary. Finish reason: {candidate.finish_reason}")
            raise SummaryGenerationError("Gemini returned an empty summary.")

        logger.info(f"Successfully generated Gemini summary ({len(text)} chars).")
        return _strip_code_fence(text.strip())

def _strip_code_fence(text: str) -> str:
    """Removes a surrounding ``` fence, which models often add around plain text."""
    lines = text.splitlines()
    if len(lines) >= 2 and lines[0].startswith("```") and lines[-1].strip() == "```":
        return "\n".join(lines[1:-1])
    return text
