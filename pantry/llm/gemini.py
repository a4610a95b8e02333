"""Gemini API text-generation backend."""

from __future__ import annotations

import logging

from ..errors import GenerationError, QuotaExceededError
from . import TextGenerator

logger = logging.getLogger(__name__)


class GeminiGenerator(TextGenerator):
    """Generate text with Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def generate(self, prompt: str, system: str = "") -> str:
        if not self._api_key:
            raise GenerationError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions
        except ImportError as e:
            raise GenerationError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from e

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system or None)

        try:
            response = await model.generate_content_async(prompt)
        except google_exceptions.ResourceExhausted as e:
            raise QuotaExceededError(f"Gemini quota exhausted: {e}") from e
        except google_exceptions.GoogleAPIError as e:
            raise GenerationError(f"Gemini request failed: {e}") from e

        try:
            text = response.text
        except ValueError as e:
            # Blocked or empty candidates
            raise GenerationError(f"Gemini returned no text: {e}") from e
        logger.debug("Gemini reply: %d chars", len(text))
        return text
