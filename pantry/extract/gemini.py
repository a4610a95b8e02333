"""Receipt image transcription with Gemini."""

from __future__ import annotations

import mimetypes

from ..errors import ExtractionError, QuotaExceededError
from . import ImageReader

_PROMPT = """\
This image is a shopping receipt. Transcribe every line of text exactly as \
printed, one receipt line per output line, keeping item names, quantities \
and prices together. Output only the transcription.
"""


class GeminiReceiptReader(ImageReader):
    """Transcribe receipt photos using Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def read_image(self, data: bytes, filename: str) -> str:
        if not self._api_key:
            raise ExtractionError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions
        except ImportError as e:
            raise ExtractionError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from e

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)
        mime_type = mimetypes.guess_type(filename)[0] or "image/jpeg"

        try:
            response = await model.generate_content_async(
                [{"mime_type": mime_type, "data": data}, _PROMPT]
            )
            return response.text
        except google_exceptions.ResourceExhausted as e:
            raise QuotaExceededError(f"Gemini quota exhausted: {e}") from e
        except (google_exceptions.GoogleAPIError, ValueError) as e:
            raise ExtractionError(f"{filename}: Gemini could not read the image: {e}") from e
