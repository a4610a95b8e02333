"""Receipt image transcription with Claude's vision capability."""

from __future__ import annotations

import base64
import mimetypes

from ..errors import ExtractionError, QuotaExceededError
from . import ImageReader

_PROMPT = """\
This image is a shopping receipt. Transcribe every line of text exactly as \
printed, one receipt line per output line, keeping item names, quantities \
and prices together. Output only the transcription.
"""


class ClaudeReceiptReader(ImageReader):
    """Transcribe receipt photos using the Anthropic Messages API."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def read_image(self, data: bytes, filename: str) -> str:
        if not self._api_key:
            raise ExtractionError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError as e:
            raise ExtractionError("anthropic SDK is required: pip install anthropic") from e

        media_type = mimetypes.guess_type(filename)[0] or "image/jpeg"
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.standard_b64encode(data).decode(),
                },
            },
            {"type": "text", "text": _PROMPT},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=4096,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.RateLimitError as e:
            raise QuotaExceededError(f"Claude rate limit: {e}") from e
        except anthropic.APIError as e:
            raise ExtractionError(f"{filename}: Claude could not read the image: {e}") from e

        return "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
