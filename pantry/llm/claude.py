"""Claude API text-generation backend."""

from __future__ import annotations

import logging

from ..errors import GenerationError, QuotaExceededError
from . import TextGenerator

logger = logging.getLogger(__name__)


class ClaudeGenerator(TextGenerator):
    """Generate text with the Anthropic Messages API."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    async def generate(self, prompt: str, system: str = "") -> str:
        if not self._api_key:
            raise GenerationError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError as e:
            raise GenerationError("anthropic SDK is required: pip install anthropic") from e

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        kwargs: dict = {
            "model": self._model,
            "max_tokens": 4096,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            kwargs["system"] = system

        try:
            response = await client.messages.create(**kwargs)
        except anthropic.RateLimitError as e:
            raise QuotaExceededError(f"Claude rate limit: {e}") from e
        except anthropic.APIError as e:
            raise GenerationError(f"Claude request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        logger.debug("Claude reply: %d chars", len(text))
        return text
