"""AI text-generation backend base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import PantryConfig


class TextGenerator(ABC):
    """Abstract base for a chat-style text generation service."""

    @abstractmethod
    async def generate(self, prompt: str, system: str = "") -> str:
        """Return the model's reply to ``prompt``.

        Raises:
            QuotaExceededError: The provider reports the allowance is used up.
            GenerationError: Any other provider failure.
        """
        ...


def create_generator(config: PantryConfig) -> TextGenerator | None:
    """Create the configured generator, wrapped in the daily usage limiter.

    Returns None when AI parsing is disabled (backend "none").
    """
    backend_name = config.ai.backend

    generator: TextGenerator
    match backend_name:
        case "claude":
            from .claude import ClaudeGenerator

            generator = ClaudeGenerator(
                api_key=config.ai.claude.api_key,
                model=config.ai.claude.model,
            )
        case "gemini":
            from .gemini import GeminiGenerator

            generator = GeminiGenerator(
                api_key=config.ai.gemini.api_key,
                model=config.ai.gemini.model,
            )
        case "none":
            return None
        case _:
            raise ValueError(
                f"Unknown AI backend: {backend_name!r} "
                f"(choose claude / gemini / none)"
            )

    if config.ai.daily_limit > 0:
        from .usage import DailyUsageLimiter

        generator = DailyUsageLimiter(
            generator,
            limit=config.ai.daily_limit,
            db=config.database.path,
        )
    return generator
