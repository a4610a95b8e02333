"""Text extraction: turn a RawInput into plain text for the item parser."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..errors import ExtractionError

if TYPE_CHECKING:
    from ..config import PantryConfig
    from ..models import RawInput


class TextExtractor(ABC):
    """Abstract base for OCR / transcription collaborators."""

    @abstractmethod
    async def extract(self, raw: RawInput) -> str:
        """Return the text carried by ``raw``.

        Raises:
            ExtractionError: The input is unreadable.
            QuotaExceededError: A remote reader reports the allowance is used up.
        """
        ...


class PassthroughExtractor(TextExtractor):
    """Use text that is already present on the input (OCR done elsewhere)."""

    async def extract(self, raw: RawInput) -> str:
        if raw.media_path is not None and not raw.text:
            raise ExtractionError(
                f"{raw.media_path}: no image reader configured for media input"
            )
        return raw.text


class ImageReader(TextExtractor):
    """Base for readers that transcribe ``raw.media_path`` images."""

    async def extract(self, raw: RawInput) -> str:
        if raw.media_path is None:
            return raw.text
        if not raw.media_path.is_file():
            raise ExtractionError(f"{raw.media_path}: file not found")
        text = (await self.read_image(raw.media_path.read_bytes(), str(raw.media_path))).strip()
        if not text:
            raise ExtractionError(f"{raw.media_path}: no text recognized")
        return text

    @abstractmethod
    async def read_image(self, data: bytes, filename: str) -> str:
        ...


def create_extractor(config: PantryConfig) -> TextExtractor:
    """Create a text extractor based on configuration."""
    backend_name = config.ocr.backend

    match backend_name:
        case "none":
            return PassthroughExtractor()
        case "claude":
            from .claude import ClaudeReceiptReader

            return ClaudeReceiptReader(
                api_key=config.ai.claude.api_key,
                model=config.ai.claude.model,
            )
        case "gemini":
            from .gemini import GeminiReceiptReader

            return GeminiReceiptReader(
                api_key=config.ai.gemini.api_key,
                model=config.ai.gemini.model,
            )
        case _:
            raise ValueError(
                f"Unknown OCR backend: {backend_name!r} "
                f"(choose none / claude / gemini)"
            )
