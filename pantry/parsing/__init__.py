"""Structured item extraction: AI first, deterministic fallback second."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import GenerationError, MalformedResponseError, QuotaExceededError
from ..models import ParsedItem, ParseMethod, ParseResult, SourceKind
from .heuristic import HeuristicParser, is_noise_line
from .markup import build_prompt, parse_markup, prompt_language

if TYPE_CHECKING:
    from ..llm import TextGenerator

logger = logging.getLogger(__name__)


class StructuredItemParser:
    """Turn raw text into :class:`ParsedItem` lists.

    The AI generator is tried first.  ``QuotaExceededError`` from it is
    propagated untouched; any other generation failure or a reply that breaks
    the markup contract falls back to :class:`HeuristicParser`.  Without a
    generator the heuristic parser is used directly.
    """

    def __init__(
        self,
        generator: TextGenerator | None = None,
        heuristic: HeuristicParser | None = None,
    ) -> None:
        self._generator = generator
        self._heuristic = heuristic or HeuristicParser()

    async def parse(
        self,
        raw_text: str,
        locale_hint: str | None = None,
        source: SourceKind = SourceKind.SCAN,
    ) -> ParseResult:
        if not raw_text or not raw_text.strip():
            return ParseResult(items=[], method=ParseMethod.HEURISTIC)

        if self._generator is not None:
            system, prompt = build_prompt(raw_text, locale_hint, source)
            try:
                reply = await self._generator.generate(prompt, system)
                items = parse_markup(reply)
            except QuotaExceededError:
                raise
            except (GenerationError, MalformedResponseError) as e:
                logger.warning("AI parsing failed, using heuristic parser: %s", e)
            except Exception:
                logger.exception("Unexpected AI failure, using heuristic parser")
            else:
                logger.info("AI parsed %d item(s)", len(items))
                return ParseResult(items=items, method=ParseMethod.AI)

        items = self._heuristic.parse(raw_text, source)
        logger.info("Heuristic parser found %d item(s)", len(items))
        return ParseResult(items=items, method=ParseMethod.HEURISTIC)


__all__ = [
    "HeuristicParser",
    "ParsedItem",
    "StructuredItemParser",
    "build_prompt",
    "is_noise_line",
    "parse_markup",
    "prompt_language",
]
