"""Daily allowance for AI calls."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable

from ..db import DEFAULT_DB_PATH, Database, UsageDB
from ..errors import QuotaExceededError
from . import TextGenerator

logger = logging.getLogger(__name__)


class DailyUsageLimiter(TextGenerator):
    """Wrap a generator and refuse calls once ``limit`` is reached for the day.

    Only successful calls are counted.  The counter lives in the ai_usage
    table so it survives restarts.
    """

    def __init__(
        self,
        inner: TextGenerator,
        limit: int = 10,
        db: Database | str | Path = DEFAULT_DB_PATH,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._inner = inner
        self._limit = limit
        self._usage = UsageDB(db)
        self._today = today

    @property
    def remaining(self) -> int:
        return max(self._limit - self._usage.get_count(self._today()), 0)

    async def generate(self, prompt: str, system: str = "") -> str:
        day = self._today()
        used = self._usage.get_count(day)
        if used >= self._limit:
            raise QuotaExceededError(
                f"daily AI limit reached ({used}/{self._limit})"
            )

        reply = await self._inner.generate(prompt, system)
        count = self._usage.increment(day)
        logger.info("AI usage today: %d/%d", count, self._limit)
        return reply

    def close(self) -> None:
        self._usage.close()
