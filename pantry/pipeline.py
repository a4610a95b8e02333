"""Sequential batch ingestion: extract → parse → normalize → merge."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date
from typing import TYPE_CHECKING

from .categories import classify
from .errors import ExtractionError, PantryError, PersistenceError, QuotaExceededError
from .models import (
    BatchResult,
    BatchStatus,
    NormalizedItem,
    ParsedItem,
    ParseMethod,
    RawInput,
)
from .units import normalize

if TYPE_CHECKING:
    from .db import ShoppingListDB
    from .extract import TextExtractor
    from .merge import InventoryMergeEngine
    from .parsing import StructuredItemParser

logger = logging.getLogger(__name__)


def normalize_item(item: ParsedItem) -> NormalizedItem:
    """Classify a parsed item and convert its quantity to canonical units."""
    category = classify(item.name, item.category_hint)
    quantity = normalize(item.quantity_text, category)
    return NormalizedItem(
        name=item.name,
        quantity=quantity.value,
        unit=quantity.unit,
        category=category,
    )


class BatchOrchestrator:
    """Run a list of raw inputs through the pipeline, one at a time.

    Per-input failures are counted and skipped.  ``QuotaExceededError`` ends
    the batch; items already merged stay in the inventory.  Cancelling the
    task running :meth:`run` stops before the next input in the same way.
    """

    def __init__(
        self,
        extractor: TextExtractor,
        parser: StructuredItemParser,
        merge_engine: InventoryMergeEngine,
        shopping: ShoppingListDB | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._extractor = extractor
        self._parser = parser
        self._merge = merge_engine
        self._shopping = shopping
        self._today = today

    async def run(
        self,
        inputs: Sequence[RawInput],
        purchase_date: date | None = None,
    ) -> BatchResult:
        result = BatchResult(total_inputs=len(inputs))
        purchased = purchase_date or self._today()

        for index, raw in enumerate(inputs, 1):
            label = raw.label or f"input {index}"
            result.attempted_inputs += 1
            logger.info("Processing %s (%d/%d)", label, index, len(inputs))

            try:
                text = await self._extractor.extract(raw)
                parsed = await self._parser.parse(text, raw.locale, raw.source)
            except QuotaExceededError as e:
                logger.warning("Stopping batch at %s: %s", label, e)
                result.status = BatchStatus.STOPPED_BY_QUOTA
                break
            except ExtractionError as e:
                logger.warning("Could not read %s: %s", label, e)
                result.failure_count += 1
                continue
            except PantryError as e:
                logger.warning("Could not parse %s: %s", label, e)
                result.failure_count += 1
                continue
            except Exception:
                logger.exception("Unexpected failure on %s", label)
                result.failure_count += 1
                continue

            for parsed_item in parsed.items:
                item = normalize_item(parsed_item)
                try:
                    record = await self._merge.merge(item, purchased)
                except PersistenceError as e:
                    result.failed_items.append(e.item_name)
                    continue
                result.items.append(item)
                result.records.append(record)

            result.success_count += 1
            match parsed.method:
                case ParseMethod.AI:
                    result.ai_count += 1
                case ParseMethod.HEURISTIC:
                    result.heuristic_count += 1

        if self._shopping is not None:
            result.restock = self._shopping.below_threshold(
                self._merge.inventory, self._merge.matcher
            )
            for alert in result.restock:
                logger.info(
                    "Restock %s: %d/%d %s",
                    alert.item.name, alert.current_stock,
                    alert.item.min_quantity, alert.item.unit.value,
                )

        summary = result.summary()
        logger.info("Batch finished: %s", summary.message)
        return result
