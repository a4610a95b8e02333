"""Merge normalized items into grouped inventory."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, timedelta

from .db import HistoryDB, InventoryDB
from .errors import PersistenceError
from .matcher import IngredientMatcher
from .models import HistoryEvent, HistoryEventType, InventoryRecord, NormalizedItem
from .storage import StorageAdvisor

logger = logging.getLogger(__name__)


class InventoryMergeEngine:
    """Write one normalized item per call as a new inventory record.

    The group lookup or creation, the record insert and the purchase history
    event are committed in one transaction.  A failure rolls back that item
    only and is reported as :class:`PersistenceError`.

    Merging is not idempotent: the same item merged twice gives two records
    in the same group.
    """

    def __init__(
        self,
        inventory: InventoryDB,
        history: HistoryDB | None = None,
        matcher: IngredientMatcher | None = None,
        advisor: StorageAdvisor | None = None,
    ) -> None:
        self._inventory = inventory
        self._history = history or HistoryDB(inventory.database)
        if self._history.database is not inventory.database:
            raise ValueError("inventory and history must share one Database")
        self._matcher = matcher or IngredientMatcher()
        self._advisor = advisor or StorageAdvisor()

    @property
    def inventory(self) -> InventoryDB:
        return self._inventory

    @property
    def matcher(self) -> IngredientMatcher:
        return self._matcher

    async def merge(self, item: NormalizedItem, purchase_date: date) -> InventoryRecord:
        location = self._advisor.recommend(item.name, item.category)
        days = self._advisor.shelf_life_days(item.name, item.category, location)
        expiration = purchase_date + timedelta(days=days)

        try:
            with self._inventory.transaction():
                group = self._inventory.find_group(item.name, self._matcher)
                if group is None:
                    base = self._matcher.base_name(item.name)
                    group = self._inventory.create_group(
                        base_name=base,
                        display_name=self._matcher.display_name([item.name]) or item.name,
                        category=item.category,
                    )
                    logger.debug("Created group %d for %r", group.id, base)

                record = self._inventory.add_record(
                    name=item.name,
                    quantity=item.quantity,
                    unit=item.unit,
                    category=item.category,
                    purchase_date=purchase_date,
                    storage_location=location,
                    group_id=group.id,
                    expiration_date=expiration,
                )
                self._history.append(
                    HistoryEvent(
                        item_name=item.name,
                        quantity=item.quantity,
                        unit=item.unit,
                        category=item.category,
                        event_type=HistoryEventType.PURCHASE,
                        notes=f"{location.value}, expires {expiration.isoformat()}",
                    )
                )
        except (sqlite3.Error, ValueError) as e:
            logger.warning("Failed to store %r: %s", item.name, e)
            raise PersistenceError(item.name, str(e)) from e

        logger.info(
            "Stored %s %d %s in %s (group %d)",
            item.name, item.quantity, item.unit.value, location.value, group.id,
        )
        return record
