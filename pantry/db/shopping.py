"""Shopping list with minimum-stock thresholds."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from ..models import Category, RestockAlert, ShoppingListItem, Unit
from .connection import SQLiteStore

if TYPE_CHECKING:
    from ..matcher import IngredientMatcher
    from .inventory import InventoryDB


class ShoppingListDB(SQLiteStore):
    """Manages the shopping_list table."""

    def add_item(
        self,
        name: str,
        min_quantity: int = 1,
        unit: Unit = Unit.ITEM,
        category: Category = Category.OTHER,
        alert_enabled: bool = True,
    ) -> ShoppingListItem:
        """Add an item, or update the threshold of an existing one with the same name."""
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO shopping_list (name, category, unit, min_quantity, alert_enabled)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(name) DO UPDATE SET
                   category = excluded.category,
                   unit = excluded.unit,
                   min_quantity = excluded.min_quantity,
                   alert_enabled = excluded.alert_enabled""",
            (name, category.value, unit.value, min_quantity, int(alert_enabled)),
        )
        self._db.commit()
        row = conn.execute("SELECT * FROM shopping_list WHERE name = ?", (name,)).fetchone()
        return _row_to_item(row)

    def get_items(self) -> list[ShoppingListItem]:
        rows = self._get_conn().execute("SELECT * FROM shopping_list ORDER BY id").fetchall()
        return [_row_to_item(r) for r in rows]

    def remove_item(self, item_id: int) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM shopping_list WHERE id = ?", (item_id,))
        self._db.commit()

    def below_threshold(
        self, inventory: InventoryDB, matcher: IngredientMatcher
    ) -> list[RestockAlert]:
        """Alert-enabled items whose grouped stock is under ``min_quantity``."""
        alerts: list[RestockAlert] = []
        for item in self.get_items():
            if not item.alert_enabled:
                continue
            stock = inventory.current_stock(item.name, item.unit, matcher)
            if stock < item.min_quantity:
                alerts.append(RestockAlert(item=item, current_stock=stock))
        return alerts


def _row_to_item(row: sqlite3.Row) -> ShoppingListItem:
    return ShoppingListItem(
        id=row["id"],
        name=row["name"],
        category=Category(row["category"]),
        unit=Unit(row["unit"]),
        min_quantity=row["min_quantity"],
        alert_enabled=bool(row["alert_enabled"]),
    )
