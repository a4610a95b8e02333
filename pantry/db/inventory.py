"""Inventory groups and records."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import TYPE_CHECKING

from ..models import Category, InventoryGroup, InventoryRecord, StorageLocation, Unit
from .connection import SQLiteStore

if TYPE_CHECKING:
    from ..matcher import IngredientMatcher


class InventoryDB(SQLiteStore):
    """Manages the inventory_groups and inventory_records tables."""

    # -- groups --------------------------------------------------------

    def get_groups(self) -> list[InventoryGroup]:
        conn = self._get_conn()
        rows = conn.execute("SELECT * FROM inventory_groups ORDER BY id").fetchall()
        return [_row_to_group(r) for r in rows]

    def get_group(self, group_id: int) -> InventoryGroup | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM inventory_groups WHERE id = ?", (group_id,)
        ).fetchone()
        return _row_to_group(row) if row else None

    def find_group(self, name: str, matcher: IngredientMatcher) -> InventoryGroup | None:
        """Return the oldest group whose base name groups with ``name``."""
        for group in self.get_groups():
            if matcher.should_group(group.base_name, name):
                return group
        return None

    def create_group(self, base_name: str, display_name: str, category: Category) -> InventoryGroup:
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO inventory_groups (base_name, display_name, category)
               VALUES (?, ?, ?)""",
            (base_name, display_name, category.value),
        )
        self._db.commit()
        return InventoryGroup(
            id=cur.lastrowid,
            base_name=base_name,
            display_name=display_name,
            category=category,
        )

    # -- records -------------------------------------------------------

    def add_record(
        self,
        *,
        name: str,
        quantity: int,
        unit: Unit,
        category: Category,
        purchase_date: date,
        storage_location: StorageLocation,
        group_id: int,
        expiration_date: date | None = None,
    ) -> InventoryRecord:
        """Insert one record into an existing group.

        Raises:
            ValueError: ``quantity`` is negative.
            sqlite3.IntegrityError: ``group_id`` does not exist.
        """
        if quantity < 0:
            raise ValueError(f"quantity must be >= 0, got {quantity}")
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO inventory_records
               (name, quantity, unit, category, purchase_date, expiration_date,
                storage_location, group_id, status)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'active')""",
            (
                name,
                quantity,
                unit.value,
                category.value,
                purchase_date.isoformat(),
                expiration_date.isoformat() if expiration_date else None,
                storage_location.value,
                group_id,
            ),
        )
        self._db.commit()
        return InventoryRecord(
            id=cur.lastrowid,
            name=name,
            quantity=quantity,
            unit=unit,
            category=category,
            purchase_date=purchase_date,
            storage_location=storage_location,
            group_id=group_id,
            expiration_date=expiration_date,
        )

    def get_record(self, record_id: int) -> InventoryRecord | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM inventory_records WHERE id = ?", (record_id,)
        ).fetchone()
        return _row_to_record(row) if row else None

    def get_active_records(self) -> list[InventoryRecord]:
        """Return all records with status='active', soonest expiry first."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT * FROM inventory_records WHERE status = 'active'
               ORDER BY expiration_date IS NULL, expiration_date, id"""
        ).fetchall()
        return [_row_to_record(r) for r in rows]

    def get_group_records(self, group_id: int) -> list[InventoryRecord]:
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT * FROM inventory_records
               WHERE group_id = ? AND status = 'active' ORDER BY id""",
            (group_id,),
        ).fetchall()
        return [_row_to_record(r) for r in rows]

    def get_expiring_soon(self, days: int = 3, today: date | None = None) -> list[InventoryRecord]:
        """Return active records expiring within the given number of days."""
        conn = self._get_conn()
        target = (today or date.today()).isoformat()
        rows = conn.execute(
            """SELECT * FROM inventory_records
               WHERE status = 'active'
                 AND expiration_date IS NOT NULL
                 AND expiration_date <= date(?, '+' || ? || ' days')
               ORDER BY expiration_date""",
            (target, days),
        ).fetchall()
        return [_row_to_record(r) for r in rows]

    def regroup(self, record_id: int, group_id: int) -> None:
        """Move a record to another group."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """UPDATE inventory_records
                   SET group_id = ?, updated_at = datetime('now', 'localtime')
                   WHERE id = ?""",
                (group_id, record_id),
            )
        except sqlite3.IntegrityError:
            raise ValueError(f"no inventory group with id {group_id}") from None
        if cur.rowcount == 0:
            raise ValueError(f"no inventory record with id {record_id}")
        self._db.commit()

    def consume_record(self, record_id: int, amount: int) -> InventoryRecord:
        """Subtract ``amount`` from a record; at zero its status becomes 'consumed'."""
        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")
        record = self.get_record(record_id)
        if record is None:
            raise ValueError(f"no inventory record with id {record_id}")
        remaining = max(record.quantity - amount, 0)
        conn = self._get_conn()
        conn.execute(
            """UPDATE inventory_records
               SET quantity = ?,
                   status = CASE WHEN ? = 0 THEN 'consumed' ELSE status END,
                   updated_at = datetime('now', 'localtime')
               WHERE id = ?""",
            (remaining, remaining, record_id),
        )
        self._db.commit()
        record.quantity = remaining
        return record

    def mark_expired(self, today: date | None = None) -> list[InventoryRecord]:
        """Set status='expired' for active records past their expiration_date.

        Returns:
            The records that were marked.
        """
        conn = self._get_conn()
        target = (today or date.today()).isoformat()
        rows = conn.execute(
            """SELECT * FROM inventory_records
               WHERE status = 'active'
                 AND expiration_date IS NOT NULL
                 AND expiration_date < ?""",
            (target,),
        ).fetchall()
        conn.execute(
            """UPDATE inventory_records
               SET status = 'expired',
                   updated_at = datetime('now', 'localtime')
               WHERE status = 'active'
                 AND expiration_date IS NOT NULL
                 AND expiration_date < ?""",
            (target,),
        )
        self._db.commit()
        return [_row_to_record(r) for r in rows]

    def current_stock(self, name: str, unit: Unit, matcher: IngredientMatcher) -> int:
        """Sum the quantities of active records that group with ``name``."""
        return sum(
            r.quantity
            for r in self.get_active_records()
            if r.unit is unit and matcher.should_group(name, r.name)
        )


def _row_to_group(row: sqlite3.Row) -> InventoryGroup:
    return InventoryGroup(
        id=row["id"],
        base_name=row["base_name"],
        display_name=row["display_name"],
        category=Category(row["category"]),
    )


def _row_to_record(row: sqlite3.Row) -> InventoryRecord:
    expiration = row["expiration_date"]
    return InventoryRecord(
        id=row["id"],
        name=row["name"],
        quantity=row["quantity"],
        unit=Unit(row["unit"]),
        category=Category(row["category"]),
        purchase_date=date.fromisoformat(row["purchase_date"]),
        storage_location=StorageLocation(row["storage_location"]),
        group_id=row["group_id"],
        expiration_date=date.fromisoformat(expiration) if expiration else None,
    )
