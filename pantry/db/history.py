"""Append-only history of inventory events."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..models import Category, HistoryEvent, HistoryEventType, Unit
from .connection import SQLiteStore


class HistoryDB(SQLiteStore):
    """Manages the history_events table.  Rows are never updated or deleted."""

    def append(self, event: HistoryEvent) -> int:
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO history_events
               (item_name, quantity, unit, category, event_type, timestamp, notes)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                event.item_name,
                event.quantity,
                event.unit.value,
                event.category.value,
                event.event_type.value,
                event.timestamp.isoformat(timespec="seconds"),
                event.notes,
            ),
        )
        self._db.commit()
        return cur.lastrowid

    def get_events(
        self,
        days: int | None = None,
        event_type: HistoryEventType | None = None,
        now: datetime | None = None,
    ) -> list[HistoryEvent]:
        """Return events newest first, optionally limited to the last N days."""
        query = "SELECT * FROM history_events WHERE 1 = 1"
        params: list = []
        if days is not None:
            since = (now or datetime.now()) - timedelta(days=days)
            query += " AND timestamp >= ?"
            params.append(since.isoformat(timespec="seconds"))
        if event_type is not None:
            query += " AND event_type = ?"
            params.append(event_type.value)
        query += " ORDER BY timestamp DESC, id DESC"

        rows = self._get_conn().execute(query, params).fetchall()
        return [
            HistoryEvent(
                item_name=r["item_name"],
                quantity=r["quantity"],
                unit=Unit(r["unit"]),
                category=Category(r["category"]),
                event_type=HistoryEventType(r["event_type"]),
                timestamp=datetime.fromisoformat(r["timestamp"]),
                notes=r["notes"],
            )
            for r in rows
        ]
