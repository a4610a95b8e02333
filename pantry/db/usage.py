"""Per-day AI call counter."""

from __future__ import annotations

from datetime import date

from .connection import SQLiteStore


class UsageDB(SQLiteStore):
    """Manages the ai_usage table (one row per calendar day)."""

    def get_count(self, day: date | None = None) -> int:
        row = self._get_conn().execute(
            "SELECT count FROM ai_usage WHERE usage_date = ?",
            ((day or date.today()).isoformat(),),
        ).fetchone()
        return row["count"] if row else 0

    def increment(self, day: date | None = None) -> int:
        conn = self._get_conn()
        key = (day or date.today()).isoformat()
        conn.execute(
            """INSERT INTO ai_usage (usage_date, count) VALUES (?, 1)
               ON CONFLICT(usage_date) DO UPDATE SET count = count + 1""",
            (key,),
        )
        self._db.commit()
        return self.get_count(day)
