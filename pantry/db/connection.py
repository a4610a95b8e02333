"""Shared SQLite connection with nestable transactions."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .schema import ensure_schema

DEFAULT_DB_PATH = "~/.config/pantry/pantry.db"


class Database:
    """One lazily opened connection shared by the table-level stores.

    Writes made inside :meth:`transaction` are committed together when the
    outermost block exits, or rolled back together if it raises.  Outside a
    transaction each store commits its own writes.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._depth = 0

    @property
    def path(self) -> str | Path:
        return self._db_path

    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def commit(self) -> None:
        if self._depth == 0 and self._conn is not None:
            self._conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self.connection()
        self._depth += 1
        try:
            yield conn
        except BaseException:
            self._depth -= 1
            if self._depth == 0:
                conn.rollback()
            raise
        self._depth -= 1
        if self._depth == 0:
            conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


class SQLiteStore:
    """Base for table-level stores.

    Accepts a path (the store opens and owns its own connection) or a
    :class:`Database` shared with other stores so they can write in one
    transaction.
    """

    def __init__(self, db: Database | str | Path = DEFAULT_DB_PATH) -> None:
        if isinstance(db, Database):
            self._db, self._owned = db, False
        else:
            self._db, self._owned = Database(db), True

    @property
    def database(self) -> Database:
        return self._db

    def _get_conn(self) -> sqlite3.Connection:
        return self._db.connection()

    def transaction(self):
        return self._db.transaction()

    def close(self) -> None:
        if self._owned:
            self._db.close()
