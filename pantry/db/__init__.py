"""SQLite storage for inventory, history, shopping list and AI usage."""

from .connection import DEFAULT_DB_PATH, Database, SQLiteStore
from .history import HistoryDB
from .inventory import InventoryDB
from .schema import ensure_schema
from .shopping import ShoppingListDB
from .usage import UsageDB

__all__ = [
    "DEFAULT_DB_PATH",
    "Database",
    "SQLiteStore",
    "InventoryDB",
    "HistoryDB",
    "ShoppingListDB",
    "UsageDB",
    "ensure_schema",
]
