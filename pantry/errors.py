"""Exception types raised by the ingestion pipeline."""

from __future__ import annotations


class PantryError(Exception):
    """Base class for all pantry errors."""


class ExtractionError(PantryError):
    """The text extractor could not produce usable text for an input."""


class QuotaExceededError(PantryError):
    """The AI usage allowance is exhausted.

    This is the only error that ends a batch early. It is never handled
    by falling back to the heuristic parser.
    """


class GenerationError(PantryError):
    """The AI collaborator failed for a reason other than quota."""


class MalformedResponseError(PantryError):
    """The AI reply did not follow the <receipt>/<item> markup contract."""


class PersistenceError(PantryError):
    """A merge could not be written to the inventory store."""

    def __init__(self, item_name: str, message: str = "") -> None:
        self.item_name = item_name
        super().__init__(message or f"failed to store {item_name!r}")
