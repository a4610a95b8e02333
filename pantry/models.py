"""Data models shared across the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path


class Category(str, Enum):
    DAIRY = "dairy"
    EGGS = "eggs"
    MEAT = "meat"
    SEAFOOD = "seafood"
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    GRAINS = "grains"
    BEVERAGES = "beverages"
    CONDIMENTS = "condiments"
    FROZEN = "frozen"
    CANNED = "canned"
    SNACKS = "snacks"
    OTHER = "other"


class Unit(str, Enum):
    GRAM = "gram"
    MILLILITER = "milliliter"
    ITEM = "item"


class StorageLocation(str, Enum):
    FREEZER = "freezer"
    REFRIGERATOR = "refrigerator"
    PANTRY = "pantry"


class ParseMethod(str, Enum):
    AI = "ai"
    HEURISTIC = "heuristic"


class SourceKind(str, Enum):
    SCAN = "scan"
    SPEECH = "speech"


class HistoryEventType(str, Enum):
    PURCHASE = "purchase"
    CONSUMPTION = "consumption"
    EXPIRATION = "expiration"
    ADJUSTMENT = "adjustment"


class BatchStatus(str, Enum):
    COMPLETED = "completed"
    STOPPED_BY_QUOTA = "stopped_by_quota"


class SummaryTier(str, Enum):
    ALL_FAILED = "all_failed"
    NO_ITEMS = "no_items"
    PARTIAL = "partial"
    FULL_SUCCESS = "full_success"


@dataclass
class RawInput:
    """One unit of unstructured input: OCR text, a transcript, or an image."""

    text: str = ""
    locale: str | None = None  # "zh", "en", ...
    source: SourceKind = SourceKind.SCAN
    media_path: Path | None = None  # receipt image for the text extractor
    label: str = ""  # shown in logs and summaries


@dataclass
class ParsedItem:
    name: str
    quantity_text: str = ""
    category_hint: str = ""
    parse_method: ParseMethod = ParseMethod.HEURISTIC


@dataclass
class ParseResult:
    items: list[ParsedItem]
    method: ParseMethod


@dataclass(frozen=True)
class Quantity:
    value: int
    unit: Unit


@dataclass
class NormalizedItem:
    name: str
    quantity: int
    unit: Unit
    category: Category


@dataclass
class InventoryGroup:
    """A set of inventory records treated as the same food for stock totals."""

    id: int
    base_name: str
    display_name: str
    category: Category


@dataclass
class InventoryRecord:
    id: int
    name: str
    quantity: int
    unit: Unit
    category: Category
    purchase_date: date
    storage_location: StorageLocation
    group_id: int
    expiration_date: date | None = None


@dataclass
class ShoppingListItem:
    id: int
    name: str
    category: Category = Category.OTHER
    unit: Unit = Unit.ITEM
    min_quantity: int = 1
    alert_enabled: bool = True


@dataclass
class HistoryEvent:
    item_name: str
    quantity: int
    unit: Unit
    category: Category
    event_type: HistoryEventType
    timestamp: datetime = field(default_factory=datetime.now)
    notes: str = ""


@dataclass
class RestockAlert:
    """A shopping-list entry whose current stock is below its minimum."""

    item: ShoppingListItem
    current_stock: int


@dataclass
class BatchSummary:
    tier: SummaryTier
    success_count: int
    failure_count: int
    item_count: int
    failed_item_count: int
    ai_count: int
    heuristic_count: int
    stopped_by_quota: bool

    @property
    def message(self) -> str:
        match self.tier:
            case SummaryTier.ALL_FAILED:
                text = f"All {self.failure_count} input(s) failed; no items were added."
            case SummaryTier.NO_ITEMS:
                text = "No items were found in the processed input."
            case SummaryTier.PARTIAL:
                text = (
                    f"Added {self.item_count} item(s) from {self.success_count} input(s); "
                    f"{self.failure_count} input(s) and {self.failed_item_count} item(s) failed."
                )
                if self.ai_count and self.heuristic_count:
                    text += (
                        f" {self.heuristic_count} input(s) used basic parsing"
                        " because AI parsing was unavailable."
                    )
            case SummaryTier.FULL_SUCCESS:
                text = f"Added {self.item_count} item(s) from {self.success_count} input(s)."
                if self.heuristic_count and not self.ai_count:
                    text += " Basic parsing was used."
        if self.stopped_by_quota:
            text += " Stopped early: the daily AI allowance is used up."
        return text


@dataclass
class BatchResult:
    items: list[NormalizedItem] = field(default_factory=list)
    records: list[InventoryRecord] = field(default_factory=list)
    success_count: int = 0
    failure_count: int = 0
    ai_count: int = 0
    heuristic_count: int = 0
    status: BatchStatus = BatchStatus.COMPLETED
    total_inputs: int = 0
    attempted_inputs: int = 0
    failed_items: list[str] = field(default_factory=list)
    restock: list[RestockAlert] = field(default_factory=list)

    def summary(self) -> BatchSummary:
        """Reduce the counters to one of four outcome tiers."""
        if self.success_count == 0 and self.failure_count > 0:
            tier = SummaryTier.ALL_FAILED
        elif not self.items and not self.failed_items:
            tier = SummaryTier.NO_ITEMS
        elif (
            self.failure_count
            or self.failed_items
            or (self.ai_count and self.heuristic_count)
        ):
            tier = SummaryTier.PARTIAL
        else:
            tier = SummaryTier.FULL_SUCCESS

        return BatchSummary(
            tier=tier,
            success_count=self.success_count,
            failure_count=self.failure_count,
            item_count=len(self.items),
            failed_item_count=len(self.failed_items),
            ai_count=self.ai_count,
            heuristic_count=self.heuristic_count,
            stopped_by_quota=self.status is BatchStatus.STOPPED_BY_QUOTA,
        )
