"""Household inventory ingestion: receipts and shopping notes to grouped stock."""

from .categories import classify
from .config import PantryConfig, load_config
from .errors import (
    ExtractionError,
    GenerationError,
    MalformedResponseError,
    PantryError,
    PersistenceError,
    QuotaExceededError,
)
from .matcher import IngredientMatcher, MatchRules
from .merge import InventoryMergeEngine
from .models import (
    BatchResult,
    BatchStatus,
    BatchSummary,
    Category,
    NormalizedItem,
    ParsedItem,
    ParseMethod,
    ParseResult,
    Quantity,
    RawInput,
    SourceKind,
    StorageLocation,
    SummaryTier,
    Unit,
)
from .parsing import StructuredItemParser
from .pipeline import BatchOrchestrator
from .storage import StorageAdvisor
from .units import normalize

__all__ = [
    "classify",
    "normalize",
    "IngredientMatcher",
    "MatchRules",
    "StorageAdvisor",
    "StructuredItemParser",
    "InventoryMergeEngine",
    "BatchOrchestrator",
    "PantryConfig",
    "load_config",
    "RawInput",
    "ParsedItem",
    "ParseResult",
    "ParseMethod",
    "SourceKind",
    "Quantity",
    "Unit",
    "Category",
    "StorageLocation",
    "NormalizedItem",
    "BatchResult",
    "BatchStatus",
    "BatchSummary",
    "SummaryTier",
    "PantryError",
    "ExtractionError",
    "QuotaExceededError",
    "GenerationError",
    "MalformedResponseError",
    "PersistenceError",
]
