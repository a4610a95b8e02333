"""TOML configuration loader for pantry."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .db import DEFAULT_DB_PATH
from .matcher import DEFAULT_MODIFIERS, DEFAULT_SYNONYMS, MatchRules
from .models import Category, StorageLocation

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class ClaudeConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class AIConfig:
    backend: str = "claude"
    daily_limit: int = 10  # successful AI calls per day, 0 = unlimited
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)


@dataclass
class OCRConfig:
    backend: str = "none"


@dataclass
class DatabaseConfig:
    path: str = DEFAULT_DB_PATH


@dataclass
class MatchingConfig:
    similarity_threshold: float = 0.8
    cjk_charset_match: bool = True
    synonyms: dict[str, list[str]] = field(default_factory=dict)
    modifiers: list[str] = field(default_factory=list)

    def rules(self) -> MatchRules:
        """Built-in tables extended with the configured synonyms and modifiers."""
        synonyms = {base: list(variants) for base, variants in DEFAULT_SYNONYMS.items()}
        for base, variants in self.synonyms.items():
            synonyms.setdefault(base, []).extend(variants)
        return MatchRules(
            synonyms=synonyms,
            modifiers=[*DEFAULT_MODIFIERS, *self.modifiers],
            similarity_threshold=self.similarity_threshold,
            cjk_charset_match=self.cjk_charset_match,
        )


@dataclass
class StorageConfig:
    locations: dict[str, str] = field(default_factory=lambda: {
        "meat": "freezer",
        "seafood": "freezer",
        "frozen": "freezer",
        "dairy": "refrigerator",
        "eggs": "refrigerator",
        "vegetables": "refrigerator",
        "fruits": "refrigerator",
        "beverages": "refrigerator",
        "grains": "pantry",
        "condiments": "pantry",
        "canned": "pantry",
        "snacks": "pantry",
        "other": "pantry",
    })

    def category_locations(self) -> dict[Category, StorageLocation]:
        """Typed view of ``locations``.

        Raises:
            ValueError: A category or location name is not recognized.
        """
        return {
            Category(category): StorageLocation(location)
            for category, location in self.locations.items()
        }


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class PantryConfig:
    ai: AIConfig = field(default_factory=AIConfig)
    ocr: OCRConfig = field(default_factory=OCRConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> PantryConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path).expanduser()
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ai = raw.get("ai", {})
    ocr = raw.get("ocr", {})
    dbs = raw.get("database", {})
    mat = raw.get("matching", {})
    sto = raw.get("storage", {})
    log = raw.get("logging", {})

    claude_cfg = ai.get("claude", {})
    gemini_cfg = ai.get("gemini", {})

    # Resolve API keys: config file → environment variable
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    # Merge custom storage locations with defaults
    default_locations = StorageConfig().locations
    custom_locations = sto.get("locations", {})
    locations = {**default_locations, **custom_locations}

    return PantryConfig(
        ai=AIConfig(
            backend=ai.get("backend", "claude"),
            daily_limit=ai.get("daily_limit", 10),
            claude=ClaudeConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
        ),
        ocr=OCRConfig(
            backend=ocr.get("backend", "none"),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", DEFAULT_DB_PATH),
        ),
        matching=MatchingConfig(
            similarity_threshold=mat.get("similarity_threshold", 0.8),
            cjk_charset_match=mat.get("cjk_charset_match", True),
            synonyms=mat.get("synonyms", {}),
            modifiers=mat.get("modifiers", []),
        ),
        storage=StorageConfig(locations=locations),
        logging=LoggingConfig(
            level=log.get("level", "WARNING"),
        ),
    )
