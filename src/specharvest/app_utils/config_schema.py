"""Configuration schema and default values for Spec Harvest."""

from dataclasses import asdict, dataclass, field, fields
from typing import List, Optional

from specharvest.core.constants import (
    DEFAULT_PRODUCTS_PREVIEW_LIMIT,
    DEFAULT_RAW_CONTENT_PREVIEW_CHARS,
    DEFAULT_SOURCES_PREVIEW_LIMIT,
    HIGH_CONFIDENCE_THRESHOLD,
    LOW_CONFIDENCE_THRESHOLD,
    MEDIUM_CONFIDENCE_THRESHOLD,
    MODERATE_AGREEMENT_COUNT,
    STEP_ONE_MARKERS,
    STRONG_AGREEMENT_COUNT,
)

MIN_CONSISTENT_SOURCES_RANGE = (1, 5)


@dataclass
class DisplayConfig:
    """Limits for collapsed lists and previews."""

    # Number of sources shown before "show more"; null shows all
    sources_preview_limit: Optional[int] = DEFAULT_SOURCES_PREVIEW_LIMIT
    products_preview_limit: Optional[int] = DEFAULT_PRODUCTS_PREVIEW_LIMIT
    raw_content_preview_chars: int = DEFAULT_RAW_CONTENT_PREVIEW_CHARS

    def __post_init__(self):
        for name in ("sources_preview_limit", "products_preview_limit"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.raw_content_preview_chars <= 0:
            raise ValueError(
                "raw_content_preview_chars must be positive, "
                f"got {self.raw_content_preview_chars}"
            )


@dataclass
class ScoringConfig:
    """Tier thresholds (inclusive lower bounds)."""

    high_confidence: int = HIGH_CONFIDENCE_THRESHOLD
    medium_confidence: int = MEDIUM_CONFIDENCE_THRESHOLD
    low_confidence: int = LOW_CONFIDENCE_THRESHOLD
    strong_agreement: int = STRONG_AGREEMENT_COUNT
    moderate_agreement: int = MODERATE_AGREEMENT_COUNT

    def __post_init__(self):
        """Validate configuration values."""
        if not (
            0 <= self.low_confidence <= self.medium_confidence <= self.high_confidence
        ):
            raise ValueError(
                "confidence thresholds must satisfy 0 <= low <= medium <= high, got "
                f"{self.low_confidence}/{self.medium_confidence}/{self.high_confidence}"
            )
        if self.high_confidence > 100:
            raise ValueError(
                f"high_confidence must be at most 100, got {self.high_confidence}"
            )
        if not 1 <= self.moderate_agreement < self.strong_agreement:
            raise ValueError(
                "agreement counts must satisfy 1 <= moderate < strong, got "
                f"{self.moderate_agreement}/{self.strong_agreement}"
            )


@dataclass
class ExportConfig:
    """Defaults for export options."""

    format: str = "xlsx"
    include_product_data: bool = True
    include_source_urls: bool = False
    include_confidence_scores: bool = False
    include_summary: bool = False
    filename: str = "product-data"

    def __post_init__(self):
        if self.format not in ("csv", "xlsx"):
            raise ValueError(f"format must be 'csv' or 'xlsx', got {self.format!r}")


@dataclass
class WorkflowConfig:
    """Search and analysis defaults."""

    # Status-message markers announcing that only step 1 of 2 ran
    step_one_markers: List[str] = field(
        default_factory=lambda: list(STEP_ONE_MARKERS)
    )
    model_provider: str = "openai"
    use_ai: bool = True
    max_results: int = 10
    min_consistent_sources: int = 2

    def __post_init__(self):
        """Validate configuration values."""
        if self.max_results <= 0:
            raise ValueError(f"max_results must be positive, got {self.max_results}")
        low, high = MIN_CONSISTENT_SOURCES_RANGE
        if not low <= self.min_consistent_sources <= high:
            raise ValueError(
                f"min_consistent_sources must be between {low} and {high}, "
                f"got {self.min_consistent_sources}"
            )
        if not self.model_provider or not isinstance(self.model_provider, str):
            raise ValueError(
                "model_provider must be a non-empty string, "
                f"got {self.model_provider!r}"
            )


@dataclass
class SpecHarvestConfig:
    """Main configuration for Spec Harvest."""

    display: DisplayConfig
    scoring: ScoringConfig
    export: ExportConfig
    workflow: WorkflowConfig

    def to_dict(self) -> dict:
        """Convert config to dictionary for YAML serialization."""
        return {
            "display": asdict(self.display),
            "scoring": asdict(self.scoring),
            "export": asdict(self.export),
            "workflow": asdict(self.workflow),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SpecHarvestConfig":
        """Create config from dictionary (loaded from YAML)."""

        def _filter(cls_, data_):
            """Filter dict to only include known dataclass fields."""
            known = {f.name for f in fields(cls_)}
            return {k: v for k, v in (data_ or {}).items() if k in known}

        return cls(
            display=DisplayConfig(**_filter(DisplayConfig, data.get("display"))),
            scoring=ScoringConfig(**_filter(ScoringConfig, data.get("scoring"))),
            export=ExportConfig(**_filter(ExportConfig, data.get("export"))),
            workflow=WorkflowConfig(**_filter(WorkflowConfig, data.get("workflow"))),
        )

    @classmethod
    def create_default(cls) -> "SpecHarvestConfig":
        """Create default configuration."""
        return cls(
            display=DisplayConfig(),
            scoring=ScoringConfig(),
            export=ExportConfig(),
            workflow=WorkflowConfig(),
        )
