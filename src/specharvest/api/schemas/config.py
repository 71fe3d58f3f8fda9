"""Configuration-related schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class DisplayConfigSchema(BaseModel):
    """Preview limits."""

    sources_preview_limit: Optional[int] = 4
    products_preview_limit: Optional[int] = 2
    raw_content_preview_chars: int = 2000


class ScoringConfigSchema(BaseModel):
    """Tier thresholds."""

    high_confidence: int = 85
    medium_confidence: int = 70
    low_confidence: int = 30
    strong_agreement: int = 3
    moderate_agreement: int = 2


class ExportConfigSchema(BaseModel):
    """Export defaults."""

    format: str = "xlsx"
    include_product_data: bool = True
    include_source_urls: bool = False
    include_confidence_scores: bool = False
    include_summary: bool = False
    filename: str = "product-data"


class WorkflowConfigSchema(BaseModel):
    """Search and analysis defaults."""

    step_one_markers: List[str] = Field(default_factory=list)
    model_provider: str = "openai"
    use_ai: bool = True
    max_results: int = 10
    min_consistent_sources: int = 2


class ConfigResponse(BaseModel):
    """Full configuration response."""

    display: DisplayConfigSchema
    scoring: ScoringConfigSchema
    export: ExportConfigSchema
    workflow: WorkflowConfigSchema
