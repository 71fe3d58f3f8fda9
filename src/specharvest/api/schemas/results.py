"""Schemas for reconciling, scoring and exporting results."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class PropertyDefinitionSchema(BaseModel):
    """One catalog entry."""

    name: str
    id: Optional[int] = None
    description: Optional[str] = None
    expected_format: Optional[str] = Field(default=None, alias="expectedFormat")
    order_index: int = Field(default=0, alias="orderIndex")
    is_required: bool = Field(default=False, alias="isRequired")

    model_config = {"populate_by_name": True}


class ReconcileRequest(BaseModel):
    """Request body for reconciling one product of a result."""

    result: Dict[str, Any] = Field(..., description="Result in the legacy wire format")
    catalog: List[PropertyDefinitionSchema] = Field(default_factory=list)
    product_index: int = Field(default=0, ge=0)
    sources_limit: Optional[int] = Field(default=None, ge=0)


class SourceSchema(BaseModel):
    """A cited page."""

    url: str
    title: Optional[str] = None
    source_label: Optional[str] = None


class ScoredPropertySchema(BaseModel):
    """A reconciled property with its display tiers."""

    name: str
    value: str
    found: bool
    confidence: int
    confidence_tier: str
    consistency_tier: str
    support_tier: str
    sources: List[SourceSchema] = Field(default_factory=list)


class SourceListSchema(BaseModel):
    """Truncated, de-duplicated source list."""

    shown: List[SourceSchema]
    total: int
    has_more: bool


class ProductSummarySchema(BaseModel):
    """Entry of the collapsed product list."""

    id: str
    product_name: str
    article_number: Optional[str] = None


class ProductListSchema(BaseModel):
    """First products of the result plus the total count."""

    shown: List[ProductSummarySchema]
    total: int
    has_more: bool


class ReconcileResponse(BaseModel):
    """Reconciled view of the selected product."""

    product_id: str
    product_name: str
    article_number: Optional[str] = None
    position: str
    is_partial: bool
    found_count: int
    properties: List[ScoredPropertySchema]
    sources: SourceListSchema
    products: ProductListSchema


class ColumnOrderSchema(BaseModel):
    """Explicit position of one export column."""

    name: str
    order_index: int = Field(..., alias="orderIndex")

    model_config = {"populate_by_name": True}


class ExportRequest(BaseModel):
    """Request body for exporting a result."""

    result: Dict[str, Any]
    catalog: List[PropertyDefinitionSchema] = Field(default_factory=list)
    format: Optional[Literal["csv", "xlsx"]] = None
    include_product_data: Optional[bool] = None
    include_source_urls: Optional[bool] = None
    include_confidence_scores: Optional[bool] = None
    include_summary: Optional[bool] = None
    filename: Optional[str] = None
    ordering: Optional[List[ColumnOrderSchema]] = Field(
        default=None, description="Column order override, listed names first"
    )


class ConfidenceTierResponse(BaseModel):
    """Tier lookup result."""

    confidence: float
    tier: str


class RawContentRequest(BaseModel):
    """Request body for inspecting the raw page text of a result."""

    result: Dict[str, Any] = Field(..., description="Result in the legacy wire format")
    preview_chars: Optional[int] = Field(default=None, gt=0)


class RawContentEntrySchema(BaseModel):
    """One scraped page, truncated for display."""

    label: str
    url: Optional[str] = None
    length: int
    preview: str
    filename: str


class RawContentResponse(BaseModel):
    """Raw content entries plus the downloadable bundle."""

    entries: List[RawContentEntrySchema]
    bundle: str
    bundle_filename: str
    content_filename: str
