"""Pydantic schemas for API request/response models."""

from .common import ErrorResponse, HealthResponse
from .config import (
    ConfigResponse,
    DisplayConfigSchema,
    ExportConfigSchema,
    ScoringConfigSchema,
    WorkflowConfigSchema,
)
from .results import (
    ColumnOrderSchema,
    ConfidenceTierResponse,
    ExportRequest,
    ProductListSchema,
    ProductSummarySchema,
    PropertyDefinitionSchema,
    ReconcileRequest,
    ReconcileResponse,
    RawContentEntrySchema,
    RawContentRequest,
    RawContentResponse,
    ScoredPropertySchema,
    SourceListSchema,
    SourceSchema,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ConfigResponse",
    "DisplayConfigSchema",
    "ExportConfigSchema",
    "ScoringConfigSchema",
    "WorkflowConfigSchema",
    "ColumnOrderSchema",
    "ConfidenceTierResponse",
    "ExportRequest",
    "ProductListSchema",
    "ProductSummarySchema",
    "PropertyDefinitionSchema",
    "RawContentEntrySchema",
    "RawContentRequest",
    "RawContentResponse",
    "ReconcileRequest",
    "ReconcileResponse",
    "ScoredPropertySchema",
    "SourceListSchema",
    "SourceSchema",
]
