"""Core value types and pure reconciliation logic for Spec Harvest."""

from .catalog import PropertyCatalog, PropertyDefinition
from .errors import (
    AnalysisInProgressError,
    BackendError,
    InvalidTransitionError,
    ProviderNotConfiguredError,
    SpecHarvestError,
    WorkflowError,
)
from .models import (
    Product,
    ProductMetadata,
    PropertyValue,
    ResultPhase,
    SearchMethod,
    SearchResult,
    SearchStatus,
)
from .payload_converter import PayloadConverter
from .reconciler import reconcile, reconcile_all
from .scoring import (
    ConfidenceTier,
    ConsistencyTier,
    confidence_tier,
    consistency_tier,
    score_property,
    support_tier,
)
from .source import RawContentEntry, Source
from .source_registry import SourceRegistry, normalize_url, register, truncate
from .status import is_partial_result

__all__ = [
    "PropertyCatalog",
    "PropertyDefinition",
    "SpecHarvestError",
    "WorkflowError",
    "InvalidTransitionError",
    "AnalysisInProgressError",
    "ProviderNotConfiguredError",
    "BackendError",
    "Product",
    "ProductMetadata",
    "PropertyValue",
    "ResultPhase",
    "SearchMethod",
    "SearchResult",
    "SearchStatus",
    "PayloadConverter",
    "reconcile",
    "reconcile_all",
    "ConfidenceTier",
    "ConsistencyTier",
    "confidence_tier",
    "consistency_tier",
    "score_property",
    "support_tier",
    "RawContentEntry",
    "Source",
    "SourceRegistry",
    "normalize_url",
    "register",
    "truncate",
    "is_partial_result",
]
