"""
Spec Harvest: Result Aggregation & Two-Phase Analysis Engine

Reconciles product technical data found on the web against a property
catalog, scores it for display and exports it.
"""

from specharvest.core import (
    PayloadConverter,
    PropertyCatalog,
    SearchResult,
    reconcile,
)
from specharvest.services import AnalysisWorkflow, ProductSelection

__version__ = "0.1.0"

__all__ = [
    "PayloadConverter",
    "PropertyCatalog",
    "SearchResult",
    "reconcile",
    "AnalysisWorkflow",
    "ProductSelection",
    "__version__",
]
