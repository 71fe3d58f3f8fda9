"""Service layer for Spec Harvest.

Stateful workflow, selection, history, export and configuration services
built on the pure ``specharvest.core`` types.
"""

from .backend import (
    AnalysisOptions,
    AnalysisRequest,
    ProviderStatus,
    SearchBackend,
    SearchQuery,
)
from .config_service import ConfigService
from .export_service import ExportArtifact, ExportOptions, export_products
from .history import ResultHistory, combine_batch
from .raw_content import bundle, collect_raw_content, content_filename
from .selection import ProductSelection
from .workflow import AnalysisWorkflow, WorkflowPhase, WorkflowState

__all__ = [
    "AnalysisOptions",
    "AnalysisRequest",
    "ProviderStatus",
    "SearchBackend",
    "SearchQuery",
    "ConfigService",
    "ExportArtifact",
    "ExportOptions",
    "export_products",
    "ResultHistory",
    "combine_batch",
    "bundle",
    "collect_raw_content",
    "content_filename",
    "ProductSelection",
    "AnalysisWorkflow",
    "WorkflowPhase",
    "WorkflowState",
]
