"""Error types for the aggregation and analysis engine."""

from typing import Optional


class SpecHarvestError(Exception):
    """Base class for all engine errors."""


class WorkflowError(SpecHarvestError):
    """Raised when a workflow operation cannot be performed."""


class InvalidTransitionError(WorkflowError):
    """Raised when an operation is not allowed in the current phase."""

    def __init__(self, operation: str, phase: str, message: Optional[str] = None):
        self.operation = operation
        self.phase = phase
        super().__init__(message or f"Cannot {operation} while workflow is {phase}")


class AnalysisInProgressError(WorkflowError):
    """Raised when analysis is triggered while another one is pending."""

    def __init__(self, product_id: Optional[str] = None):
        self.product_id = product_id
        super().__init__(
            "An analysis is already running"
            + (f" for product {product_id}" if product_id else "")
        )


class ProviderNotConfiguredError(WorkflowError):
    """Raised when AI analysis is requested but no provider is configured."""


class BackendError(SpecHarvestError):
    """Raised when the search/analysis backend fails.

    Attributes:
        operation: "search" or "analyze".
        cause: The original exception, if any.
    """

    def __init__(
        self, operation: str, message: str, cause: Optional[BaseException] = None
    ):
        self.operation = operation
        self.cause = cause
        super().__init__(message)
