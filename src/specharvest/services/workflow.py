"""Two-phase search/analysis workflow.

Phase one (search) finds candidate pages and may return a partial result:
products with sources but no extracted properties. Phase two (analysis) is
triggered explicitly and re-uses the sources found in phase one.

Every transition publishes a new immutable ``WorkflowState``; nothing is
patched in place.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.constants import STEP_ONE_MARKERS
from specharvest.core.errors import (
    AnalysisInProgressError,
    BackendError,
    InvalidTransitionError,
    ProviderNotConfiguredError,
)
from specharvest.core.models import Product, ResultPhase, SearchResult
from specharvest.core.source import Source
from specharvest.core.source_registry import register
from specharvest.core.status import is_partial_result
from specharvest.services.backend import (
    AnalysisOptions,
    AnalysisRequest,
    ProviderStatus,
    SearchBackend,
    SearchQuery,
    sources_for_request,
)
from specharvest.services.selection import ProductSelection

logger = logging.getLogger(__name__)


class WorkflowPhase(str, Enum):
    """Lifecycle of the active result."""

    IDLE = "idle"
    SEARCHING = "searching"
    PARTIAL_RESULT = "partial_result"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    FAILED = "failed"


ANALYZABLE_PHASES = frozenset(
    {WorkflowPhase.PARTIAL_RESULT, WorkflowPhase.COMPLETE, WorkflowPhase.FAILED}
)


@dataclass(frozen=True)
class WorkflowState:
    """Snapshot of the workflow.

    Attributes:
        phase: Current lifecycle phase.
        selection: Active result and selected product, ``None`` when idle.
        notice: User-facing message about the last transition.
        error: Technical error message of the last failure.
    """

    phase: WorkflowPhase = WorkflowPhase.IDLE
    selection: Optional[ProductSelection] = None
    notice: Optional[str] = None
    error: Optional[str] = None

    @property
    def result(self) -> Optional[SearchResult]:
        return self.selection.result if self.selection else None

    @property
    def active_product(self) -> Optional[Product]:
        return self.selection.active_product if self.selection else None

    @property
    def is_busy(self) -> bool:
        return self.phase in (WorkflowPhase.SEARCHING, WorkflowPhase.ANALYZING)


StateListener = Callable[[WorkflowState], None]


def preserve_sources(result: SearchResult, sources: Sequence[Source]) -> SearchResult:
    """Re-inject captured sources into the first product when it lacks any.

    The analysis endpoint may omit the consolidated source list; the list the
    search step found is still the correct one to show.
    """
    first = result.first_product
    if first is None or first.metadata.has_sources or not sources:
        return result
    logger.debug("Re-injecting %d captured sources into %s", len(sources), first.id)
    products = (first.with_sources(tuple(sources)),) + result.products[1:]
    return result.with_products(products)


def captured_sources(product: Product) -> Tuple[Source, ...]:
    """Sources of a product to hand to the analysis step.

    Prefers the consolidated metadata list; products without one fall back
    to the de-duplicated citations of their properties.
    """
    if product.metadata.sources is not None:
        return tuple(product.metadata.sources)
    return tuple(
        register(s for prop in product.properties.values() for s in prop.sources)
    )


class AnalysisWorkflow:
    """Drives search and content analysis against a ``SearchBackend``.

    Only one backend call is in flight at a time. A second ``analyze`` while
    one is pending is rejected with ``AnalysisInProgressError``.
    """

    def __init__(
        self,
        backend: SearchBackend,
        catalog: Optional[PropertyCatalog] = None,
        provider_status: Optional[ProviderStatus] = None,
        step_one_markers: Sequence[str] = STEP_ONE_MARKERS,
    ):
        self.backend = backend
        self.catalog = catalog or PropertyCatalog()
        self.provider_status = provider_status or ProviderStatus(
            ai_configured=True, search_configured=True
        )
        self.step_one_markers = tuple(step_one_markers)
        self._state = WorkflowState()
        self._listeners: List[StateListener] = []
        self._in_flight: Optional[str] = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def phase(self) -> WorkflowPhase:
        return self._state.phase

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, state: WorkflowState) -> WorkflowState:
        previous = self._state.phase
        self._state = state
        if previous != state.phase:
            logger.info("Workflow %s -> %s", previous.value, state.phase.value)
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as exc:
                logger.error("Workflow listener failed: %s", exc)
        return state

    def _is_partial(self, result: SearchResult) -> bool:
        if result.phase is not None:
            return result.phase == ResultPhase.PARTIAL
        return is_partial_result(result, self.step_one_markers)

    def _restored(self, prior: WorkflowState, **changes) -> WorkflowState:
        # Keeps a selection made while the backend call was pending
        return replace(prior, selection=self._state.selection, **changes)

    def _check_idle_guard(self, operation: str) -> None:
        if self._in_flight == "analyze":
            product = self._state.active_product
            logger.warning("Rejected %s: analysis already running", operation)
            raise AnalysisInProgressError(str(product.id) if product else None)
        if self._in_flight is not None:
            logger.warning(
                "Rejected %s: %s already running", operation, self._in_flight
            )
            raise InvalidTransitionError(operation, self._state.phase.value)

    async def search(self, query: SearchQuery) -> WorkflowState:
        """Run the search step and publish the resulting state.

        Backend failures move to FAILED but keep the previously held result.
        """
        self._check_idle_guard("search")
        prior = self._state
        self._in_flight = "search"
        self._publish(
            replace(prior, phase=WorkflowPhase.SEARCHING, notice=None, error=None)
        )
        try:
            result = await self.backend.search(query)
        except asyncio.CancelledError:
            self._publish(self._restored(prior))
            raise
        except Exception as exc:
            logger.warning("Search for %r failed: %s", query.product_name, exc)
            return self._publish(
                self._restored(
                    prior,
                    phase=WorkflowPhase.FAILED,
                    notice="Search failed",
                    error=str(exc),
                )
            )
        finally:
            self._in_flight = None

        if result.is_empty:
            logger.info("Search for %r returned no products", query.product_name)
            return self._publish(
                WorkflowState(phase=WorkflowPhase.IDLE, notice="No products found")
            )

        partial = self._is_partial(result)
        if result.phase is None:
            result = replace(
                result, phase=ResultPhase.PARTIAL if partial else ResultPhase.FINAL
            )
        phase = WorkflowPhase.PARTIAL_RESULT if partial else WorkflowPhase.COMPLETE
        notice = (
            "Sources found, run content analysis to extract properties"
            if partial
            else None
        )
        return self._publish(
            WorkflowState(
                phase=phase, selection=ProductSelection.of(result), notice=notice
            )
        )

    def build_request(
        self, options: Optional[AnalysisOptions] = None
    ) -> AnalysisRequest:
        """Build the analysis request for the selected product."""
        product = self._state.active_product
        result = self._state.result
        if product is None or result is None:
            raise InvalidTransitionError("analyze", self._state.phase.value)
        return AnalysisRequest(
            article_number=product.article_number,
            product_name=product.product_name,
            catalog=self.catalog,
            sources=sources_for_request(list(captured_sources(product))),
            options=options or AnalysisOptions(),
            search_method=result.search_method,
        )

    async def analyze(self, options: Optional[AnalysisOptions] = None) -> WorkflowState:
        """Run content analysis on the selected product.

        Raises:
            AnalysisInProgressError: Another analysis is pending.
            InvalidTransitionError: A search is running or no result is held.
            ProviderNotConfiguredError: AI requested without a configured provider.
        """
        self._check_idle_guard("analyze")
        prior = self._state
        if prior.phase not in ANALYZABLE_PHASES or prior.selection is None:
            logger.warning("Rejected analyze in phase %s", prior.phase.value)
            raise InvalidTransitionError("analyze", prior.phase.value)

        options = options or AnalysisOptions()
        if options.use_ai and not self.provider_status.ai_configured:
            logger.warning("Rejected analyze: no AI provider configured")
            raise ProviderNotConfiguredError(
                "AI analysis requested but no AI provider is configured"
            )

        request = self.build_request(options)
        product = prior.active_product
        sources = captured_sources(product)

        self._in_flight = "analyze"
        self._publish(
            replace(prior, phase=WorkflowPhase.ANALYZING, notice=None, error=None)
        )
        logger.info(
            "Analyzing %s with %d captured sources", product.product_name, len(sources)
        )
        try:
            response = await self.backend.analyze(request)
            if response.is_empty:
                raise BackendError("analyze", "Analysis returned no products")
        except asyncio.CancelledError:
            logger.info("Analysis of %s cancelled", product.product_name)
            self._publish(self._restored(prior))
            raise
        except Exception as exc:
            logger.warning("Analysis of %s failed: %s", product.product_name, exc)
            return self._publish(
                self._restored(
                    prior,
                    phase=WorkflowPhase.FAILED,
                    notice="Content analysis failed, previous result kept",
                    error=str(exc),
                )
            )
        finally:
            self._in_flight = None

        final = preserve_sources(response, sources).mark_final()
        return self._publish(
            WorkflowState(
                phase=WorkflowPhase.COMPLETE, selection=ProductSelection.of(final)
            )
        )

    def select(self, index: int) -> WorkflowState:
        """Select a product of the active result."""
        if self._state.selection is None:
            return self._state
        selection = self._state.selection.select(index)
        return self._publish(replace(self._state, selection=selection))

    def delete_product(self, index: int) -> WorkflowState:
        """Delete a product; deleting the last one returns to IDLE."""
        if self._in_flight is not None:
            raise InvalidTransitionError("delete a product", self._state.phase.value)
        if self._state.selection is None:
            return self._state
        selection = self._state.selection.delete(index)
        if selection is None:
            return self._publish(WorkflowState())
        return self._publish(replace(self._state, selection=selection))

    def clear(self) -> WorkflowState:
        """Discard the active result."""
        if self._in_flight is not None:
            raise InvalidTransitionError("clear", self._state.phase.value)
        return self._publish(WorkflowState())

    def load(self, result: SearchResult) -> WorkflowState:
        """Make a stored result active, e.g. when reopening history."""
        if self._in_flight is not None:
            raise InvalidTransitionError("load a result", self._state.phase.value)
        if result.is_empty:
            return self._publish(WorkflowState())
        phase = (
            WorkflowPhase.PARTIAL_RESULT
            if self._is_partial(result)
            else WorkflowPhase.COMPLETE
        )
        return self._publish(
            WorkflowState(phase=phase, selection=ProductSelection.of(result))
        )
