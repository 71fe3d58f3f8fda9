"""In-memory history of search results, newest first."""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple, Union

from specharvest.core.models import (
    ResultPhase,
    SearchMethod,
    SearchResult,
    SearchStatus,
)

logger = logging.getLogger(__name__)

ResultKey = Tuple[Optional[str], Optional[str]]


def result_key(result: SearchResult) -> ResultKey:
    """Identity of a result: article number and name of its first product."""
    first = result.first_product
    if first is None:
        return (None, None)
    return (first.article_number, first.product_name)


def _sort_key(result: SearchResult) -> Tuple[int, Union[int, str]]:
    # Numeric ids sort above string ids; results without an id fall back to
    # the id of their first product.
    if result.id is not None:
        try:
            return (1, int(result.id))
        except (TypeError, ValueError):
            return (0, str(result.id))
    first = result.first_product
    return (0, str(first.id) if first is not None else "")


def _as_complete(result: SearchResult) -> SearchResult:
    return replace(result, search_status=SearchStatus.COMPLETE, phase=ResultPhase.FINAL)


class ResultHistory:
    """Ordered collection of past results.

    Adding a result whose first product matches an existing entry (same
    article number and name) is a no-op.
    """

    def __init__(self) -> None:
        self._results: List[SearchResult] = []

    @property
    def results(self) -> List[SearchResult]:
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __contains__(self, result: object) -> bool:
        if not isinstance(result, SearchResult):
            return False
        key = result_key(result)
        return any(result_key(r) == key for r in self._results)

    def add(self, result: SearchResult) -> bool:
        """Prepend a result.

        Returns:
            True if added, False if it was empty or a duplicate.
        """
        if result.is_empty:
            return False
        if result in self:
            logger.debug("Result %s already in history", result_key(result))
            return False
        self._results.insert(0, result)
        return True

    def add_many(self, results: Iterable[SearchResult]) -> int:
        """Prepend several results, keeping their relative order."""
        new: List[SearchResult] = []
        for result in results:
            key = result_key(result)
            if result.is_empty or result in self:
                continue
            if any(result_key(r) == key for r in new):
                continue
            new.append(result)
        self._results = new + self._results
        return len(new)

    def load(self, stored: Iterable[SearchResult]) -> None:
        """Replace the history with stored results, all marked complete."""
        ordered = sorted(stored, key=_sort_key, reverse=True)
        self._results = [_as_complete(r) for r in ordered]
        logger.info("Loaded %d stored results", len(self._results))

    def get(self, result_id: Union[int, str]) -> Optional[SearchResult]:
        for result in self._results:
            if result.id == result_id:
                return result
        return None

    def remove(self, result_id: Union[int, str]) -> bool:
        """Remove a result by id. Returns True if something was removed."""
        before = len(self._results)
        self._results = [r for r in self._results if r.id != result_id]
        return len(self._results) != before

    def clear(self) -> None:
        self._results = []


def combine_batch(results: Iterable[SearchResult]) -> SearchResult:
    """Flatten per-document PDF results into a single complete result."""
    products = tuple(p for result in results for p in result.products)
    return SearchResult(
        products=products,
        search_method=SearchMethod.PDF,
        search_status=SearchStatus.COMPLETE,
        phase=ResultPhase.FINAL,
    )
