"""Classification of results produced by the initial search phase.

A partial result carries discovered sources but no extracted properties yet.
Producers should tag results explicitly (``SearchResult.phase``); the
heuristic below classifies untagged and legacy payloads.
"""

from typing import TYPE_CHECKING, Iterable, Optional

from specharvest.core.constants import STEP_ONE_MARKERS

if TYPE_CHECKING:
    from specharvest.core.models import SearchResult


def has_step_one_marker(
    message: Optional[str], markers: Iterable[str] = STEP_ONE_MARKERS
) -> bool:
    """Check whether a status message announces step 1 of 2."""
    if not isinstance(message, str) or not message:
        return False
    return any(marker in message for marker in markers)


def is_partial_result(
    result: Optional["SearchResult"], markers: Iterable[str] = STEP_ONE_MARKERS
) -> bool:
    """Heuristic partial-result predicate.

    All four conditions are evaluated; any one of them classifies the result
    as partial:

    1. ``search_status`` is "searching";
    2. the status message carries a step-1 marker;
    3. the first product carries a search status in its metadata;
    4. the first product has no properties but does carry metadata sources.
    """
    if result is None:
        return False

    searching = result.search_status is not None and (
        result.search_status.value == "searching"
    )
    marked = has_step_one_marker(result.status_message, markers)

    first = result.products[0] if result.products else None
    flagged = first is not None and first.metadata.search_status is not None
    sources_only = (
        first is not None
        and not first.properties
        and first.metadata.sources is not None
    )

    return searching or marked or flagged or sources_only
