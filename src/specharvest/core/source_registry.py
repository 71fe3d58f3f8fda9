"""De-duplication and display helpers for source citations.

Identity of a source is its normalized URL:

- scheme and host are lower-cased, a leading ``www.`` is dropped;
- default ports (80 for http, 443 for https) are dropped;
- the fragment is dropped;
- a trailing ``/`` is stripped from the path;
- the query string is kept, shop pages often identify products by it.

All functions here are pure and never fetch anything.
"""

import logging
from dataclasses import dataclass
from typing import Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar
from urllib.parse import urlsplit, urlunsplit

from specharvest.core.constants import DEFAULT_SOURCES_PREVIEW_LIMIT
from specharvest.core.source import Source

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Return the identity key for a source URL.

    Strings without a scheme and host are stripped and returned unchanged.
    """
    url = (url or "").strip()
    if not url:
        return ""

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return url

    if not parts.scheme or not parts.hostname:
        return url

    scheme = parts.scheme.lower()
    host = parts.hostname.lower()
    if host.startswith("www."):
        host = host[4:]
    if port is not None and _DEFAULT_PORTS.get(scheme) != port:
        host = f"{host}:{port}"

    path = parts.path.rstrip("/")
    return urlunsplit((scheme, host, path, parts.query, ""))


def display_url(url: Optional[str]) -> str:
    """Strip scheme and ``www.`` for compact display."""
    if not url:
        return ""
    stripped = url
    for prefix in ("https://", "http://"):
        if stripped.lower().startswith(prefix):
            stripped = stripped[len(prefix) :]
            break
    if stripped.lower().startswith("www."):
        stripped = stripped[4:]
    return stripped


def register(sources: Iterable[Source]) -> List[Source]:
    """De-duplicate sources by normalized URL, keeping first occurrences.

    Sources with an empty URL cannot be cited and are dropped.
    """
    seen = set()
    result: List[Source] = []
    for source in sources:
        key = normalize_url(source.url)
        if not key:
            continue
        if key in seen:
            continue
        seen.add(key)
        result.append(source)
    return result


@dataclass(frozen=True)
class SourceListView(Generic[T]):
    """Result of truncating a list for "show first N, expand" display."""

    shown: Tuple[T, ...]
    has_more: bool
    total: int

    @property
    def hidden_count(self) -> int:
        return self.total - len(self.shown)


def truncate(
    items: Sequence[T], limit: Optional[int] = DEFAULT_SOURCES_PREVIEW_LIMIT
) -> SourceListView[T]:
    """Return the first ``limit`` items and whether more exist.

    ``limit=None`` shows everything (the expanded state).
    """
    total = len(items)
    if limit is None or limit >= total:
        return SourceListView(shown=tuple(items), has_more=False, total=total)
    limit = max(0, limit)
    return SourceListView(shown=tuple(items[:limit]), has_more=True, total=total)


class SourceRegistry:
    """Accumulates citations for one result, de-duplicated by identity."""

    def __init__(self, sources: Optional[Iterable[Source]] = None):
        self._sources: List[Source] = []
        self._keys: set = set()
        if sources:
            self.add(sources)

    def add(self, sources: Iterable[Source]) -> int:
        """Add sources, ignoring duplicates.

        Returns:
            Number of sources actually added.
        """
        added = 0
        for source in sources:
            key = normalize_url(source.url)
            if not key or key in self._keys:
                continue
            self._keys.add(key)
            self._sources.append(source)
            added += 1
        logger.debug("Registered %d new sources (%d total)", added, len(self))
        return added

    @property
    def sources(self) -> List[Source]:
        return list(self._sources)

    def view(
        self, limit: Optional[int] = DEFAULT_SOURCES_PREVIEW_LIMIT
    ) -> SourceListView[Source]:
        return truncate(self._sources, limit)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and normalize_url(url) in self._keys
