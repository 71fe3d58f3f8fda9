"""Immutable value types for search/analysis results.

Every workflow transition produces new values instead of patching existing
ones; use ``dataclasses.replace`` (or the ``with_*`` helpers) to derive a
modified copy.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

from specharvest.core.source import RawContentEntry, Source
from specharvest.core.status import is_partial_result


class SearchMethod(str, Enum):
    """How the product data was searched for."""

    AUTO = "auto"
    URL = "url"
    PDF = "pdf"
    DOMAIN = "domain"

    @classmethod
    def parse(cls, value: object) -> "SearchMethod":
        """Parse a wire value, defaulting unknown methods to AUTO."""
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.AUTO

    @property
    def label(self) -> str:
        """Human-readable label used in tables."""
        return {
            SearchMethod.AUTO: "Automated",
            SearchMethod.URL: "Product URL",
            SearchMethod.PDF: "PDF",
            SearchMethod.DOMAIN: "Domain",
        }[self]


class SearchStatus(str, Enum):
    """Progress indicator reported by the search endpoint."""

    INITIALIZING = "initializing"
    SEARCHING = "searching"
    ANALYZING = "analyzing"
    COMPLETE = "complete"


class ResultPhase(str, Enum):
    """Explicit tag set by the producer of a result."""

    PARTIAL = "partial"
    FINAL = "final"


@dataclass(frozen=True)
class PropertyValue:
    """One extracted (or user supplied) property value.

    Attributes:
        name: Property name, matching a catalog entry.
        value: Extracted value as text.
        sources: Citations supporting the value.
        confidence: 0-100; 100 denotes user input.
        is_consistent: Independent-source agreement, automated mode only.
        consistency_count: Number of sources agreeing on the value.
        source_count: Number of sources analyzed for the value.
    """

    name: str
    value: str
    sources: Tuple[Source, ...] = ()
    confidence: int = 0
    is_consistent: Optional[bool] = None
    consistency_count: Optional[int] = None
    source_count: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "sources", tuple(self.sources))
        object.__setattr__(self, "confidence", max(0, min(100, int(self.confidence))))


@dataclass(frozen=True)
class ProductMetadata:
    """Side-channel data about a product, disjoint from its properties.

    Attributes:
        sources: Consolidated source list for the whole result; ``None`` when
            the producer sent none (an empty tuple means "sent, but empty").
        sources_label: Display label of the consolidated list.
        search_status: Set while the product is still a search placeholder.
        raw_content: Per-source scraped text, inspection only.
    """

    sources: Optional[Tuple[Source, ...]] = None
    sources_label: str = "Found Web Pages"
    search_status: Optional[str] = None
    raw_content: Tuple[RawContentEntry, ...] = ()

    def __post_init__(self):
        if self.sources is not None:
            object.__setattr__(self, "sources", tuple(self.sources))
        object.__setattr__(self, "raw_content", tuple(self.raw_content))

    @property
    def has_sources(self) -> bool:
        return bool(self.sources)


@dataclass(frozen=True)
class Product:
    """A candidate product with its extracted properties."""

    id: Union[str, int]
    product_name: str
    article_number: Optional[str] = None
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)
    metadata: ProductMetadata = field(default_factory=ProductMetadata)

    def __post_init__(self):
        object.__setattr__(self, "properties", dict(self.properties or {}))

    @property
    def sources(self) -> Tuple[Source, ...]:
        """Consolidated sources of the product, empty when none."""
        return self.metadata.sources or ()

    def with_sources(self, sources: Tuple[Source, ...]) -> "Product":
        """Return a copy whose metadata carries ``sources``."""
        return replace(self, metadata=replace(self.metadata, sources=tuple(sources)))


@dataclass(frozen=True)
class SearchResult:
    """A complete search or analysis response."""

    products: Tuple[Product, ...] = ()
    search_method: SearchMethod = SearchMethod.AUTO
    search_status: Optional[SearchStatus] = None
    status_message: Optional[str] = None
    min_consistent_sources: Optional[int] = None
    raw_content: Tuple[RawContentEntry, ...] = ()
    phase: Optional[ResultPhase] = None
    id: Optional[Union[int, str]] = None
    created_at: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "products", tuple(self.products))
        object.__setattr__(self, "raw_content", tuple(self.raw_content))

    @property
    def is_empty(self) -> bool:
        return not self.products

    @property
    def is_automated(self) -> bool:
        """Automated multi-source mode enables consistency scoring."""
        return self.search_method == SearchMethod.AUTO

    @property
    def is_partial(self) -> bool:
        """Whether the result still awaits content analysis.

        The producer's explicit ``phase`` tag wins; untagged results fall back
        to the heuristic predicate.
        """
        if self.phase is not None:
            return self.phase == ResultPhase.PARTIAL
        return is_partial_result(self)

    @property
    def first_product(self) -> Optional[Product]:
        return self.products[0] if self.products else None

    def with_products(self, products: Tuple[Product, ...]) -> "SearchResult":
        return replace(self, products=tuple(products))

    def mark_final(self) -> "SearchResult":
        """Return a copy tagged as final and complete."""
        return replace(
            self, phase=ResultPhase.FINAL, search_status=SearchStatus.COMPLETE
        )


PropertyMap = Dict[str, PropertyValue]
