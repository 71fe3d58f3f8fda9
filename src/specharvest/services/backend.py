"""Interface to the search and content-analysis endpoints.

The engine never talks to the network itself; a ``SearchBackend``
implementation supplied by the application does.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.models import SearchMethod, SearchResult
from specharvest.core.source import Source


@dataclass(frozen=True)
class SearchQuery:
    """Input of the initial broad search."""

    product_name: str
    article_number: Optional[str] = None
    search_method: SearchMethod = SearchMethod.AUTO
    product_url: Optional[str] = None
    max_results: Optional[int] = None
    min_consistent_sources: Optional[int] = None

    def __post_init__(self):
        if not self.product_name or not self.product_name.strip():
            raise ValueError("product_name is required")
        if self.search_method == SearchMethod.URL and not self.product_url:
            raise ValueError("search_method 'url' requires product_url")


@dataclass(frozen=True)
class AnalysisOptions:
    """AI settings forwarded to the analysis endpoint.

    Credentials are not part of the options; the backend resolves them.
    """

    use_ai: bool = True
    model_provider: str = "openai"
    max_results: int = 10
    min_consistent_sources: Optional[int] = None


@dataclass(frozen=True)
class ProviderStatus:
    """Which providers have credentials configured (booleans only)."""

    ai_configured: bool = False
    search_configured: bool = False


@dataclass(frozen=True)
class AnalysisRequest:
    """Input of the focused content-analysis pass.

    Attributes:
        article_number: From the selected product.
        product_name: From the selected product.
        catalog: Full property catalog.
        sources: Sources discovered by the search step, reused as-is.
        options: AI settings.
        search_method: Method of the result being analyzed.
    """

    product_name: str
    article_number: Optional[str] = None
    catalog: PropertyCatalog = field(default_factory=PropertyCatalog)
    sources: Tuple[Source, ...] = ()
    options: AnalysisOptions = field(default_factory=AnalysisOptions)
    search_method: SearchMethod = SearchMethod.AUTO

    def to_payload(self) -> Dict[str, Any]:
        """Request body in the format of the analysis endpoint."""
        payload: Dict[str, Any] = {
            "searchMethod": self.search_method.value,
            "productName": self.product_name,
            "properties": self.catalog.to_request_list(),
            "sources": [
                {
                    k: v
                    for k, v in source.to_dict().items()
                    if k in ("url", "title", "sourceLabel")
                }
                for source in self.sources
            ],
            "useAI": self.options.use_ai,
            "searchEngine": "google",
            "maxResults": self.options.max_results,
        }
        if self.article_number is not None:
            payload["articleNumber"] = self.article_number
        if self.options.use_ai:
            payload["aiModelProvider"] = self.options.model_provider
        if self.options.min_consistent_sources is not None:
            payload["minConsistentSources"] = self.options.min_consistent_sources
        return payload


class SearchBackend(ABC):
    """Base interface for search/analysis collaborators."""

    @abstractmethod
    async def search(self, query: SearchQuery) -> SearchResult:
        """Run the initial search.

        Returns:
            A result that may be partial (sources found, properties pending).
        """
        pass

    @abstractmethod
    async def analyze(self, request: AnalysisRequest) -> SearchResult:
        """Extract properties from previously discovered sources.

        Returns:
            A result expected to be final; it may omit product sources.
        """
        pass


def sources_for_request(sources: List[Source]) -> Tuple[Source, ...]:
    """Strip retained page content before sending sources back out."""
    return tuple(
        Source(url=s.url, title=s.title, source_label=s.source_label)
        for s in sources
    )
