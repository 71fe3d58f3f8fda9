"""Unit tests for backend request types."""

import pytest

from specharvest.core.models import SearchMethod
from specharvest.core.source import Source
from specharvest.services.backend import (
    AnalysisOptions,
    AnalysisRequest,
    SearchQuery,
    sources_for_request,
)


@pytest.mark.unit
class TestSearchQuery:
    """Tests for SearchQuery validation."""

    def test_requires_product_name(self):
        with pytest.raises(ValueError, match="product_name"):
            SearchQuery(product_name="  ")

    def test_url_method_requires_url(self):
        """URL searches need the page to start from."""
        with pytest.raises(ValueError, match="product_url"):
            SearchQuery(product_name="Drill", search_method=SearchMethod.URL)

        query = SearchQuery(
            product_name="Drill",
            search_method=SearchMethod.URL,
            product_url="https://maker.test/drill",
        )
        assert query.product_url == "https://maker.test/drill"


@pytest.mark.unit
class TestAnalysisRequest:
    """Tests for AnalysisRequest.to_payload()."""

    def test_payload(self, catalog, sample_sources):
        """The payload carries catalog, sources and AI settings."""
        request = AnalysisRequest(
            product_name="Drill X100",
            article_number="4711",
            catalog=catalog,
            sources=tuple(sample_sources),
            options=AnalysisOptions(model_provider="anthropic", max_results=5),
        )

        payload = request.to_payload()

        assert payload["searchMethod"] == "auto"
        assert payload["productName"] == "Drill X100"
        assert payload["articleNumber"] == "4711"
        assert [p["name"] for p in payload["properties"]] == [
            "Voltage",
            "Power",
            "Weight",
        ]
        assert payload["sources"][0]["url"] == sample_sources[0].url
        assert payload["useAI"] is True
        assert payload["aiModelProvider"] == "anthropic"
        assert payload["maxResults"] == 5
        assert "minConsistentSources" not in payload

    def test_payload_without_ai(self):
        """Provider and optional fields are omitted when not applicable."""
        payload = AnalysisRequest(
            product_name="Drill", options=AnalysisOptions(use_ai=False)
        ).to_payload()

        assert payload["useAI"] is False
        assert "aiModelProvider" not in payload
        assert "articleNumber" not in payload
        assert payload["properties"] == []
        assert payload["sources"] == []


@pytest.mark.unit
def test_sources_for_request_strips_content():
    """Retained page content is not sent back to the backend."""
    sources = [
        Source(
            url="https://a.test/1",
            title="A",
            source_label="S1",
            content="page text",
            content_length=9,
        )
    ]

    stripped = sources_for_request(sources)

    assert stripped == (Source(url="https://a.test/1", title="A", source_label="S1"),)
    assert "content" not in stripped[0].to_dict()
