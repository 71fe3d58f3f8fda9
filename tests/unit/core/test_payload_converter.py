"""Unit tests for the legacy wire-format converter."""

import pytest

from specharvest.core.models import ResultPhase, SearchMethod, SearchStatus
from specharvest.core.payload_converter import PayloadConverter


@pytest.fixture
def search_payload():
    """Partial response of the search step in the legacy format."""
    return {
        "searchMethod": "auto",
        "searchStatus": "searching",
        "statusMessage": "Step 1/2: 2 pages found",
        "minConsistentSources": 2,
        "products": [
            {
                "id": "abc",
                "articleNumber": "4711",
                "productName": "Drill X100",
                "properties": {
                    "__meta_sources": {
                        "name": "__meta_sources",
                        "value": "Found Web Pages",
                        "sources": [
                            {"url": "https://a.test/1", "title": "A"},
                            {"url": "https://b.test/2", "sourceLabel": "S2"},
                        ],
                        "confidence": 100,
                        "isConsistent": True,
                    },
                    "__search_status": {
                        "name": "__search_status",
                        "value": "searching",
                    },
                    "__debug": {"value": "x"},
                },
                "__rawContent": [
                    {
                        "sourceLabel": "S1",
                        "content": "page text",
                        "url": "https://a.test/1",
                    }
                ],
            }
        ],
    }


@pytest.fixture
def analysis_payload():
    return {
        "searchMethod": "url",
        "products": [
            {
                "productName": "Drill X100",
                "properties": {
                    "Power": {
                        "name": "Power",
                        "value": "500 W",
                        "confidence": 88,
                        "sources": [{"url": "https://a.test/1"}],
                        "isConsistent": True,
                        "consistencyCount": 2,
                        "sourceCount": 3,
                    },
                    "Color": "red",
                },
            }
        ],
    }


@pytest.mark.unit
class TestFromPayload:
    """Tests for PayloadConverter.from_payload()."""

    def test_reserved_keys_become_metadata(self, search_payload):
        """__meta_sources and __search_status are lifted out of properties."""
        result = PayloadConverter.from_payload(search_payload)
        product = result.products[0]

        assert product.properties == {}
        assert [s.url for s in product.metadata.sources] == [
            "https://a.test/1",
            "https://b.test/2",
        ]
        assert product.metadata.sources[1].source_label == "S2"
        assert product.metadata.sources_label == "Found Web Pages"
        assert product.metadata.search_status == "searching"
        assert product.metadata.raw_content[0].content == "page text"

    def test_result_fields(self, search_payload):
        """Top-level fields are converted and the phase is tagged."""
        result = PayloadConverter.from_payload(search_payload)

        assert result.search_method == SearchMethod.AUTO
        assert result.search_status == SearchStatus.SEARCHING
        assert result.min_consistent_sources == 2
        assert result.phase == ResultPhase.PARTIAL
        assert result.is_partial

    def test_analysis_properties(self, analysis_payload):
        """Property entries map to PropertyValue, scalars are accepted."""
        result = PayloadConverter.from_payload(analysis_payload)
        product = result.products[0]
        power = product.properties["Power"]

        assert result.search_method == SearchMethod.URL
        assert result.phase == ResultPhase.FINAL
        assert product.id == "product-0"
        assert product.metadata.sources is None
        assert power.value == "500 W"
        assert power.confidence == 88
        assert power.consistency_count == 2
        assert power.source_count == 3
        assert power.sources[0].url == "https://a.test/1"
        assert product.properties["Color"].value == "red"
        assert product.properties["Color"].confidence == 0

    def test_untagged_when_disabled(self, analysis_payload):
        """tag_phase=False leaves the phase unset."""
        result = PayloadConverter.from_payload(analysis_payload, tag_phase=False)
        assert result.phase is None

    @pytest.mark.parametrize(
        "payload",
        [None, [], "oops", {}, {"products": "nope"}, {"products": [1, "x"]}],
    )
    def test_malformed_payload_is_empty(self, payload):
        """Malformed payloads degrade to an empty result."""
        assert PayloadConverter.from_payload(payload).is_empty

    def test_unknown_method_and_status(self):
        """Unknown enum values fall back instead of raising."""
        result = PayloadConverter.from_payload(
            {"searchMethod": "telepathy", "searchStatus": "???", "products": []}
        )
        assert result.search_method == SearchMethod.AUTO
        assert result.search_status is None


@pytest.mark.unit
class TestToPayload:
    """Tests for converting back to the legacy format."""

    def test_reserved_keys_reemitted(self, search_payload):
        """Metadata goes back under the reserved property keys."""
        result = PayloadConverter.from_payload(search_payload)
        data = PayloadConverter.to_payload(result)
        properties = data["products"][0]["properties"]

        assert properties["__meta_sources"]["value"] == "Found Web Pages"
        assert len(properties["__meta_sources"]["sources"]) == 2
        assert properties["__search_status"]["value"] == "searching"
        assert "__debug" not in properties
        assert data["products"][0]["__rawContent"][0]["sourceLabel"] == "S1"
        assert data["searchStatus"] == "searching"

    def test_property_fields(self, analysis_payload):
        """Optional property fields are emitted only when set."""
        result = PayloadConverter.from_payload(analysis_payload)
        properties = PayloadConverter.to_payload(result)["products"][0]["properties"]

        assert properties["Power"]["consistencyCount"] == 2
        assert "isConsistent" not in properties["Color"]
        assert "__meta_sources" not in properties


@pytest.mark.unit
class TestMalformedFields:
    """Malformed optional fields degrade instead of raising."""

    def test_non_list_product_raw_content(self):
        """A scalar __rawContent yields no entries."""
        result = PayloadConverter.from_payload(
            {"products": [{"productName": "X", "properties": {}, "__rawContent": 5}]}
        )
        assert result.products[0].metadata.raw_content == ()

    def test_non_list_result_raw_content(self):
        """A scalar result-level rawContent yields no entries."""
        result = PayloadConverter.from_payload(
            {"rawContent": True, "products": [{"productName": "X"}]}
        )
        assert result.raw_content == ()
        assert len(result.products) == 1

    def test_non_string_status_message(self):
        """Non-string status messages are coerced to text."""
        result = PayloadConverter.from_payload(
            {"statusMessage": 2, "products": [{"productName": "X"}]}
        )
        assert result.status_message == "2"
        assert result.phase == ResultPhase.FINAL
