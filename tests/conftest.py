"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import AsyncMock

import pytest

from specharvest.core.catalog import PropertyCatalog
from specharvest.core.models import (
    Product,
    ProductMetadata,
    PropertyValue,
    SearchMethod,
    SearchResult,
    SearchStatus,
)
from specharvest.core.source import Source
from specharvest.services.backend import SearchBackend

# ============================================================================
# Source Fixtures
# ============================================================================


@pytest.fixture
def sample_sources():
    """Three distinct pages found by the search step."""
    return (
        Source(url="https://www.example.com/p/1", title="Example", source_label="S1"),
        Source(url="https://shop.test/item?id=7", title="Shop", source_label="S2"),
        Source(url="https://maker.test/datasheet.pdf", source_label="S3"),
    )


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def catalog_records():
    """Catalog records in the wire format, deliberately out of order."""
    return [
        {"id": 3, "name": "Weight", "orderIndex": 2, "expectedFormat": "kg"},
        {"id": 1, "name": "Voltage", "orderIndex": 0, "description": "Rated V"},
        {"id": 2, "name": "Power", "orderIndex": 1},
    ]


@pytest.fixture
def catalog(catalog_records):
    """Catalog ordered Voltage, Power, Weight."""
    return PropertyCatalog.from_records(catalog_records)


# ============================================================================
# Result Fixtures
# ============================================================================


def make_property(name, value, confidence=90, sources=(), **kwargs):
    """Build a PropertyValue with sensible defaults."""
    return PropertyValue(
        name=name, value=value, confidence=confidence, sources=sources, **kwargs
    )


@pytest.fixture
def partial_result(sample_sources):
    """Search-step result: sources found, no properties extracted."""
    product = Product(
        id="p-1",
        product_name="Drill X100",
        article_number="4711",
        metadata=ProductMetadata(sources=sample_sources),
    )
    return SearchResult(
        products=(product,),
        search_method=SearchMethod.AUTO,
        search_status=SearchStatus.SEARCHING,
        status_message="Step 1/2: sources found",
    )


@pytest.fixture
def final_result(sample_sources):
    """Analysis result with two products; the response omits metadata sources."""
    first = Product(
        id="p-1",
        product_name="Drill X100",
        article_number="4711",
        properties={
            "Voltage": make_property(
                "Voltage", "18 V", 95, sample_sources[:3], consistency_count=3
            ),
            "Power": make_property("Power", "500 W", 72, sample_sources[:2]),
        },
    )
    second = Product(
        id="p-2",
        product_name="Drill X200",
        article_number="4712",
        properties={"Weight": make_property("Weight", "1.8 kg", 40)},
    )
    return SearchResult(
        products=(first, second),
        search_method=SearchMethod.AUTO,
        search_status=SearchStatus.COMPLETE,
    )


@pytest.fixture
def mock_backend():
    """Search backend whose calls are AsyncMocks."""
    backend = AsyncMock(spec=SearchBackend)
    return backend
