"""Unit tests for raw content inspection helpers."""

import pytest

from specharvest.core.models import Product, ProductMetadata, SearchResult
from specharvest.core.source import RawContentEntry
from specharvest.services.raw_content import (
    TRUNCATION_SUFFIX,
    bundle,
    collect_raw_content,
    content_filename,
    entry_filename,
    entry_label,
    preview,
)


@pytest.mark.unit
class TestPreview:
    """Tests for preview()."""

    def test_short_content_unchanged(self):
        entry = RawContentEntry(source_label="S1", content="short")
        assert preview(entry) == "short"

    def test_long_content_truncated(self):
        """Content beyond the limit is cut and marked."""
        entry = RawContentEntry(source_label="S1", content="x" * 2500)

        text = preview(entry)

        assert text == "x" * 2000 + TRUNCATION_SUFFIX
        assert preview(entry, max_chars=10).startswith("x" * 10 + "...")


@pytest.mark.unit
class TestEntryLabel:
    """Tests for entry_label() fallbacks."""

    def test_title_wins(self):
        entry = RawContentEntry(
            source_label="S1", content="", title="Datasheet", url="https://a.test/x"
        )
        assert entry_label(entry) == "Datasheet"

    def test_url_host(self):
        entry = RawContentEntry(
            source_label="S1", content="", url="https://shop.test/p?id=1"
        )
        assert entry_label(entry) == "shop.test"

    def test_source_label_then_unknown(self):
        assert entry_label(RawContentEntry(source_label="S1", content="")) == "S1"
        assert (
            entry_label(RawContentEntry(source_label="", content=""))
            == "Unknown source"
        )


@pytest.mark.unit
def test_bundle():
    """Entries are joined with numbered headers."""
    entries = [
        RawContentEntry(source_label="S1", content="alpha", url="https://a.test/1"),
        RawContentEntry(source_label="S2", content="beta", content_length=40),
    ]

    text = bundle(entries)

    assert text.startswith("---------- CONTENT SOURCE #1 ----------\n")
    assert "URL: https://a.test/1" in text
    assert "Length: 5 characters" in text
    assert "---------- CONTENT SOURCE #2 ----------\nSource: S2\n" in text
    assert "Length: 40 characters" in text
    assert text.endswith("\n\nbeta")


@pytest.mark.unit
class TestFilenames:
    """Tests for download filenames."""

    def test_article_number(self):
        product = Product(id=1, product_name="Drill", article_number="4711")
        assert content_filename(product) == "ai-content-4711.txt"

    def test_sanitized_name(self):
        product = Product(id=1, product_name="Drill X/100 (blue)")
        assert content_filename(product) == "ai-content-Drill_X_100__blue_.txt"

    def test_no_product(self):
        assert content_filename(None) == "ai-content.txt"

    def test_entry_filename_is_one_based(self):
        assert entry_filename(0) == "search-content-1.txt"


@pytest.mark.unit
class TestCollect:
    """Tests for collect_raw_content()."""

    def test_result_level_entries_preferred(self):
        """Result-level content wins over product metadata."""
        result_entry = RawContentEntry(source_label="R", content="r")
        product_entry = RawContentEntry(source_label="P", content="p")
        result = SearchResult(
            products=(
                Product(
                    id=1,
                    product_name="Drill",
                    metadata=ProductMetadata(raw_content=(product_entry,)),
                ),
            ),
            raw_content=(result_entry,),
        )

        assert collect_raw_content(result) == [result_entry]

    def test_falls_back_to_first_product(self):
        entry = RawContentEntry(source_label="P", content="p")
        result = SearchResult(
            products=(
                Product(
                    id=1,
                    product_name="Drill",
                    metadata=ProductMetadata(raw_content=(entry,)),
                ),
            )
        )
        assert collect_raw_content(result) == [entry]

    def test_nothing_to_collect(self):
        assert collect_raw_content(None) == []
        assert collect_raw_content(SearchResult()) == []
