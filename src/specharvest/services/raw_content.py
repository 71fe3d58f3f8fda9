"""Helpers for inspecting the raw page text collected during analysis."""

import re
from typing import List, Optional, Sequence
from urllib.parse import urlsplit

from specharvest.core.constants import DEFAULT_RAW_CONTENT_PREVIEW_CHARS
from specharvest.core.models import Product, SearchResult
from specharvest.core.source import RawContentEntry

TRUNCATION_SUFFIX = "...\n\n[content truncated]"
BUNDLE_FILENAME = "all-search-content.txt"


def preview(
    entry: RawContentEntry, max_chars: int = DEFAULT_RAW_CONTENT_PREVIEW_CHARS
) -> str:
    """Return the entry content, truncated for display."""
    if len(entry.content) <= max_chars:
        return entry.content
    return entry.content[:max_chars] + TRUNCATION_SUFFIX


def entry_label(entry: RawContentEntry) -> str:
    """Title of the entry, else the host of its URL, else its source label."""
    if entry.title:
        return entry.title
    if entry.url:
        host = urlsplit(entry.url).hostname
        if host:
            return host
    return entry.source_label or "Unknown source"


def bundle(entries: Sequence[RawContentEntry]) -> str:
    """Join entries into one downloadable text document."""
    blocks = []
    for number, entry in enumerate(entries, start=1):
        lines = [f"---------- CONTENT SOURCE #{number} ----------"]
        lines.append(f"Source: {entry_label(entry)}")
        if entry.url:
            lines.append(f"URL: {entry.url}")
        lines.append(f"Length: {entry.length} characters")
        lines.append("")
        lines.append(entry.content)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def content_filename(product: Optional[Product]) -> str:
    """Download filename for a product's raw content."""
    if product is None:
        return "ai-content.txt"
    if product.article_number:
        stem = product.article_number
    else:
        stem = re.sub(r"[^A-Za-z0-9]", "_", product.product_name or "product")
    return f"ai-content-{stem}.txt"


def collect_raw_content(result: Optional[SearchResult]) -> List[RawContentEntry]:
    """Result-level entries, else those of the first product."""
    if result is None:
        return []
    if result.raw_content:
        return list(result.raw_content)
    first = result.first_product
    if first is None:
        return []
    return list(first.metadata.raw_content)


def entry_filename(index: int) -> str:
    """Download filename for a single entry (0-based index)."""
    return f"search-content-{index + 1}.txt"
