"""Core constants for Spec Harvest.

This module defines shared constants used across the engine to ensure
consistency and avoid hardcoded values in multiple locations.
"""

# Identity fields
ARTICLE_NUMBER_FIELD = "Artikelnummer"
"""Property name under which the article number is emitted."""

PRODUCT_NAME_FIELD = "ArtikelName"
"""Property name under which the product name is emitted."""

IDENTITY_FIELDS = (ARTICLE_NUMBER_FIELD, PRODUCT_NAME_FIELD)

USER_INPUT_CONFIDENCE = 100
"""Confidence assigned to values taken directly from user input."""

# Placeholders
NOT_FOUND_VALUE = "Not found"
"""Value synthesized for catalog properties missing from a product."""

NOT_FOUND_ALIASES = frozenset({"not found", "nicht gefunden"})
"""Lower-cased values treated as "no value" (the extractor emits several)."""

# Reserved keys of the legacy wire format
RESERVED_PREFIX = "__"
META_SOURCES_KEY = "__meta_sources"
SEARCH_STATUS_KEY = "__search_status"
RAW_CONTENT_KEY = "__rawContent"
META_SOURCES_LABEL = "Found Web Pages"

# Partial-result markers emitted by the search step
STEP_ONE_MARKERS = ("Step 1/2", "Click 'Analyze Content'")

# Display defaults
DEFAULT_SOURCES_PREVIEW_LIMIT = 4
DEFAULT_PRODUCTS_PREVIEW_LIMIT = 2
DEFAULT_RAW_CONTENT_PREVIEW_CHARS = 2000

# Confidence tier thresholds (inclusive lower bounds)
HIGH_CONFIDENCE_THRESHOLD = 85
MEDIUM_CONFIDENCE_THRESHOLD = 70
LOW_CONFIDENCE_THRESHOLD = 30

# Agreement counts for consistency tiers
STRONG_AGREEMENT_COUNT = 3
MODERATE_AGREEMENT_COUNT = 2
