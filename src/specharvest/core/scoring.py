"""Display tiers derived from confidence scores and source agreement.

Both scorers are pure functions of their inputs. Confidence tiers use
inclusive lower bounds (85, 70, 30) and cover the full 0-100 range.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional

from specharvest.core.constants import (
    HIGH_CONFIDENCE_THRESHOLD,
    LOW_CONFIDENCE_THRESHOLD,
    MEDIUM_CONFIDENCE_THRESHOLD,
    MODERATE_AGREEMENT_COUNT,
    NOT_FOUND_ALIASES,
    STRONG_AGREEMENT_COUNT,
)

if TYPE_CHECKING:
    from specharvest.core.models import PropertyValue


class ConfidenceTier(str, Enum):
    """Coarse bucket for a 0-100 confidence score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    VERY_LOW = "very_low"


class ConsistencyTier(str, Enum):
    """Coarse bucket for cross-source agreement."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    UNKNOWN = "unknown"


def confidence_tier(
    confidence: float,
    high: int = HIGH_CONFIDENCE_THRESHOLD,
    medium: int = MEDIUM_CONFIDENCE_THRESHOLD,
    low: int = LOW_CONFIDENCE_THRESHOLD,
) -> ConfidenceTier:
    """Map a confidence score to its display tier.

    Scores outside 0-100 are clamped first; non-finite scores are VERY_LOW.
    """
    if not math.isfinite(confidence):
        return ConfidenceTier.VERY_LOW
    confidence = max(0, min(100, confidence))
    if confidence >= high:
        return ConfidenceTier.HIGH
    if confidence >= medium:
        return ConfidenceTier.MEDIUM
    if confidence >= low:
        return ConfidenceTier.LOW
    return ConfidenceTier.VERY_LOW


def consistency_tier(
    has_value: bool,
    automated_mode: bool,
    agreement_count: Optional[int] = None,
    strong: int = STRONG_AGREEMENT_COUNT,
    moderate: int = MODERATE_AGREEMENT_COUNT,
) -> ConsistencyTier:
    """Map cross-source agreement to its display tier.

    Agreement is only meaningful in automated multi-source mode and for
    fields that have a value; everything else is UNKNOWN. A missing count
    means a single source.
    """
    if not automated_mode or not has_value:
        return ConsistencyTier.UNKNOWN
    count = agreement_count or 1
    if count >= strong:
        return ConsistencyTier.STRONG
    if count == moderate:
        return ConsistencyTier.MODERATE
    return ConsistencyTier.WEAK


def has_value(value: Optional[str]) -> bool:
    """Check whether a property value is an actual value, not a placeholder."""
    if value is None:
        return False
    stripped = value.strip()
    return bool(stripped) and stripped.lower() not in NOT_FOUND_ALIASES


def support_count(prop: "PropertyValue") -> int:
    """Number of sources backing a value (agreement count, else citations)."""
    return prop.consistency_count or len(prop.sources)


def support_tier(prop: Optional["PropertyValue"]) -> ConsistencyTier:
    """Tier used to highlight table and export cells by source support."""
    if prop is None or not has_value(prop.value):
        return ConsistencyTier.UNKNOWN
    count = support_count(prop)
    if count >= STRONG_AGREEMENT_COUNT:
        return ConsistencyTier.STRONG
    if count == MODERATE_AGREEMENT_COUNT:
        return ConsistencyTier.MODERATE
    if count == 1:
        return ConsistencyTier.WEAK
    return ConsistencyTier.UNKNOWN


def average_confidence(properties: Iterable["PropertyValue"]) -> int:
    """Rounded mean confidence over properties with a positive score."""
    scores = [p.confidence for p in properties if p.confidence > 0]
    if not scores:
        return 0
    return round(sum(scores) / len(scores))


@dataclass(frozen=True)
class PropertyScore:
    """Both display tiers for a single property."""

    confidence: ConfidenceTier
    consistency: ConsistencyTier
    support: ConsistencyTier


def score_property(prop: "PropertyValue", automated_mode: bool) -> PropertyScore:
    """Score one property for display."""
    present = has_value(prop.value)
    return PropertyScore(
        confidence=confidence_tier(prop.confidence),
        consistency=consistency_tier(present, automated_mode, prop.consistency_count),
        support=support_tier(prop),
    )
