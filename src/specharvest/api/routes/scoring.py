"""Scoring lookup endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from specharvest.api.deps import ConfigDep
from specharvest.api.schemas import ConfidenceTierResponse
from specharvest.core.scoring import confidence_tier

router = APIRouter()


@router.get("/confidence/{value}", response_model=ConfidenceTierResponse)
async def get_confidence_tier(
    value: Annotated[float, Path(allow_inf_nan=False)], config: ConfigDep
) -> ConfidenceTierResponse:
    """Map a confidence score to its display tier."""
    tier = confidence_tier(
        value,
        high=config.scoring.high_confidence,
        medium=config.scoring.medium_confidence,
        low=config.scoring.low_confidence,
    )
    return ConfidenceTierResponse(confidence=value, tier=tier.value)
