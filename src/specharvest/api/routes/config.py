"""Configuration endpoints."""

from fastapi import APIRouter

from specharvest.api.deps import ConfigDep
from specharvest.api.schemas import (
    ConfigResponse,
    DisplayConfigSchema,
    ExportConfigSchema,
    ScoringConfigSchema,
    WorkflowConfigSchema,
)

router = APIRouter()


def _config_to_response(config) -> ConfigResponse:
    """Convert SpecHarvestConfig to response schema."""
    data = config.to_dict()
    return ConfigResponse(
        display=DisplayConfigSchema(**data["display"]),
        scoring=ScoringConfigSchema(**data["scoring"]),
        export=ExportConfigSchema(**data["export"]),
        workflow=WorkflowConfigSchema(**data["workflow"]),
    )


@router.get("", response_model=ConfigResponse)
async def get_config(config: ConfigDep) -> ConfigResponse:
    """Get current configuration."""
    return _config_to_response(config)
