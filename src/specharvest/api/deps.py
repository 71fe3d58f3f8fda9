"""Dependency injection for FastAPI routes.

Provides singleton services and per-request dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from specharvest.app_utils.config_schema import SpecHarvestConfig
from specharvest.services import ConfigService


@lru_cache
def get_config_service() -> ConfigService:
    """Get the singleton ConfigService instance."""
    return ConfigService()


def get_config(
    config_service: Annotated[ConfigService, Depends(get_config_service)],
) -> SpecHarvestConfig:
    """Load the current configuration for a request."""
    return config_service.load()


ConfigServiceDep = Annotated[ConfigService, Depends(get_config_service)]
ConfigDep = Annotated[SpecHarvestConfig, Depends(get_config)]
