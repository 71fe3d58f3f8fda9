"""Schemas shared by all Spec Harvest endpoints."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of a rejected request, as produced by ``HTTPException``."""

    detail: str = Field(..., description="Why the request was rejected")


class HealthResponse(BaseModel):
    """Liveness, package version and the config file in effect."""

    status: str = "ok"
    version: str
    config_file: str
    config_present: bool = Field(
        False, description="False until the first load writes the defaults"
    )
