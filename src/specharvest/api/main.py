"""FastAPI application factory and entry point."""

import argparse
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from specharvest import __version__
from specharvest.api.deps import ConfigServiceDep, get_config_service
from specharvest.api.routes import config, results, scoring
from specharvest.api.schemas import HealthResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Initializing Spec Harvest API...")
    config_service = get_config_service()
    config_service.load()
    logger.info("Using config %s", config_service.config_file)

    yield

    logger.info("Shutting down Spec Harvest API...")
    get_config_service.cache_clear()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Spec Harvest API",
        description="Reconcile, score and export product technical data",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware - allow all origins in development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(results.router, prefix="/api/results", tags=["results"])
    app.include_router(scoring.router, prefix="/api/scoring", tags=["scoring"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check(config_service: ConfigServiceDep) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            version=__version__,
            config_file=str(config_service.config_file),
            config_present=config_service.config_file.exists(),
        )

    return app


# Create default app instance
app = create_app()


def run(argv=None) -> None:
    """Run the API server (CLI entry point)."""
    parser = argparse.ArgumentParser(description="Spec Harvest API Server")
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    args = parser.parse_args(argv)
    serve(args.host, args.port, args.reload)


def serve(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Start uvicorn with the default app."""
    import specharvest.app_utils.logging_config  # noqa: F401

    display_host = "localhost" if host in ("0.0.0.0", "::") else host
    print(f"\n  Spec Harvest v{__version__}")
    print(f"  API listening on: http://{display_host}:{port}\n")

    uvicorn.run(
        "specharvest.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run()
