"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.errors import (
    APIError,
    anchor_error_handler,
    api_error_handler,
    generic_error_handler,
    validation_error_handler,
)
from api.routes import content, health, stages, verify
from core.config.runtime import RuntimeConfig, load_runtime_config
from core.schemas.errors import AnchorException
from core.storage import StorageGateway, build_storage_gateway
from orchestrator.content import ContentService
from orchestrator.pipeline import StagePipeline


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Configure root logging once; later calls are no-ops."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Provenance anchor API starting ({app.state.config.server.environment.value}, "
        f"storage={app.state.config.storage.backend})"
    )
    yield
    app.state.gateway.close()


def create_app(
    config: Optional[RuntimeConfig] = None,
    gateway: Optional[StorageGateway] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Runtime configuration; loaded from file/env when omitted
        gateway: Storage gateway; built from config.storage when omitted.
            One gateway is shared by every request.
    """
    config = config or load_runtime_config()
    configure_logging(config.server.log_level)

    if gateway is None:
        gateway = build_storage_gateway(config)

    app = FastAPI(
        title="Provenance Anchor API",
        description="""
HTTP API anchoring supply-chain stage records into content-addressed storage.

## Stage endpoints

Each returns 201 with a receipt holding the content address and the
stage's 0x-prefixed digests, only after the record is stored and pinned.

- **POST /api/v1/farmer/register**
- **POST /api/v1/fpo/purchase**
- **POST /api/v1/warehouse/update**
- **POST /api/v1/logistics/milestone**
- **POST /api/v1/processing/batch**
- **POST /api/v1/packaging/sku**
- **POST /api/v1/ai/score**

## Other endpoints

- **POST /api/v1/ai/verify** - Verify a commit-reveal pair
- **/api/v1/ipfs/...** - Raw upload, fetch and pin
- **GET /health** - Health check
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.gateway = gateway
    app.state.pipeline = StagePipeline(gateway, config=config.pipeline)
    app.state.content = ContentService(gateway)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(AnchorException, anchor_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(stages.router)
    app.include_router(verify.router)
    app.include_router(content.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    server = app.state.config.server
    uvicorn.run(app, host=server.host, port=server.port)
