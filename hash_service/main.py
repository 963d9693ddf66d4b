"""
Hash Service - FastAPI Entry Point

HTTP API over the configured repository reference. Provides endpoints for:
- Raw file content retrieval
- Aggregate SHA-256 hashing of an ordered list of files
- Health checks
- Prometheus metrics (/metrics)
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import aiohttp
from fastapi import Depends, FastAPI, Request
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from pydantic import BaseModel, Field

from shared.api import (
    CorrelationIdMiddleware,
    RequestMetricsMiddleware,
    create_http_metrics,
    prometheus_metrics,
    register_error_handlers,
)
from shared.clients.config_client import ConfigServiceClient
from shared.observability import setup_observability, shutdown_observability
from shared.repository import AggregateHasher, ContentFetcher, EmptyRequest

from .config import HashServiceConfig

logger = logging.getLogger(__name__)

SERVICE_NAME = "hash_service"


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


class GetFileRequest(BaseModel):
    """Request body for a single file's content."""
    file_name: str = Field(..., alias="fileName")


class GetFileResponse(BaseModel):
    fileContent: str


class HashFilesRequest(BaseModel):
    """Request body for an aggregate hash; order of ``files`` matters."""
    files: Optional[List[str]] = None


class HashFilesResponse(BaseModel):
    hash: str


# =============================================================================
# APPLICATION SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: HashServiceConfig = app.state.settings
    setup_observability(
        service_name=SERVICE_NAME,
        log_level=settings.log_level,
        json_logs=settings.json_logs,
    )
    logger.info(
        f"Hash Service starting up (config service: {settings.config_service_url})"
    )
    yield
    logger.info("Hash Service shutting down...")
    shutdown_observability()


app = FastAPI(
    title="Hash Service",
    description="Raw file content and aggregate hashing over a configured repository",
    version="1.0.0",
    lifespan=lifespan,
)
app.state.settings = HashServiceConfig.from_env()

register_error_handlers(app)
app.add_middleware(RequestMetricsMiddleware, metrics=create_http_metrics("hash_service"))
app.add_middleware(CorrelationIdMiddleware)

# Instrument FastAPI with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)

app.add_api_route("/metrics", prometheus_metrics, methods=["GET"], tags=["System"], include_in_schema=False)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_settings(request: Request) -> HashServiceConfig:
    return request.app.state.settings


async def get_http_session() -> AsyncIterator[aiohttp.ClientSession]:
    """One client session per request, shared by all of its fetches."""
    async with aiohttp.ClientSession() as session:
        yield session


def get_config_client(
    session: aiohttp.ClientSession = Depends(get_http_session),
    settings: HashServiceConfig = Depends(get_settings),
) -> ConfigServiceClient:
    return ConfigServiceClient(
        settings.config_service_url,
        session=session,
        timeout_seconds=settings.config_timeout_seconds,
    )


def get_hasher(
    session: aiohttp.ClientSession = Depends(get_http_session),
    settings: HashServiceConfig = Depends(get_settings),
) -> AggregateHasher:
    fetcher = ContentFetcher(session, timeout_seconds=settings.fetch_timeout_seconds)
    return AggregateHasher(
        fetcher,
        cancel_on_failure=settings.cancel_on_failure,
        raw_host=settings.raw_content_host,
    )


# =============================================================================
# API ENDPOINTS
# =============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    return HealthResponse(status="healthy", service=SERVICE_NAME, version="1.0.0")


@app.post("/get_file_content", response_model=GetFileResponse, tags=["Files"])
async def get_file_content(
    body: GetFileRequest,
    config_client: ConfigServiceClient = Depends(get_config_client),
    hasher: AggregateHasher = Depends(get_hasher),
):
    """Return the raw content of one file from the configured repository."""
    config = await config_client.get_configuration()
    content = await hasher.fetch_file(config, body.file_name)
    return GetFileResponse(fileContent=content.decode("utf-8", errors="replace"))


@app.post("/hash_files", response_model=HashFilesResponse, tags=["Files"])
async def hash_files(
    body: HashFilesRequest,
    config_client: ConfigServiceClient = Depends(get_config_client),
    hasher: AggregateHasher = Depends(get_hasher),
):
    """
    Hash the content of the given files.

    Each file is fetched concurrently; the result is the SHA-256 of the
    per-file SHA-256 digests concatenated in request order.
    """
    if not body.files:
        raise EmptyRequest()

    # One snapshot for every file in the request
    config = await config_client.get_configuration()
    digest = await hasher.hash_files(config, body.files)
    return HashFilesResponse(hash=digest)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run("hash_service.main:app", host=settings.host, port=settings.port)
