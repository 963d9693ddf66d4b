"""
Config Service - FastAPI Entry Point

Holds the repository reference and branch that the hash service reads from.
Provides endpoints for:
- Checking out a repository/branch (with an optional existence check)
- Reading the current reference and branch
- Health checks
- Prometheus metrics (/metrics)
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from pydantic import BaseModel

from shared.api import (
    CorrelationIdMiddleware,
    RequestMetricsMiddleware,
    create_http_metrics,
    prometheus_metrics,
    register_error_handlers,
)
from shared.observability import setup_observability, shutdown_observability
from shared.repository import repository_reference

from .config import ConfigServiceConfig
from .store import RepositoryConfigStore
from .verifier import RepositoryVerifier

logger = logging.getLogger(__name__)

SERVICE_NAME = "config_service"


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    configured: bool


class CheckOutRequest(BaseModel):
    """Repository to check out, as ``owner/name``; empty branch means default."""
    ref: str = ""
    branch: str = ""


class CheckOutResponse(BaseModel):
    message: str


class DetailsResponse(BaseModel):
    gitRef: str
    branch: str


# =============================================================================
# APPLICATION SETUP
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: ConfigServiceConfig = app.state.settings
    setup_observability(
        service_name=SERVICE_NAME,
        log_level=settings.log_level,
        json_logs=settings.json_logs,
    )
    logger.info(
        f"Config Service starting up (verify_repository={settings.verify_repository})"
    )
    yield
    logger.info("Config Service shutting down...")
    shutdown_observability()


def create_app(settings: ConfigServiceConfig) -> FastAPI:
    """Build the config service app around a fresh store."""
    app = FastAPI(
        title="Config Service",
        description="Current repository reference and branch",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = RepositoryConfigStore(
        default_branch=settings.default_branch,
        github_url=settings.github_url,
    )
    app.state.verifier = RepositoryVerifier(
        github_url=settings.github_url,
        timeout_seconds=settings.verify_timeout_seconds,
    )

    register_error_handlers(app, invalid_payload_message="Invalid json")
    app.add_middleware(RequestMetricsMiddleware, metrics=_http_metrics)
    app.add_middleware(CorrelationIdMiddleware)
    FastAPIInstrumentor.instrument_app(app)

    app.add_api_route("/metrics", prometheus_metrics, methods=["GET"], tags=["System"], include_in_schema=False)
    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthResponse, tags=["System"])
    app.add_api_route("/check_out_ref", check_out_ref, methods=["POST"], response_model=CheckOutResponse, tags=["Config"])
    app.add_api_route("/details", get_details, methods=["GET"], response_model=DetailsResponse, tags=["Config"])
    return app


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_settings(request: Request) -> ConfigServiceConfig:
    return request.app.state.settings


def get_store(request: Request) -> RepositoryConfigStore:
    return request.app.state.store


def get_verifier(request: Request) -> RepositoryVerifier:
    return request.app.state.verifier


# =============================================================================
# API ENDPOINTS
# =============================================================================

async def health_check(store: RepositoryConfigStore = Depends(get_store)):
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version="1.0.0",
        configured=store.get().is_configured,
    )


async def check_out_ref(
    body: CheckOutRequest,
    settings: ConfigServiceConfig = Depends(get_settings),
    store: RepositoryConfigStore = Depends(get_store),
    verifier: RepositoryVerifier = Depends(get_verifier),
):
    """Set the repository reference and branch for the hash service."""
    branch = body.branch or store.default_branch

    # Reject unparseable refs before touching the network
    repository_reference(body.ref, github_url=settings.github_url)

    if settings.verify_repository:
        await verifier.verify(body.ref, branch)

    store.check_out(body.ref, branch)
    return CheckOutResponse(message="success")


async def get_details(store: RepositoryConfigStore = Depends(get_store)):
    """Return the current reference and branch (empty strings if unset)."""
    return DetailsResponse(**store.get().to_dict())


_http_metrics = create_http_metrics("config_service")
app = create_app(ConfigServiceConfig.from_env())


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run("config_service.main:app", host=settings.host, port=settings.port)
