"""Leasing Engine - FastAPI host for the reconciliation scheduler."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from leasing import __version__
from leasing.core.config import get_settings
from leasing.core.database import create_engine, create_session_factory
from leasing.core.env_validation import validate_environment
from leasing.core.logging_config import configure_logging
from leasing.schemas.reconciliation import HealthResponse
from leasing.services.reconciliation import ReconciliationScheduler

# Hard-fails (exit 1) if required configuration is missing
validate_environment()

settings = get_settings()
configure_logging(settings.log_level)

SHUTDOWN_TIMEOUT_SECONDS = 30.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the scheduler with the process and stop it on shutdown."""
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    scheduler = ReconciliationScheduler.from_settings(settings, create_session_factory(engine))
    app.state.scheduler = scheduler

    if settings.reconciliation_enabled:
        scheduler.start()

    yield

    await scheduler.stop(timeout=SHUTDOWN_TIMEOUT_SECONDS)
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Lease lifecycle reconciliation: contract activation, expiration and room-hold release.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint with the scheduler state and last cycle."""
    scheduler: ReconciliationScheduler = request.app.state.scheduler
    return HealthResponse(
        status="healthy",
        service=settings.app_name,
        scheduler=scheduler.state,
        last_cycle=scheduler.last_report,
    )


def run() -> None:
    """Serve the API host (and its scheduler) with uvicorn."""
    uvicorn.run(
        "leasing.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
