"""FastAPI application entry point: wires everything together.

Usage:
    python -m terraquote.main

The lifespan owns the process-wide collaborators (secrets cache, DB pool,
storage client) and hands them to requests through `app.state.services`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from terraquote.api.quotes import router as quotes_router
from terraquote.config import settings
from terraquote.services import QuoteServices

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting TerraQuote (env=%s)", settings.environment)
    if not settings.environment_configured:
        logger.warning("ENVIRONMENT not set to STAGING or PRODUCTION, quote requests will be refused")

    services = QuoteServices(settings)
    await services.start()
    app.state.services = services
    logger.info("Quote services started")

    try:
        yield
    finally:
        logger.info("Shutting down TerraQuote...")
        await services.close()
        logger.info("TerraQuote shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="TerraQuote API",
    description="Solar quote PDF generation for Terra Energy prospects",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(quotes_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "terraquote.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "STAGING",
        log_level=settings.log_level.lower(),
    )
