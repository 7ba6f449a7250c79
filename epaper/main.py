"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from epaper.api import api_router
from epaper.api.errors import register_exception_handlers
from epaper.config import get_settings
from epaper.database import DbSession
from epaper.logging_config import configure_logging
from epaper.middleware import RequestContextMiddleware

settings = get_settings()

configure_logging(debug=settings.debug)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application lifecycle events."""
    # Startup
    logger.info("Starting %s", settings.app_name, extra={"event": "app.startup"})
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name, extra={"event": "app.shutdown"})


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Admin API for digital newspaper editions, pages and navigation hotspots",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(api_router, prefix=f"/{settings.api_version}")


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "service": settings.app_name,
        "version": "0.1.0",
        "status": "operational",
    }


@app.get("/health")
async def health(db: DbSession):
    """Health check endpoint, including database reachability."""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning(f"Health check database query failed: {e}", extra={"event": "health.db_error"})
        database = "error"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "database": database,
    }
