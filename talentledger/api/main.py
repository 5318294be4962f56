"""
TalentLedger API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import FastAPI, Request
from sqlalchemy import text

from talentledger import __version__
from talentledger.errors import StorageError
from .schemas import HealthResponse
from .routes import auth, talents
from .middleware import setup_logging, setup_exception_handlers
from .dependencies import (
    get_settings,
    ServiceContainer,
    Settings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the database on startup so schema problems surface before the
    first request, and releases the engine on shutdown.
    """
    services: ServiceContainer = app.state.services
    logger.info(f"Starting TalentLedger in {services.settings.environment} mode")

    try:
        logger.info("Initializing database...")
        _ = services.database

        logger.info("TalentLedger started successfully")

        yield

    finally:
        logger.info("Shutting down TalentLedger...")
        services.close()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="TalentLedger",
        description="Personal talent catalog with an auditable score ledger.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.services = ServiceContainer(settings)

    # ==========================================================================
    # Middleware
    # ==========================================================================

    setup_logging(app, structured=settings.environment != "development")

    setup_exception_handlers(app)

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api/v1"

    app.include_router(auth.router, prefix=api_prefix)
    app.include_router(talents.router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "TalentLedger",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(request: Request) -> HealthResponse:
        """
        Health check endpoint.

        Pings the database and reports how many sessions are live.
        """
        services: ServiceContainer = request.app.state.services

        components = {}
        overall_healthy = True

        try:
            with services.database.session() as session:
                session.execute(text("SELECT 1"))
            components["database"] = "healthy"
        except StorageError as e:
            components["database"] = f"unhealthy: {e.detail or e.message}"
            overall_healthy = False

        components["sessions"] = "in_memory"

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            components=components,
            active_sessions=services.session_registry.active_count(),
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    # Sessions live in process memory, so a single worker is required.
    uvicorn.run(
        "talentledger.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        workers=1,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
