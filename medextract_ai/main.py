"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medextract_ai.api.dependencies import build_processing_service
from medextract_ai.api.routes import documents, health
from medextract_ai.core.config.settings import settings
from medextract_ai.infrastructure.database.connection import Database

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Args:
        app: FastAPI application
    """
    # Startup: open the reference database pool and wire the workflow
    database = Database()
    await database.connect()
    logger.info("Database connection established")

    app.state.database = database
    app.state.processing_service = build_processing_service(database)
    logger.info(
        "Document processing service ready",
        extra={
            "notification_channel": settings.notification_channel,
            "category_detection": settings.category_detection_enabled,
        },
    )

    yield

    # Shutdown: cleanup
    await database.dispose()
    logger.info("Database connection closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Medical document extraction service - scanned document to structured patient data",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix=settings.api_v1_prefix)
app.include_router(documents.router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }
