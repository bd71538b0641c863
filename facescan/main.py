"""Main application module for the face scanning service."""
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from facescan.api import router as api_v1_router
from facescan.core.config import settings
from facescan.core.container import container
from facescan.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[Any, None]:
    """Handle application startup and shutdown events.

    Args:
        app: FastAPI application instance

    Returns:
        AsyncGenerator[Any, None]: Async context manager for app lifecycle
    """
    logger.info(
        "Starting up face scanning service",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )

    if not container.initialized:
        await container.initialize()
    logger.info("Initialized application services", profile_store=settings.PROFILE_STORE_PATH)

    yield

    logger.info("Shutting down face scanning service")
    await container.cleanup()
    logger.info("Cleaned up application resources")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix=settings.API_V1_STR)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint.

    Returns:
        dict: Health status
    """
    return {"status": "healthy"}


def run() -> None:
    """Serve the API with uvicorn using host and port from settings."""
    uvicorn.run("facescan.main:app", host=settings.HOST, port=settings.PORT)
