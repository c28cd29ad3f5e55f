"""Main entry point for the Hindu Unity application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from hindu_unity import __version__
from hindu_unity.api.v1 import (
    admin_router,
    auth_router,
    events_router,
    feed_router,
    live_streams_router,
    locations_router,
    media_router,
    moderation_router,
    posts_router,
    profiles_router,
    protests_router,
    realtime_router,
)
from hindu_unity.core.logging import configure_logging
from hindu_unity.core.settings import settings
from hindu_unity.services.geocoding import get_geocoding_client
from hindu_unity.services.media import get_media_client

logger = logging.getLogger(__name__)

DESCRIPTION = "Community network API: feed, events, protests and moderation"

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description=DESCRIPTION,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(feed_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(events_router, prefix="/api/v1")
app.include_router(protests_router, prefix="/api/v1")
app.include_router(profiles_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(media_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(live_streams_router, prefix="/api/v1")
app.include_router(realtime_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logger.info("%s %s starting", settings.app_name, __version__)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_media_client().close()
    await get_geocoding_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": __version__,
        "description": DESCRIPTION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hindu_unity.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
