"""Version 1 API endpoints."""

from .endpoints import (
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

__all__ = [
    "admin_router",
    "auth_router",
    "events_router",
    "feed_router",
    "live_streams_router",
    "locations_router",
    "media_router",
    "moderation_router",
    "posts_router",
    "profiles_router",
    "protests_router",
    "realtime_router",
]
