"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .auth import router as auth_router
from .events import router as events_router
from .feed import router as feed_router
from .live_streams import router as live_streams_router
from .locations import router as locations_router
from .media import router as media_router
from .moderation import router as moderation_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .protests import router as protests_router
from .realtime import router as realtime_router

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
