"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminStats, AdminUserResponse, DashboardStats, ImportedAccountResponse
from .auth import SignInRequest, SignUpRequest, TokenResponse
from .comment import CommentCreate, CommentResponse
from .common import AuthorSummary, Message
from .event import EventCreate, EventResponse
from .feed import FeedItem, FeedPage
from .post import PostCreate, PostResponse
from .profile import ProfileResponse, PublicProfileResponse
from .protest import ProtestCreate, ProtestView

__all__ = [
    "AdminStats", "AdminUserResponse", "DashboardStats", "ImportedAccountResponse",
    "SignInRequest", "SignUpRequest", "TokenResponse",
    "CommentCreate", "CommentResponse",
    "AuthorSummary", "Message",
    "EventCreate", "EventResponse",
    "FeedItem", "FeedPage",
    "PostCreate", "PostResponse",
    "ProfileResponse", "PublicProfileResponse",
    "ProtestCreate", "ProtestView",
]
