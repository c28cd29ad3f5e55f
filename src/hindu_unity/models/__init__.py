"""SQLAlchemy models for the Hindu Unity application."""

from .event import Event
from .follow import Follow
from .ingestion import ImportedAccount, PendingPost
from .live_stream import LiveStream
from .post import Comment, PollOption, PollVote, Post, PostReaction
from .profile import Profile
from .protest import Protest, ProtestResponse

__all__ = [
    "Event",
    "Follow",
    "ImportedAccount", "PendingPost",
    "LiveStream",
    "Comment", "PollOption", "PollVote", "Post", "PostReaction",
    "Profile",
    "Protest", "ProtestResponse",
]
