"""Counters shown on the super admin page and the executive dashboard."""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from hindu_unity.core.settings import settings
from hindu_unity.db.time import start_of_day, utcnow
from hindu_unity.models import Post, Profile
from hindu_unity.models.post import POST_TYPES
from hindu_unity.schemas.admin import AdminStats, DashboardStats


def admin_stats(db: Session) -> AdminStats:
    today = start_of_day()
    return AdminStats(
        total_users=db.query(func.count(Profile.id)).scalar() or 0,
        total_posts=db.query(func.count(Post.id)).scalar() or 0,
        posts_today=db.query(func.count(Post.id)).filter(Post.created_at >= today).scalar() or 0,
    )


def dashboard_stats(db: Session) -> DashboardStats:
    """Return user totals, recently active users and today's posts by type.

    A user counts as live when they made an authenticated request within the
    configured window.
    """
    live_since = utcnow() - timedelta(minutes=settings.live_user_window_minutes)
    rows = (
        db.query(Post.post_type, func.count(Post.id))
        .filter(Post.created_at >= start_of_day())
        .group_by(Post.post_type)
        .all()
    )
    by_type = {post_type: 0 for post_type in POST_TYPES}
    by_type.update(dict(rows))
    return DashboardStats(
        total_users=db.query(func.count(Profile.id)).scalar() or 0,
        live_users=(
            db.query(func.count(Profile.id)).filter(Profile.last_seen_at >= live_since).scalar()
            or 0
        ),
        posts_today_by_type=by_type,
        posts_today=sum(by_type.values()),
    )
