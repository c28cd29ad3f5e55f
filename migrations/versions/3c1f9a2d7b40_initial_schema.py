"""initial schema

Revision ID: 3c1f9a2d7b40
Revises:
Create Date: 2026-10-18 09:12:44.210531

"""
from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f9a2d7b40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _profile_fk(name: str = "user_id") -> sa.Column:
    return sa.Column(
        name,
        sa.Integer(),
        sa.ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create the community schema."""
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("is_suspended", sa.Boolean(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "role IN ('member', 'volunteer', 'executive', 'super_admin')",
            name="ck_profiles_role",
        ),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    op.create_table(
        "posts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("post_type", sa.String(length=10), nullable=False),
        sa.Column("media_url", sa.Text(), nullable=True),
        sa.Column("media_urls", sa.JSON(), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        sa.Column("user_pinned", sa.Boolean(), nullable=False),
        sa.Column("user_pinned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_pinned", sa.Boolean(), nullable=False),
        sa.Column("admin_pinned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("source", sa.String(length=50), nullable=True),
        sa.Column("external_id", sa.String(length=100), nullable=True, unique=True),
        sa.Column("external_username", sa.String(length=100), nullable=True),
        sa.Column("link_preview", sa.JSON(), nullable=True),
        _created_at(),
        sa.CheckConstraint(
            "post_type IN ('text', 'image', 'video', 'poll', 'live')",
            name="ck_posts_post_type",
        ),
    )
    op.create_index("ix_posts_user_id", "posts", ["user_id"])
    op.create_index("ix_posts_created_at_id", "posts", ["created_at", "id"])

    op.create_table(
        "poll_options",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("option_text", sa.String(length=200), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_index("ix_poll_options_post_id", "poll_options", ["post_id"])

    op.create_table(
        "poll_votes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "poll_option_id",
            sa.Integer(),
            sa.ForeignKey("poll_options.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk(),
        _created_at(),
        sa.UniqueConstraint("post_id", "user_id", name="uq_poll_votes_post_user"),
    )
    op.create_index("ix_poll_votes_poll_option_id", "poll_votes", ["poll_option_id"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index("ix_comments_post_id", "comments", ["post_id"])

    op.create_table(
        "post_reactions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "post_id",
            sa.Integer(),
            sa.ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _profile_fk(),
        sa.Column("reaction_type", sa.String(length=20), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "post_id", "user_id", "reaction_type", name="uq_post_reactions_post_user_type"
        ),
    )
    op.create_index("ix_post_reactions_post_id", "post_reactions", ["post_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _profile_fk("created_by"),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_type", sa.String(length=20), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        _created_at(),
    )
    op.create_index("ix_events_created_at_id", "events", ["created_at", "id"])

    op.create_table(
        "protests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("location_lat", sa.Float(), nullable=True),
        sa.Column("location_lng", sa.Float(), nullable=True),
        _created_at(),
    )

    op.create_table(
        "protest_responses",
        sa.Column(
            "protest_id",
            sa.Integer(),
            sa.ForeignKey("protests.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("response_type", sa.String(length=20), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "response_type IN ('will_come', 'cant_come', 'not_needed')",
            name="ck_protest_responses_type",
        ),
    )

    op.create_table(
        "follows",
        sa.Column(
            "follower_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "following_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _created_at(),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follows_not_self"),
    )
    op.create_index("ix_follows_following_id", "follows", ["following_id"])

    op.create_table(
        "live_streams",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _profile_fk(),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("stream_key", sa.String(length=64), nullable=False, unique=True),
        sa.Column("is_live", sa.Boolean(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "pending_posts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("external_id", sa.String(length=100), nullable=False, unique=True),
        _profile_fk(),
        sa.Column("external_username", sa.String(length=100), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("post_type", sa.String(length=10), nullable=False),
        sa.Column("media_url", sa.Text(), nullable=True),
        sa.Column("source", sa.String(length=50), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("link_preview", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(length=10), nullable=False),
        _created_at(),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_pending_posts_status",
        ),
    )

    op.create_table(
        "imported_accounts",
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("claimed", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_imported_accounts_username", "imported_accounts", ["username"])


def downgrade() -> None:
    """Drop the community schema."""
    op.drop_table("imported_accounts")
    op.drop_table("pending_posts")
    op.drop_table("live_streams")
    op.drop_table("follows")
    op.drop_table("protest_responses")
    op.drop_table("protests")
    op.drop_table("events")
    op.drop_table("post_reactions")
    op.drop_table("comments")
    op.drop_table("poll_votes")
    op.drop_table("poll_options")
    op.drop_table("posts")
    op.drop_table("profiles")
