"""Home feed assembly: posts and events merged into one keyset-paginated stream."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime
from typing import Final

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from hindu_unity.db.time import as_utc
from hindu_unity.models import Event, Post

KIND_POST: Final[str] = "post"
KIND_EVENT: Final[str] = "event"

# Posts sort ahead of events created at the same instant.
_KIND_RANK: Final[dict[str, int]] = {KIND_POST: 1, KIND_EVENT: 0}


class CursorError(ValueError):
    """Raised when a feed cursor cannot be decoded."""


@dataclass(frozen=True)
class FeedCursor:
    """Position of the last item returned on the previous page."""

    created_at: datetime
    kind: str
    item_id: int


@dataclass(frozen=True)
class FeedEntry:
    kind: str
    item: Post | Event

    @property
    def created_at(self) -> datetime:
        return as_utc(self.item.created_at)  # type: ignore[return-value]

    @property
    def sort_key(self) -> tuple[datetime, int, int]:
        return (self.created_at, _KIND_RANK[self.kind], self.item.id)


def encode_cursor(entry: FeedEntry) -> str:
    """Return an opaque cursor pointing just past `entry`."""
    raw = f"{entry.created_at.isoformat()}|{entry.kind}|{entry.item.id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> FeedCursor:
    """Parse a cursor produced by :func:`encode_cursor`.

    Raises:
        CursorError: If the cursor is malformed.
    """
    padding = "=" * (-len(cursor) % 4)
    try:
        raw = base64.urlsafe_b64decode(cursor + padding).decode("utf-8")
        timestamp, kind, item_id = raw.rsplit("|", 2)
        created_at = as_utc(datetime.fromisoformat(timestamp))
        parsed_id = int(item_id)
    except (binascii.Error, UnicodeDecodeError, ValueError) as err:
        raise CursorError("Invalid feed cursor") from err
    if kind not in _KIND_RANK:
        raise CursorError("Invalid feed cursor")
    return FeedCursor(created_at=created_at, kind=kind, item_id=parsed_id)  # type: ignore[arg-type]


def _after(column_ts, column_id, cursor: FeedCursor, kind: str):  # type: ignore[no-untyped-def]
    """Build the keyset predicate selecting rows of `kind` that sort after the cursor."""
    if cursor.kind == kind:
        return or_(
            column_ts < cursor.created_at,
            and_(column_ts == cursor.created_at, column_id < cursor.item_id),
        )
    if _KIND_RANK[kind] > _KIND_RANK[cursor.kind]:
        # This kind sorts before the cursor's kind on equal timestamps.
        return column_ts < cursor.created_at
    return column_ts <= cursor.created_at


def fetch_feed_page(
    db: Session,
    limit: int,
    cursor: FeedCursor | None = None,
) -> tuple[list[FeedEntry], str | None]:
    """Return up to `limit` feed entries after `cursor` and the next cursor.

    Both sources are read with `limit + 1` rows so the presence of a further
    page can be detected without an extra count query.
    """
    post_query = db.query(Post)
    event_query = db.query(Event)
    if cursor is not None:
        post_query = post_query.filter(_after(Post.created_at, Post.id, cursor, KIND_POST))
        event_query = event_query.filter(_after(Event.created_at, Event.id, cursor, KIND_EVENT))

    posts = post_query.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit + 1).all()
    events = event_query.order_by(Event.created_at.desc(), Event.id.desc()).limit(limit + 1).all()

    merged = [FeedEntry(KIND_POST, post) for post in posts]
    merged.extend(FeedEntry(KIND_EVENT, event) for event in events)
    merged.sort(key=lambda entry: entry.sort_key, reverse=True)

    page = merged[:limit]
    next_cursor = encode_cursor(page[-1]) if len(merged) > limit and page else None
    return page, next_cursor


def pinned_posts(db: Session) -> list[Post]:
    """Return admin-pinned posts, most recently pinned first."""
    return (
        db.query(Post)
        .filter(Post.admin_pinned.is_(True))
        .order_by(Post.admin_pinned_at.desc(), Post.id.desc())
        .all()
    )
