# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from contextlib import nullcontext
from datetime import datetime
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from hindu_unity.api.v1.dependencies import (  # noqa: E402
    get_change_feed_dep,
    get_session_factory,
)
from hindu_unity.core.security import create_access_token, hash_password  # noqa: E402
from hindu_unity.db.session import Base  # noqa: E402
from hindu_unity.db.session import get_db as app_get_session  # noqa: E402
from hindu_unity.main import app as fastapi_app  # noqa: E402
from hindu_unity.models import Event, Post, Profile  # noqa: E402
from hindu_unity.models.profile import (  # noqa: E402
    ROLE_EXECUTIVE,
    ROLE_MEMBER,
    ROLE_SUPER_ADMIN,
    ROLE_VOLUNTEER,
)
from hindu_unity.services.cooldown import reset_local_cache  # noqa: E402
from hindu_unity.services.realtime import ChangeFeed  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "secret-pass"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    # Short-lived sessions share the test transaction and are left open on exit.
    app.dependency_overrides[get_session_factory] = lambda: lambda: nullcontext(db_session)
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_session_factory, None)


@pytest.fixture(autouse=True)
def clear_cooldowns() -> Iterator[None]:
    """Forget revoked tokens and reset cooldowns between tests."""
    reset_local_cache()
    yield
    reset_local_cache()


@pytest.fixture(autouse=True)
def change_feed(app: FastAPI) -> Iterator[ChangeFeed]:
    """Give every test its own realtime change feed."""
    feed = ChangeFeed(queue_size=10)
    app.dependency_overrides[get_change_feed_dep] = lambda: feed
    try:
        yield feed
    finally:
        app.dependency_overrides.pop(get_change_feed_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory that persists profiles with the shared test password."""

    def _make(
        role: str = ROLE_MEMBER,
        *,
        full_name: str | None = None,
        email: str | None = None,
        is_approved: bool = True,
        is_suspended: bool = False,
        created_at: datetime | None = None,
    ) -> Profile:
        number = next(_EMAIL_COUNTER)
        profile = Profile(
            email=email or f"user{number}@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            full_name=full_name or f"{role.title()} {number}",
            role=role,
            is_approved=is_approved,
            is_suspended=is_suspended,
        )
        if created_at is not None:
            profile.created_at = created_at
        db_session.add(profile)
        db_session.flush()
        db_session.refresh(profile)
        return profile

    return _make


def auth_headers(profile: Profile) -> dict[str, str]:
    """Return authorization headers for `profile`."""
    return {"Authorization": f"Bearer {create_access_token(profile.id)}"}


@pytest.fixture()
def headers_for() -> Callable[[Profile], dict[str, str]]:
    return auth_headers


@pytest.fixture()
def member(make_profile: Callable[..., Profile]) -> Profile:
    return make_profile(ROLE_MEMBER, full_name="Meera Member")


@pytest.fixture()
def other_member(make_profile: Callable[..., Profile]) -> Profile:
    return make_profile(ROLE_MEMBER, full_name="Omkar Other")


@pytest.fixture()
def volunteer(make_profile: Callable[..., Profile]) -> Profile:
    return make_profile(ROLE_VOLUNTEER, full_name="Vikram Volunteer")


@pytest.fixture()
def executive(make_profile: Callable[..., Profile]) -> Profile:
    return make_profile(ROLE_EXECUTIVE, full_name="Esha Executive")


@pytest.fixture()
def super_admin(make_profile: Callable[..., Profile]) -> Profile:
    return make_profile(ROLE_SUPER_ADMIN, full_name="Sanjay Admin")


@pytest.fixture()
def member_headers(member: Profile) -> dict[str, str]:
    return auth_headers(member)


@pytest.fixture()
def volunteer_headers(volunteer: Profile) -> dict[str, str]:
    return auth_headers(volunteer)


@pytest.fixture()
def executive_headers(executive: Profile) -> dict[str, str]:
    return auth_headers(executive)


@pytest.fixture()
def admin_headers(super_admin: Profile) -> dict[str, str]:
    return auth_headers(super_admin)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory that persists posts directly, bypassing the API."""

    def _make(author: Profile, content: str = "Test post content", **fields: Any) -> Post:
        post = Post(user_id=author.id, content=content, **fields)
        db_session.add(post)
        db_session.flush()
        db_session.refresh(post)
        return post

    return _make


@pytest.fixture()
def make_event(db_session: Session) -> Callable[..., Event]:
    def _make(creator: Profile, title: str = "Community meeting", **fields: Any) -> Event:
        fields.setdefault("event_date", datetime(2030, 1, 1, 18, 0))
        event = Event(created_by=creator.id, title=title, **fields)
        db_session.add(event)
        db_session.flush()
        db_session.refresh(event)
        return event

    return _make


@pytest.fixture()
def test_post(make_post: Callable[..., Post], member: Profile) -> Post:
    """Create a baseline post for tests."""
    return make_post(member)
