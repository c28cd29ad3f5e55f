"""Expiring key store for token revocation and request cooldowns."""

from __future__ import annotations

import logging
import os
import time
from functools import lru_cache
from threading import Lock
from typing import Final

import redis
from redis.exceptions import RedisError

from hindu_unity.core.settings import settings

logger = logging.getLogger(__name__)

_TEST_MODE: Final[bool] = os.getenv("PYTEST_RUNNING", "").lower() == "true"


class CooldownService:
    """Track short-lived markers in Redis, falling back to process memory.

    The in-process cache is used when running under pytest or once the
    Redis server has failed a request.
    """

    def __init__(self, redis_url: str | None = None) -> None:
        self._redis: redis.Redis | None = None
        if not _TEST_MODE:
            self._redis = redis.from_url(redis_url or settings.redis_url)

    def _drop_redis(self, err: Exception) -> None:
        logger.warning("Redis unavailable, using in-process cooldowns: %s", err)
        self._redis = None

    def _exists(self, key: str) -> bool:
        if self._redis is not None:
            try:
                return bool(self._redis.exists(key))
            except RedisError as err:
                self._drop_redis(err)
        now = time.time()
        with _CACHE_LOCK:
            expiry = _EXPIRY_CACHE.get(key)
            if expiry is None:
                return False
            if expiry <= now:
                _EXPIRY_CACHE.pop(key, None)
                return False
            return True

    def _set(self, key: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            return
        if self._redis is not None:
            try:
                self._redis.set(key, "1", ex=int(ttl_seconds))
                return
            except RedisError as err:
                self._drop_redis(err)
        with _CACHE_LOCK:
            _EXPIRY_CACHE[key] = time.time() + int(ttl_seconds)

    def _set_if_absent(self, key: str, ttl_seconds: int) -> bool:
        """Atomically create `key`; return False if it was already present."""
        if self._redis is not None:
            try:
                return bool(self._redis.set(key, "1", ex=max(int(ttl_seconds), 1), nx=True))
            except RedisError as err:
                self._drop_redis(err)
        now = time.time()
        with _CACHE_LOCK:
            expiry = _EXPIRY_CACHE.get(key)
            if expiry is not None and expiry > now:
                return False
            _EXPIRY_CACHE[key] = now + max(int(ttl_seconds), 1)
            return True

    # --- Token revocation -----------------------------------------------------------
    def revoke_token(self, jti: str, ttl_seconds: int) -> None:
        """Mark a token id as revoked until it would have expired anyway."""
        self._set(f"revoked:{jti}", ttl_seconds)

    def is_token_revoked(self, jti: str) -> bool:
        return self._exists(f"revoked:{jti}")

    def consume_token(self, jti: str, ttl_seconds: int) -> bool:
        """Use a single-use token; return False if it was already used."""
        return self._set_if_absent(f"revoked:{jti}", ttl_seconds)

    # --- Specific cooldowns ---------------------------------------------------------
    def start_password_reset_cooldown(self, email: str) -> bool:
        """Start the reset cooldown for `email`; False if one is already running."""
        return self._set_if_absent(
            f"pwreset:{email.lower()}",
            settings.password_reset_cooldown_seconds,
        )


_EXPIRY_CACHE: dict[str, float] = {}
_CACHE_LOCK = Lock()


def reset_local_cache() -> None:
    """Forget all in-process markers (used between tests)."""
    with _CACHE_LOCK:
        _EXPIRY_CACHE.clear()


@lru_cache(maxsize=1)
def get_cooldown_service() -> CooldownService:
    """Return the shared cooldown service instance."""
    return CooldownService()
