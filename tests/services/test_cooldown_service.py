"""Tests for the in-process fallback of the cooldown store."""

from __future__ import annotations

from hindu_unity.services.cooldown import CooldownService


def test_revocation_is_remembered() -> None:
    service = CooldownService()
    assert not service.is_token_revoked("abc")
    service.revoke_token("abc", 60)
    assert service.is_token_revoked("abc")


def test_zero_ttl_revocation_is_ignored() -> None:
    service = CooldownService()
    service.revoke_token("expired", 0)
    assert not service.is_token_revoked("expired")


def test_consume_token_only_once() -> None:
    service = CooldownService()
    assert service.consume_token("recovery", 60)
    assert not service.consume_token("recovery", 60)


def test_password_reset_cooldown_ignores_case() -> None:
    service = CooldownService()
    assert service.start_password_reset_cooldown("Someone@Example.com")
    assert not service.start_password_reset_cooldown("someone@example.com")
