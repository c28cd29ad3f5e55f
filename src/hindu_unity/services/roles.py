"""Role ranking and permission checks.

Roles form a simple ladder: member < volunteer < executive < super_admin.
Executives only exercise their privileges once a super admin approves them.
"""
from __future__ import annotations

from typing import Final

from hindu_unity.models.profile import (
    ROLE_EXECUTIVE,
    ROLE_MEMBER,
    ROLE_SUPER_ADMIN,
    ROLE_VOLUNTEER,
    Profile,
)

ROLE_RANK: Final[dict[str, int]] = {
    ROLE_MEMBER: 0,
    ROLE_VOLUNTEER: 1,
    ROLE_EXECUTIVE: 2,
    ROLE_SUPER_ADMIN: 3,
}

# Roles a visitor may pick when signing up.
SELF_ASSIGNABLE_ROLES: Final[tuple[str, ...]] = (ROLE_MEMBER, ROLE_VOLUNTEER, ROLE_EXECUTIVE)

ORGANIZER_ROLES: Final[frozenset[str]] = frozenset({ROLE_VOLUNTEER, ROLE_EXECUTIVE, ROLE_SUPER_ADMIN})
MANAGER_ROLES: Final[frozenset[str]] = frozenset({ROLE_EXECUTIVE, ROLE_SUPER_ADMIN})


def is_pending_executive(profile: Profile) -> bool:
    """Return True for executives still waiting on approval."""
    return profile.role == ROLE_EXECUTIVE and not profile.is_approved


def effective_role(profile: Profile) -> str:
    """Return the role whose privileges the profile currently holds.

    Unapproved executives act as volunteers until approved.
    """
    if is_pending_executive(profile):
        return ROLE_VOLUNTEER
    return profile.role


def has_any_role(profile: Profile, roles: frozenset[str] | tuple[str, ...]) -> bool:
    """Return True if the profile's effective role is one of `roles`."""
    return effective_role(profile) in roles


def can_organize(profile: Profile) -> bool:
    """Events, protests and live streams are open to volunteers and above."""
    return has_any_role(profile, ORGANIZER_ROLES)


def can_manage_users(profile: Profile) -> bool:
    return has_any_role(profile, MANAGER_ROLES)


def can_manage_user(actor: Profile, target: Profile) -> bool:
    """Return True if `actor` may suspend or delete `target`."""
    if actor.id == target.id:
        return False
    role = effective_role(actor)
    if role == ROLE_SUPER_ADMIN:
        return True
    if role == ROLE_EXECUTIVE:
        return target.role in (ROLE_MEMBER, ROLE_VOLUNTEER)
    return False


def capabilities(profile: Profile) -> dict[str, bool]:
    """Return the navigation flags the client uses to show or hide entries."""
    role = effective_role(profile)
    return {
        "can_view_events": role in ORGANIZER_ROLES,
        "can_organize": role in ORGANIZER_ROLES,
        "can_manage_users": role in MANAGER_ROLES,
        "can_view_dashboard": role in MANAGER_ROLES,
        "can_view_admin": role == ROLE_SUPER_ADMIN,
        "can_review_pending_posts": role == ROLE_SUPER_ADMIN,
        "pending_approval": is_pending_executive(profile),
    }
