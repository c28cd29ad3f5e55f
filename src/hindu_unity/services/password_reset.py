"""Delivery hook for password reset links.

Email delivery lives outside this service; the default sender only logs that
a link was issued. Deployments swap in their own sender through the
``get_reset_link_sender_dep`` dependency.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from hindu_unity.core.settings import settings

logger = logging.getLogger(__name__)

ResetLinkSender = Callable[[str, str], None]


def build_reset_link(recovery_token: str) -> str:
    """Return the client URL that completes a reset with `recovery_token`."""
    return f"{settings.site_url.rstrip('/')}/reset-password#access_token={recovery_token}"


def log_reset_link(email: str, link: str) -> None:
    logger.info("Password reset link issued for %s", email)
    logger.debug("Password reset link for %s: %s", email, link)


def get_reset_link_sender() -> ResetLinkSender:
    return log_reset_link
