"""Visibility and ownership rules for test pages."""
from __future__ import annotations

from benchshare.domain.page.models import AccessDecision, Page, SessionState, UNPUBLISHED


def evaluate_access(page: Page, session: SessionState) -> AccessDecision:
    """
    Owners and admins may preview and publish an unpublished page. Such a
    preview must not be indexed by crawlers.
    """
    is_own = bool(session.own.get(page.id))
    is_admin = bool(session.admin)
    can_see_unpublished = is_own or is_admin
    return AccessDecision(
        is_own=is_own,
        is_admin=is_admin,
        no_index=page.visibility == UNPUBLISHED and can_see_unpublished,
        can_see_unpublished=can_see_unpublished,
    )


def has_page_init(init_html: str, marker: str) -> bool:
    return marker in init_html
