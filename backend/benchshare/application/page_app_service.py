"""Application service — builds the page view model, publishes revisions and assembles the feed."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from benchshare.application.hit_tracker import HitTracker
from benchshare.core import config
from benchshare.domain.page.highlight import Highlighter
from benchshare.domain.page.models import FeedModel, Page, PageViewModel
from benchshare.domain.page.prep import assemble_prep
from benchshare.domain.page.rules import evaluate_access, has_page_init
from benchshare.errors import NotFound
from benchshare.persistence.interfaces.page_repository import PageRepository
from benchshare.persistence.interfaces.session_store import SessionStore

DEFAULT_REVISION = 1

# Schedules a callable to run after the response, e.g. BackgroundTasks.add_task
Defer = Callable[..., Any]


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class PageAppService:
    def __init__(
        self,
        pages: PageRepository,
        sessions: SessionStore,
        hit_tracker: HitTracker,
        highlighter: Highlighter,
    ):
        self._pages = pages
        self._sessions = sessions
        self._hits = hit_tracker
        self._highlighter = highlighter

    # ------------------------------------------------------------------
    # PAGE VIEW
    # ------------------------------------------------------------------
    def build_page_model(
        self,
        slug: str,
        revision: Optional[int],
        session_id: str,
        *,
        authorized: bool,
        defer: Defer,
    ) -> PageViewModel:
        """
        Shared by the view and comment routes so both see the same prep and
        access state. Raises NotFound.
        """
        bundle = self._pages.get_by_slug(
            slug, DEFAULT_REVISION if revision is None else revision
        )
        page = bundle.page

        prep = assemble_prep(page.init_html, page.setup, page.teardown, self._highlighter)

        defer(self._hits.record_view, page.id, session_id)

        access = evaluate_access(page, self._sessions.load(session_id))

        return PageViewModel(
            page=page,
            tests=bundle.tests,
            revisions=bundle.revisions,
            comments=bundle.comments,
            prep=prep,
            access=access,
            page_init=has_page_init(page.init_html, config.PAGE_INIT_MARKER),
            authorized=authorized,
            show_atom_slug=page.slug,
        )

    # ------------------------------------------------------------------
    # PUBLISH
    # ------------------------------------------------------------------
    def publish(self, slug: str, revision: int, session_id: str) -> Page:
        """Only the owner or an admin may publish; anyone else gets NotFound."""
        page = self._pages.get_by_slug(slug, revision).page
        access = evaluate_access(page, self._sessions.load(session_id))
        if not access.can_see_unpublished:
            raise NotFound()
        self._pages.publish(page.id)
        return page

    # ------------------------------------------------------------------
    # FEED
    # ------------------------------------------------------------------
    def build_feed(self, slug: str) -> FeedModel:
        page, revisions = self._pages.get_visible_by_slug_with_revisions(slug)
        if not revisions:
            raise NotFound()
        return FeedModel(
            page=page,
            revisions=revisions,
            last_modified=_parse_timestamp(page.updated_at),
        )
