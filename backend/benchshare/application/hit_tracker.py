"""Per-session view counting."""
from __future__ import annotations
import logging

from benchshare.persistence.interfaces.page_repository import PageRepository
from benchshare.persistence.interfaces.session_store import HITS, SessionStore

logger = logging.getLogger(__name__)


class HitTracker:
    """
    Counts a page view at most once per session. Runs after the response has
    been sent, so failures are only logged. Two simultaneous first views in one
    session can both be counted.
    """

    def __init__(self, pages: PageRepository, sessions: SessionStore):
        self._pages = pages
        self._sessions = sessions

    def record_view(self, page_id: int, session_id: str) -> None:
        try:
            hits = self._sessions.get(session_id, HITS) or {}
            if hits.get(page_id):
                return
            self._pages.update_hits(page_id)
            hits[page_id] = True
            self._sessions.set(session_id, HITS, hits)
        except Exception:
            logger.exception("Could not record view of page %s", page_id)
