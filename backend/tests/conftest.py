"""Shared fixtures and in-memory collaborators."""
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from benchshare.core import config
from benchshare.domain.comment.rules import CommentPayload
from benchshare.domain.page.highlight import Highlighter
from benchshare.domain.page.models import (
    AccessDecision,
    Comment,
    Page,
    PageViewModel,
    PrepResult,
    PUBLISHED,
    TestSnippet,
)
from benchshare.errors import PersistenceFailed
from benchshare.persistence.interfaces.comment_repository import CommentRepository
from benchshare.persistence.interfaces.session_store import SessionStore
from benchshare.persistence.repositories.sqlite.sqlite_page_repository import SqlitePageRepository


class TaggingHighlighter(Highlighter):
    """Wraps sources in [language]...[/language] so tests can see what was highlighted where."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def highlight(self, language: str, source: str) -> str:
        self.calls.append((language, source))
        return f"[{language}]{source}[/{language}]"


class FakeSessionStore(SessionStore):
    def __init__(self) -> None:
        self.data: Dict[str, Dict[str, Any]] = {}

    def get(self, session_id: str, key: str) -> Optional[Any]:
        return self.data.get(session_id, {}).get(key)

    def set(self, session_id: str, key: str, value: Any) -> None:
        self.data.setdefault(session_id, {})[key] = value


class FakePageRepository:
    """Only the hit counter part of PageRepository."""

    def __init__(self, fail: bool = False) -> None:
        self.hit_calls: List[int] = []
        self.fail = fail

    def update_hits(self, page_id: int) -> None:
        if self.fail:
            raise RuntimeError("database is locked")
        self.hit_calls.append(page_id)


class FakeCommentRepository(CommentRepository):
    def __init__(self, fail: bool = False) -> None:
        self.created: List[Comment] = []
        self.fail = fail

    def create(self, page_id: int, ip: str, payload: CommentPayload) -> Comment:
        if self.fail:
            raise PersistenceFailed("disk I/O error")
        comment = Comment(
            id=len(self.created) + 1,
            page_id=page_id,
            author=payload.author,
            author_email=payload.author_email,
            author_url=payload.author_url,
            ip=ip,
            content=payload.content,
            created_at="2026-01-01T00:00:00+00:00",
        )
        self.created.append(comment)
        return comment


def make_page_model(comments: Optional[List[Comment]] = None) -> PageViewModel:
    page = Page(id=7, slug="array-sort", revision=1, title="Array sort", visibility=PUBLISHED)
    return PageViewModel(
        page=page,
        tests=[TestSnippet(id=1, page_id=7, title="native", code="arr.sort()")],
        revisions=[],
        comments=list(comments or []),
        prep=PrepResult(has_prep=False, has_setup_or_teardown=False),
        access=AccessDecision(is_own=False, is_admin=False, no_index=False, can_see_unpublished=False),
        page_init=False,
        authorized=True,
        show_atom_slug="array-sort",
    )


@pytest.fixture
def page_model() -> PageViewModel:
    return make_page_model()


@pytest.fixture
def highlighter() -> TaggingHighlighter:
    return TaggingHighlighter()


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def fake_pages() -> FakePageRepository:
    return FakePageRepository()


@pytest.fixture
def fake_comments() -> FakeCommentRepository:
    return FakeCommentRepository()


# ------------------------------------------------------------------
# SQLite-backed fixtures
# ------------------------------------------------------------------
@pytest.fixture
def db(monkeypatch, tmp_path):
    from benchshare.persistence.db import init_db
    monkeypatch.setattr(config, "DATABASE_PATH", str(tmp_path / "benchshare.db"))
    init_db()
    return config.DATABASE_PATH


@pytest.fixture
def page_repo(db) -> SqlitePageRepository:
    return SqlitePageRepository()


@pytest.fixture
def client(db):
    from benchshare.main import app
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seed_page(page_repo):
    """Insert a page revision with one benchmark snippet; returns its id."""

    def _seed(**overrides) -> int:
        fields = dict(
            id=0,
            slug="array-sort",
            revision=1,
            title="Array sort",
            init_html="<div id=\"out\"></div><script>var arr = [3, 1, 2];</script>",
            setup="",
            teardown="",
            visibility=PUBLISHED,
            author="Ada",
            created_at="2026-03-01T10:00:00+00:00",
            updated_at="2026-03-02T10:00:00+00:00",
        )
        fields.update(overrides)
        page_id = page_repo.save_page(Page(**fields))
        page_repo.save_test(TestSnippet(id=0, page_id=page_id, title="native", code="arr.sort()"))
        return page_id

    return _seed
