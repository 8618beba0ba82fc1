"""SQLite implementation of PageRepository."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Tuple

from benchshare.core import config
from benchshare.domain.page.models import (
    Comment,
    Page,
    PageBundle,
    PUBLISHED,
    Revision,
    TestSnippet,
)
from benchshare.errors import NotFound
from benchshare.persistence.db import connect
from benchshare.persistence.interfaces.page_repository import PageRepository


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_page(row) -> Page:
    return Page(
        id=row["id"],
        slug=row["slug"],
        revision=row["revision"],
        title=row["title"],
        init_html=row["init_html"],
        setup=row["setup"],
        teardown=row["teardown"],
        visibility=row["visibility"],
        info=row["info"],
        author=row["author"],
        owner_id=row["owner_id"],
        hits=row["hits"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_revision(row) -> Revision:
    return Revision(
        page_id=row["id"],
        slug=row["slug"],
        revision=row["revision"],
        title=row["title"],
        author=row["author"],
        visibility=row["visibility"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_test(row) -> TestSnippet:
    return TestSnippet(
        id=row["id"],
        page_id=row["page_id"],
        title=row["title"],
        code=row["code"],
        defer=bool(row["defer"]),
    )


def _row_to_comment(row) -> Comment:
    return Comment(
        id=row["id"],
        page_id=row["page_id"],
        author=row["author"],
        author_email=row["author_email"],
        author_url=row["author_url"],
        ip=row["ip"],
        content=row["content"],
        created_at=row["created_at"],
    )


class SqlitePageRepository(PageRepository):

    def get_by_slug(self, slug: str, revision: int) -> PageBundle:
        with connect() as conn:
            row = conn.execute(
                "SELECT * FROM pages WHERE slug = ? AND revision = ?", (slug, revision)
            ).fetchone()
            if not row:
                raise NotFound()
            page = _row_to_page(row)
            tests = conn.execute(
                "SELECT * FROM tests WHERE page_id = ? ORDER BY id ASC", (page.id,)
            ).fetchall()
            # the requested revision is always listed, even before it is published
            revisions = conn.execute(
                """
                SELECT * FROM pages
                WHERE slug = ? AND (visibility = ? OR id = ?)
                ORDER BY revision ASC
                """,
                (slug, PUBLISHED, page.id),
            ).fetchall()
            comments = conn.execute(
                "SELECT * FROM comments WHERE page_id = ? ORDER BY created_at ASC, id ASC",
                (page.id,),
            ).fetchall()
        return PageBundle(
            page=page,
            tests=[_row_to_test(r) for r in tests],
            revisions=[_row_to_revision(r) for r in revisions],
            comments=[_row_to_comment(r) for r in comments],
        )

    def get_visible_by_slug_with_revisions(self, slug: str) -> Tuple[Page, List[Revision]]:
        with connect() as conn:
            row = conn.execute(
                "SELECT * FROM pages WHERE slug = ? AND revision = 1 AND visibility = ?",
                (slug, PUBLISHED),
            ).fetchone()
            if not row:
                raise NotFound()
            revisions = conn.execute(
                """
                SELECT * FROM pages
                WHERE slug = ? AND visibility = ?
                ORDER BY revision DESC
                LIMIT ?
                """,
                (slug, PUBLISHED, config.FEED_ENTRY_LIMIT),
            ).fetchall()
        if not revisions:
            raise NotFound()
        return _row_to_page(row), [_row_to_revision(r) for r in revisions]

    def update_hits(self, page_id: int) -> None:
        with connect() as conn:
            conn.execute("UPDATE pages SET hits = hits + 1 WHERE id = ?", (page_id,))
            conn.commit()

    def publish(self, page_id: int) -> None:
        with connect() as conn:
            cur = conn.execute(
                "UPDATE pages SET visibility = ?, updated_at = ? WHERE id = ?",
                (PUBLISHED, _now_iso(), page_id),
            )
            conn.commit()
        if cur.rowcount == 0:
            raise NotFound()

    def list_ids_by_owner(self, owner_id: str) -> List[int]:
        with connect() as conn:
            rows = conn.execute(
                "SELECT id FROM pages WHERE owner_id = ? ORDER BY id ASC", (owner_id,)
            ).fetchall()
        return [r["id"] for r in rows]

    def save_page(self, page: Page) -> int:
        now = _now_iso()
        with connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO pages (
                    slug, revision, title, info, author,
                    init_html, setup, teardown, visibility,
                    owner_id, hits, created_at, updated_at
                ) VALUES (
                    :slug, :revision, :title, :info, :author,
                    :init_html, :setup, :teardown, :visibility,
                    :owner_id, :hits, :created_at, :updated_at
                )
                """,
                {
                    "slug": page.slug,
                    "revision": page.revision,
                    "title": page.title,
                    "info": page.info,
                    "author": page.author,
                    "init_html": page.init_html,
                    "setup": page.setup,
                    "teardown": page.teardown,
                    "visibility": page.visibility,
                    "owner_id": page.owner_id,
                    "hits": page.hits,
                    "created_at": page.created_at or now,
                    "updated_at": page.updated_at or now,
                },
            )
            conn.commit()
        return cur.lastrowid

    def save_test(self, test: TestSnippet) -> int:
        with connect() as conn:
            cur = conn.execute(
                "INSERT INTO tests (page_id, title, code, defer) VALUES (?, ?, ?, ?)",
                (test.page_id, test.title, test.code, int(test.defer)),
            )
            conn.commit()
        return cur.lastrowid
