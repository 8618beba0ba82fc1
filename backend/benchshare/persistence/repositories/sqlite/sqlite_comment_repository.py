"""SQLite implementation of CommentRepository."""
from __future__ import annotations
from datetime import datetime, timezone

from benchshare.domain.comment.rules import CommentPayload
from benchshare.domain.page.models import Comment
from benchshare.errors import PersistenceFailed
from benchshare.persistence.db import connect
from benchshare.persistence.interfaces.comment_repository import CommentRepository


class SqliteCommentRepository(CommentRepository):

    def create(self, page_id: int, ip: str, payload: CommentPayload) -> Comment:
        now = datetime.now(timezone.utc).isoformat()
        with connect(error_cls=PersistenceFailed) as conn:
            cur = conn.execute(
                """
                INSERT INTO comments (page_id, author, author_email, author_url, ip, content, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    page_id,
                    payload.author,
                    payload.author_email,
                    payload.author_url,
                    ip,
                    payload.content,
                    now,
                ),
            )
            conn.commit()
        return Comment(
            id=cur.lastrowid,
            page_id=page_id,
            author=payload.author,
            author_email=payload.author_email,
            author_url=payload.author_url,
            ip=ip,
            content=payload.content,
            created_at=now,
        )
