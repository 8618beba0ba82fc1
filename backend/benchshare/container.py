"""Dependency injection container — wires implementations to interfaces."""
from __future__ import annotations
from functools import lru_cache

from benchshare.application.comment_workflow import CommentWorkflow
from benchshare.application.hit_tracker import HitTracker
from benchshare.application.page_app_service import PageAppService
from benchshare.domain.page.highlight import PygmentsHighlighter
from benchshare.persistence.repositories.sqlite.sqlite_comment_repository import SqliteCommentRepository
from benchshare.persistence.repositories.sqlite.sqlite_page_repository import SqlitePageRepository
from benchshare.persistence.repositories.sqlite.sqlite_session_store import SqliteSessionStore


@lru_cache(maxsize=1)
def get_page_repo() -> SqlitePageRepository:
    return SqlitePageRepository()


@lru_cache(maxsize=1)
def get_comment_repo() -> SqliteCommentRepository:
    return SqliteCommentRepository()


@lru_cache(maxsize=1)
def get_session_store() -> SqliteSessionStore:
    return SqliteSessionStore()


@lru_cache(maxsize=1)
def get_highlighter() -> PygmentsHighlighter:
    return PygmentsHighlighter()


@lru_cache(maxsize=1)
def get_hit_tracker() -> HitTracker:
    return HitTracker(pages=get_page_repo(), sessions=get_session_store())


@lru_cache(maxsize=1)
def get_page_app_service() -> PageAppService:
    return PageAppService(
        pages=get_page_repo(),
        sessions=get_session_store(),
        hit_tracker=get_hit_tracker(),
        highlighter=get_highlighter(),
    )


@lru_cache(maxsize=1)
def get_comment_workflow() -> CommentWorkflow:
    return CommentWorkflow(comments=get_comment_repo())
