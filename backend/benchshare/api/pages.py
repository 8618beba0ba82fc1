"""Test page API endpoints — view, comment, publish and Atom feed."""
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from benchshare.api.auth import optional_current_user
from benchshare.api.feed import ATOM_CONTENT_TYPE, http_date, render_atom
from benchshare.api.session import get_session_id
from benchshare.application.comment_workflow import CommentWorkflow
from benchshare.application.page_app_service import PageAppService
from benchshare.container import get_comment_workflow, get_page_app_service
from benchshare.domain.page.models import Comment, Page, PageViewModel

router = APIRouter(tags=["pages"])


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_page(p: Page, highlighted_init_html: Optional[str]) -> dict:
    return {
        "id": p.id,
        "slug": p.slug,
        "revision": p.revision,
        "title": p.title,
        "info": p.info,
        "author": p.author,
        "init_html": p.init_html,
        "init_html_highlighted": highlighted_init_html,
        "setup": p.setup,
        "teardown": p.teardown,
        "visibility": p.visibility,
        "hits": p.hits,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
    }


def _serialize_comment(c: Comment) -> dict:
    # ip is kept for abuse tracking only
    return {
        "id": c.id,
        "author": c.author,
        "author_url": c.author_url,
        "content": c.content,
        "created_at": c.created_at,
    }


def _serialize_page_model(m: PageViewModel) -> dict:
    return {
        "benchmark": True,
        "show_atom": {"slug": m.show_atom_slug},
        "is_admin": m.access.is_admin,
        "is_own": m.access.is_own,
        "no_index": m.access.no_index,
        "page_init": m.page_init,
        "has_prep": m.prep.has_prep,
        "has_setup_or_teardown": m.prep.has_setup_or_teardown,
        "stripped": m.prep.stripped_markup,
        "authorized": m.authorized,
        "page": _serialize_page(m.page, m.prep.highlighted_markup),
        "tests": [asdict(t) for t in m.tests],
        "revisions": [asdict(r) for r in m.revisions],
        "comments": [_serialize_comment(c) for c in m.comments],
        "form": m.form_values,
        "errors": m.errors,
    }


def _remote_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # client, proxy1, proxy2, ...
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"status": "ok"}


# ------------------------------------------------------------------
# Feed, registered before /{slug} so "x.atom" is not read as a slug
# ------------------------------------------------------------------
@router.get("/{slug}.atom")
def page_feed(
    slug: str,
    request: Request,
    svc: PageAppService = Depends(get_page_app_service),
):
    feed = svc.build_feed(slug)
    return Response(
        content=render_atom(feed, str(request.base_url).rstrip("/")),
        headers={
            "Content-Type": ATOM_CONTENT_TYPE,
            "Last-Modified": http_date(feed),
        },
    )


# ------------------------------------------------------------------
# Page view
# ------------------------------------------------------------------
@router.get("/{slug}")
@router.get("/{slug}/{rev}")
def view_page(
    slug: str,
    background_tasks: BackgroundTasks,
    rev: Optional[int] = None,
    session_id: str = Depends(get_session_id),
    current_user: Optional[dict] = Depends(optional_current_user),
    svc: PageAppService = Depends(get_page_app_service),
):
    model = svc.build_page_model(
        slug,
        rev,
        session_id,
        authorized=current_user is not None,
        defer=background_tasks.add_task,
    )
    return _serialize_page_model(model)


# ------------------------------------------------------------------
# Comments
# ------------------------------------------------------------------
@router.post("/{slug}")
@router.post("/{slug}/{rev}")
def submit_comment(
    slug: str,
    request: Request,
    background_tasks: BackgroundTasks,
    rev: Optional[int] = None,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    session_id: str = Depends(get_session_id),
    current_user: Optional[dict] = Depends(optional_current_user),
    svc: PageAppService = Depends(get_page_app_service),
    workflow: CommentWorkflow = Depends(get_comment_workflow),
):
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    model = svc.build_page_model(
        slug,
        rev,
        session_id,
        authorized=True,
        defer=background_tasks.add_task,
    )
    outcome = workflow.submit(model, _remote_address(request), payload or {})

    content = _serialize_page_model(outcome.model)
    content["outcome"] = outcome.kind.value
    return JSONResponse(content=content, status_code=outcome.status_code)


# ------------------------------------------------------------------
# Publish: owner or admin only, everyone else sees a 404
# ------------------------------------------------------------------
@router.get("/{slug}/{rev}/publish")
def publish_page(
    slug: str,
    rev: int,
    session_id: str = Depends(get_session_id),
    svc: PageAppService = Depends(get_page_app_service),
):
    svc.publish(slug, rev, session_id)
    return RedirectResponse(url=f"/{quote(slug)}/{rev}", status_code=status.HTTP_302_FOUND)
