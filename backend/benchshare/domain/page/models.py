"""Test page domain models — pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

PUBLISHED = "published"
UNPUBLISHED = "unpublished"


@dataclass
class Page:
    id: int
    slug: str
    revision: int
    title: str
    init_html: str = ""
    setup: str = ""
    teardown: str = ""
    visibility: str = UNPUBLISHED  # published | unpublished
    info: str = ""
    author: str = ""
    owner_id: Optional[str] = None
    hits: int = 0
    created_at: str = ""
    updated_at: str = ""


@dataclass
class TestSnippet:
    __test__ = False  # not a pytest class

    id: int
    page_id: int
    title: str
    code: str
    defer: bool = False


@dataclass
class Revision:
    page_id: int
    slug: str
    revision: int
    title: str
    author: str = ""
    visibility: str = UNPUBLISHED
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Comment:
    id: int
    page_id: int
    author: str
    content: str
    ip: str
    author_email: str = ""
    author_url: str = ""
    created_at: str = ""


@dataclass
class SessionState:
    hits: Dict[int, bool] = field(default_factory=dict)
    own: Dict[int, bool] = field(default_factory=dict)
    admin: bool = False


@dataclass
class PrepResult:
    has_prep: bool
    has_setup_or_teardown: bool
    # False when there is nothing to prepare
    stripped_markup: Union[str, bool] = False
    highlighted_markup: Optional[str] = None


@dataclass
class AccessDecision:
    is_own: bool
    is_admin: bool
    no_index: bool
    can_see_unpublished: bool


@dataclass
class PageBundle:
    """Everything the page store returns for one (slug, revision)."""
    page: Page
    tests: List[TestSnippet] = field(default_factory=list)
    revisions: List[Revision] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)


@dataclass
class PageViewModel:
    page: Page
    tests: List[TestSnippet]
    revisions: List[Revision]
    comments: List[Comment]
    prep: PrepResult
    access: AccessDecision
    page_init: bool
    authorized: bool
    show_atom_slug: str
    # comment form re-display
    form_values: Dict[str, object] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)


@dataclass
class FeedModel:
    page: Page
    revisions: List[Revision]
    last_modified: datetime
