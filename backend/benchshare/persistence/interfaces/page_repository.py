"""Abstract repository interface for the test page aggregate."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Tuple

from benchshare.domain.page.models import Page, PageBundle, Revision, TestSnippet


class PageRepository(ABC):

    @abstractmethod
    def get_by_slug(self, slug: str, revision: int) -> PageBundle:
        """Return the page with its tests, published revisions and comments. Raises NotFound."""
        ...

    @abstractmethod
    def get_visible_by_slug_with_revisions(self, slug: str) -> Tuple[Page, List[Revision]]:
        """Return published revision 1 and every published revision, newest first. Raises NotFound."""
        ...

    @abstractmethod
    def update_hits(self, page_id: int) -> None:
        """Add one view to the persisted counter."""
        ...

    @abstractmethod
    def publish(self, page_id: int) -> None:
        """Make a single revision visible to the public."""
        ...

    @abstractmethod
    def list_ids_by_owner(self, owner_id: str) -> List[int]:
        """Return the ids of every revision created by *owner_id*."""
        ...

    @abstractmethod
    def save_page(self, page: Page) -> int:
        """Insert a new revision row and return its id."""
        ...

    @abstractmethod
    def save_test(self, test: TestSnippet) -> int:
        """Insert a benchmark snippet for a page and return its id."""
        ...
