"""Abstract repository interface for page comments."""
from __future__ import annotations
from abc import ABC, abstractmethod

from benchshare.domain.comment.rules import CommentPayload
from benchshare.domain.page.models import Comment


class CommentRepository(ABC):

    @abstractmethod
    def create(self, page_id: int, ip: str, payload: CommentPayload) -> Comment:
        """Store a validated comment and return it. Raises PersistenceFailed; nothing is stored then."""
        ...
