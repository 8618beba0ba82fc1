"""Comment submission: validate → create → merge into the page model, or re-display."""
from __future__ import annotations
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from benchshare.domain.comment.rules import validate_comment
from benchshare.domain.page.models import PageViewModel
from benchshare.errors import PersistenceFailed
from benchshare.persistence.interfaces.comment_repository import CommentRepository

logger = logging.getLogger(__name__)


class CommentOutcomeKind(str, Enum):
    REDISPLAY = "redisplay"  # validation failed, form shown again with messages
    CREATED = "created"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass
class CommentOutcome:
    kind: CommentOutcomeKind
    model: PageViewModel

    @property
    def status_code(self) -> int:
        return 400 if self.kind is CommentOutcomeKind.PERSISTENCE_FAILED else 200


class CommentWorkflow:
    def __init__(self, comments: CommentRepository):
        self._comments = comments

    def submit(
        self,
        page_model: PageViewModel,
        remote_address: str,
        raw_payload: Mapping[str, Any],
    ) -> CommentOutcome:
        form_values = dict(raw_payload)

        validation = validate_comment(raw_payload)
        if not validation.is_success:
            model = replace(
                page_model,
                form_values=form_values,
                errors={**page_model.errors, **validation.details},
            )
            return CommentOutcome(CommentOutcomeKind.REDISPLAY, model)

        try:
            comment = self._comments.create(page_model.page.id, remote_address, validation.value)
        except PersistenceFailed:
            logger.exception("Could not store comment on page %s", page_model.page.id)
            model = replace(page_model, form_values=form_values)
            return CommentOutcome(CommentOutcomeKind.PERSISTENCE_FAILED, model)

        model = replace(page_model, comments=[*page_model.comments, comment])
        return CommentOutcome(CommentOutcomeKind.CREATED, model)
