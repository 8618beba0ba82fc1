"""Comment schema and validation."""
from __future__ import annotations
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from benchshare.domain.common.result import Result

# Fields without an entry here are still rejected, just without a message.
COMMENT_ERROR_MESSAGES: Dict[str, str] = {
    "author": "Please enter your name.",
    "author_email": "Please enter a valid email address.",
    "author_url": "Please enter a valid URL or leave the field empty.",
    "content": "Please enter a message.",
}


class CommentPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    author: str = Field(min_length=1, max_length=255)
    author_email: str = Field(min_length=1, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    author_url: str = Field(default="", max_length=255, pattern=r"^(https?://\S+)?$")
    content: str = Field(min_length=1, max_length=10000)


def validate_comment(raw: Mapping[str, Any]) -> Result[CommentPayload]:
    """
    Check a submitted comment against the schema. All failing fields are
    reported, not only the first one.
    """
    try:
        return Result.ok(CommentPayload.model_validate(raw))
    except ValidationError as e:
        details: Dict[str, str] = {}
        for err in e.errors():
            if not err["loc"]:
                continue
            field_name = str(err["loc"][0])
            message = COMMENT_ERROR_MESSAGES.get(field_name)
            if message:
                details[field_name] = message
        return Result.fail(f"Comment has {e.error_count()} invalid field(s).", details=details)
