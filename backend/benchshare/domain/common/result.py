"""Result<T> pattern — domain functions return this instead of raising exceptions for normal flow."""
from __future__ import annotations
from typing import Dict, TypeVar, Generic, Optional

T = TypeVar("T")


class Result(Generic[T]):
    def __init__(
        self,
        is_success: bool,
        value: Optional[T] = None,
        error: Optional[str] = None,
        details: Optional[Dict[str, str]] = None,
    ):
        self.is_success = is_success
        self.value = value
        self.error = error
        # per-field failure reasons, keyed by field name
        self.details = details or {}

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(is_success=True, value=value)

    @classmethod
    def fail(cls, error: str, details: Optional[Dict[str, str]] = None) -> "Result[T]":
        return cls(is_success=False, error=error, details=details)

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self.value!r})"
        if self.details:
            return f"Result.fail({self.error!r}, details={self.details!r})"
        return f"Result.fail({self.error!r})"
