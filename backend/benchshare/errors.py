"""Error taxonomy shared by the domain, persistence and API layers."""
from __future__ import annotations
from typing import Optional


class BenchshareError(Exception):
    pass


class NotFound(BenchshareError):
    """The resource is absent, or hidden from this viewer. Callers cannot tell which."""

    def __init__(self, message: str = "The page was not found") -> None:
        super().__init__(message)


class PersistenceFailed(BenchshareError):
    """A write that passed validation could not be stored."""


class UpstreamFailure(BenchshareError):
    """Any other unexpected failure of a storage collaborator."""


class HighlightError(BenchshareError):
    def __init__(self, language: str, message: Optional[str] = None) -> None:
        self.language = language
        super().__init__(message or f"No highlighter available for language '{language}'")


class PrepAssemblyError(BenchshareError):
    """Highlighted script bodies could not be put back where they came from."""

    def __init__(self, placeholders: int, fragments: int) -> None:
        self.placeholders = placeholders
        self.fragments = fragments
        super().__init__(
            f"Found {placeholders} script placeholder(s) for {fragments} highlighted fragment(s)"
        )
