"""Abstract per-session key/value store."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional

from benchshare.domain.page.models import SessionState

HITS = "hits"
OWN = "own"
ADMIN = "admin"


class SessionStore(ABC):

    @abstractmethod
    def get(self, session_id: str, key: str) -> Optional[Any]:
        """Return the value stored under *key* for the session, or None."""
        ...

    @abstractmethod
    def set(self, session_id: str, key: str, value: Any) -> None:
        """Store *value* under *key*; creates the session on first write."""
        ...

    def load(self, session_id: str) -> SessionState:
        return SessionState(
            hits=dict(self.get(session_id, HITS) or {}),
            own=dict(self.get(session_id, OWN) or {}),
            admin=bool(self.get(session_id, ADMIN)),
        )
