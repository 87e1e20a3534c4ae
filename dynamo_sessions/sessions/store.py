"""SessionStore abstract interface."""

from abc import ABC, abstractmethod

from dynamo_sessions.sessions.models import SessionData


class SessionStore(ABC):
    """Abstract interface for session persistence used by session middleware.

    Each operation either returns or raises a StoreError, exactly once.
    Concurrent writes to the same session are last-writer-wins.
    """

    @abstractmethod
    async def get(self, session_id: str) -> SessionData | None:
        """Get a live session, or None if absent or expired."""
        pass

    @abstractmethod
    async def set(self, session_id: str, session: SessionData) -> None:
        """Write the full session, recomputing its expiry."""
        pass

    @abstractmethod
    async def touch(self, session_id: str, session: SessionData) -> bool:
        """Refresh the session's expiry if due; return whether a write happened."""
        pass

    @abstractmethod
    async def destroy(self, session_id: str) -> None:
        """Delete the session. Deleting a missing session succeeds."""
        pass
