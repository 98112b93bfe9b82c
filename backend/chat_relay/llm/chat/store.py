"""Session store mapping session ids to conversation histories."""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any

from chat_relay.config import env_int
from chat_relay.llm.chat.models import History, Turn

logger = logging.getLogger(__name__)

# 0 disables idle expiry; sessions then live until the process exits
SESSION_TTL_MINUTES = env_int("SESSION_TTL_MINUTES", 0)
CLEANUP_INTERVAL_SECONDS = 60

# Singleton store instance
_store: "InMemorySessionStore | None" = None


class SessionStore(ABC):
    """Abstract registry of session histories.

    Lookups are lenient: an unknown session id behaves like a session with
    an empty history, never like an error.
    """

    @abstractmethod
    def create_session(self) -> str:
        """Register a new session with an empty history and return its id."""

    @abstractmethod
    def get_history(self, session_id: str) -> History:
        """Return a copy of the session's history, or [] if the id is unknown."""

    @abstractmethod
    def reset_history(self, session_id: str) -> None:
        """Bind ``session_id`` to an empty history, creating it if needed."""

    @abstractmethod
    def replace_history(self, session_id: str, history: History) -> None:
        """Overwrite the history bound to ``session_id``."""

    @abstractmethod
    def lock(self, session_id: str) -> asyncio.Lock:
        """Return the lock serializing chat turns for ``session_id``."""


class InMemorySessionStore(SessionStore):
    """Process-local session store.

    Responsibilities:
    - Issue random session ids
    - Hold histories in memory (lost on restart)
    - Hand out one asyncio.Lock per session
    - Optionally drop sessions that have been idle too long
    """

    def __init__(self, session_ttl_minutes: int = SESSION_TTL_MINUTES):
        """Initialize the store.

        Args:
            session_ttl_minutes: Idle lifetime of a session. 0 keeps sessions
                forever.
        """
        self._histories: dict[str, list[Turn]] = {}
        self._last_activity: dict[str, datetime] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._session_ttl_minutes = session_ttl_minutes
        self._session_timeout = timedelta(minutes=session_ttl_minutes)
        self._cleanup_task: asyncio.Task | None = None

    @property
    def active_session_count(self) -> int:
        """Number of sessions currently held."""
        return len(self._histories)

    @property
    def expiry_enabled(self) -> bool:
        return self._session_ttl_minutes > 0

    def create_session(self) -> str:
        session_id = str(uuid.uuid4())
        while session_id in self._histories:
            session_id = str(uuid.uuid4())

        self._histories[session_id] = []
        self._touch(session_id)
        logger.info(
            f"Created session {session_id} (total sessions: {len(self._histories)})"
        )
        return session_id

    def get_history(self, session_id: str) -> History:
        history = self._histories.get(session_id)
        if history is None:
            return []
        self._touch(session_id)
        return [turn.model_copy(deep=True) for turn in history]

    def reset_history(self, session_id: str) -> None:
        self._histories[session_id] = []
        self._touch(session_id)
        logger.info(f"Reset history for session {session_id}")

    def replace_history(self, session_id: str, history: History) -> None:
        self._histories[session_id] = list(history)
        self._touch(session_id)

    def lock(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
            # Ids that never get a history still age out with their lock
            self._touch(session_id)
        return lock

    def _touch(self, session_id: str) -> None:
        self._last_activity[session_id] = datetime.now()

    def cleanup_expired(self) -> int:
        """Drop sessions that have been idle longer than the TTL.

        Sessions with a chat turn in flight are kept. Locks handed out for
        ids that never got a history expire the same way.

        Returns:
            Number of session ids removed.
        """
        if not self.expiry_enabled:
            return 0

        now = datetime.now()
        expired_ids = [
            sid for sid, last in self._last_activity.items()
            if now - last > self._session_timeout
            and not (sid in self._locks and self._locks[sid].locked())
        ]

        for session_id in expired_ids:
            self._histories.pop(session_id, None)
            self._last_activity.pop(session_id, None)
            self._locks.pop(session_id, None)

        if expired_ids:
            logger.info(f"Cleaned up {len(expired_ids)} expired session(s)")

        return len(expired_ids)

    async def start_cleanup_task(self) -> None:
        """Start the background expiry task if expiry is enabled."""
        if self.expiry_enabled and self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info(
                f"Started session cleanup task (ttl={self._session_ttl_minutes}m)"
            )

    async def stop_cleanup_task(self) -> None:
        """Stop the background expiry task."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
            logger.info("Stopped session cleanup task")

    async def _cleanup_loop(self) -> None:
        """Background loop that drops idle sessions."""
        while True:
            try:
                await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
                self.cleanup_expired()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception(f"Error in session cleanup task: {e}")

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics."""
        return {
            "active_sessions": len(self._histories),
            "session_ttl_minutes": self._session_ttl_minutes,
            "cleanup_task_running": self._cleanup_task is not None,
        }


def get_session_store() -> InMemorySessionStore:
    """Get the singleton session store instance."""
    global _store
    if _store is None:
        _store = InMemorySessionStore()
    return _store


async def init_session_store() -> InMemorySessionStore:
    """Create the session store and start its background expiry task."""
    store = get_session_store()
    await store.start_cleanup_task()
    return store


async def shutdown_session_store() -> None:
    """Stop background work and drop the session store."""
    global _store
    if _store:
        await _store.stop_cleanup_task()
        _store = None
