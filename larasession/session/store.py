"""
Session Store Interface
Base class for all session storage drivers
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional


class SessionStore(ABC):
    """
    Base session store interface

    Drivers are constructed with the session configuration mapping and
    registered on a SessionManager as its save handler.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        from larasession.defaults import DEFAULT_SESSION_LIFETIME
        self.config = dict(config or {})
        self.lifetime = int(self.config.get('expire') or DEFAULT_SESSION_LIFETIME)
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    async def open(self, save_path: Optional[str], name: str) -> bool:
        """
        Prepare the store for a session

        Args:
            save_path: Storage location configured on the manager
            name: Session name (cookie name)

        Returns:
            True if successful
        """
        return True

    async def close(self) -> bool:
        """Release resources held for the current session"""
        return True

    # === Locking ===

    async def acquire_lock(self, session_id: str) -> None:
        """
        Take exclusive write access to a session record

        Held from session start until write_close()/destroy().
        """
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            await lock.acquire()
        except BaseException:
            self._forget_lock_user(session_id)
            raise

    async def release_lock(self, session_id: str) -> None:
        """Release write access to a session record"""
        lock = self._locks.get(session_id)
        if lock is None or not lock.locked():
            return
        lock.release()
        self._forget_lock_user(session_id)

    def _forget_lock_user(self, session_id: str) -> None:
        """Drop the lock once no request holds or waits for it"""
        remaining = self._lock_users.get(session_id, 1) - 1
        if remaining > 0:
            self._lock_users[session_id] = remaining
        else:
            self._lock_users.pop(session_id, None)
            self._locks.pop(session_id, None)

    def is_locked(self, session_id: str) -> bool:
        """Check if a request currently holds the session record"""
        lock = self._locks.get(session_id)
        return lock is not None and lock.locked()

    # === Persistence ===

    @abstractmethod
    async def read(self, session_id: str) -> Dict[str, Any]:
        """
        Read session data from storage

        Args:
            session_id: Session identifier

        Returns:
            Session data dictionary
        """
        pass

    @abstractmethod
    async def write(self, session_id: str, data: Dict[str, Any]) -> bool:
        """
        Write session data to storage

        Args:
            session_id: Session identifier
            data: Session data to store

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    async def destroy(self, session_id: str) -> bool:
        """
        Delete session from storage

        Args:
            session_id: Session identifier

        Returns:
            True if successful
        """
        pass

    @abstractmethod
    async def gc(self, max_lifetime: int) -> int:
        """
        Garbage collection - remove expired sessions

        Args:
            max_lifetime: Maximum session lifetime in seconds

        Returns:
            Number of sessions deleted
        """
        pass

    @abstractmethod
    async def exists(self, session_id: str) -> bool:
        """
        Check if session exists

        Args:
            session_id: Session identifier

        Returns:
            True if session exists
        """
        pass
