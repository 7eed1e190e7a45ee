"""
Session Manager
Owns the per-request session bag and drives the storage handler
"""
from enum import Enum
from typing import Any, Dict, Optional
from larasession.logging import getLogger
from larasession.session.store import SessionStore
from larasession.support import Crypto, Str

logger = getLogger(__name__)


class SessionStatus(Enum):
    NONE = 'none'
    ACTIVE = 'active'


class SessionManager:
    """
    Session subsystem for one request

    Holds what a host runtime would otherwise keep globally:
    - the session bag (a plain dict, bound to one session id)
    - session id, name and save path
    - cookie parameters and GC lifetime
    - the active save handler (a SessionStore)

    The handler's lock for the session id is held from start() until
    write_close() or destroy().
    """

    COOKIE_PARAMS = ('lifetime', 'path', 'domain', 'secure', 'httponly', 'samesite')

    def __init__(self, handler: SessionStore = None, session_id: str = None, name: str = None,
                 lifetime: int = None):
        """
        Initialize session manager

        Args:
            handler: Session storage driver (in-memory store if omitted)
            session_id: Session identifier (generated on start if omitted)
            name: Session name, used as cookie name
            lifetime: GC lifetime and cookie lifetime in seconds
        """
        from larasession.defaults import (
            DEFAULT_SESSION_COOKIE_NAME,
            DEFAULT_SESSION_COOKIE_PATH,
            DEFAULT_SESSION_LIFETIME,
            DEFAULT_SESSION_SAME_SITE,
        )
        if handler is None:
            from larasession.session.stores import ArraySessionStore
            handler = ArraySessionStore()
        if lifetime is None:
            lifetime = DEFAULT_SESSION_LIFETIME

        self.handler = handler
        self.session_id = session_id
        self.name = name or DEFAULT_SESSION_COOKIE_NAME
        self.save_path: Optional[str] = None
        self.gc_maxlifetime = int(lifetime)
        self.cookie_params: Dict[str, Any] = {
            'lifetime': int(lifetime),
            'path': DEFAULT_SESSION_COOKIE_PATH,
            'domain': None,
            'secure': False,
            'httponly': True,
            'samesite': DEFAULT_SESSION_SAME_SITE,
        }
        self.bag: Dict[str, Any] = {}
        self.status = SessionStatus.NONE
        self.started = False
        self.destroyed = False
        self._locked_id: Optional[str] = None

        self.handler.lifetime = self.gc_maxlifetime

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    # === Configuration ===

    def set_save_handler(self, handler: SessionStore) -> bool:
        """
        Register the storage driver

        Returns:
            False if the handler is rejected (not a SessionStore, or a
            session is already active)
        """
        if not isinstance(handler, SessionStore) or self.is_active:
            return False

        handler.lifetime = self.gc_maxlifetime
        self.handler = handler
        return True

    def get_id(self) -> Optional[str]:
        return self.session_id

    def set_id(self, session_id: str) -> bool:
        """Force the session id; ignored while a session is active"""
        if self.is_active:
            logger.warning("Cannot change session id while the session is active")
            return False
        self.session_id = session_id
        return True

    def set_name(self, name: str) -> None:
        self.name = name

    def set_save_path(self, path: str) -> None:
        self.save_path = path

    def set_gc_maxlifetime(self, seconds: int) -> None:
        self.gc_maxlifetime = int(seconds)
        self.handler.lifetime = self.gc_maxlifetime

    def set_cookie_params(self, **params) -> None:
        """
        Update cookie parameters

        Args:
            **params: Any of lifetime, path, domain, secure, httponly, samesite

        Raises:
            TypeError: For unknown cookie parameters
        """
        unknown = set(params) - set(self.COOKIE_PARAMS)
        if unknown:
            raise TypeError(f"Unknown cookie parameter(s): {', '.join(sorted(unknown))}")

        if 'lifetime' in params:
            params['lifetime'] = int(params['lifetime'])
        for flag in ('secure', 'httponly'):
            if flag in params:
                params[flag] = bool(params[flag])

        self.cookie_params.update(params)

    # === Lifecycle ===

    async def start(self) -> bool:
        """
        Start the session: lock the record and load the bag

        Returns:
            True if the session is active
        """
        from larasession.defaults import DEFAULT_SESSION_ID_LENGTH

        if self.is_active:
            return True

        if not self.session_id:
            self.session_id = Crypto.generate_token(DEFAULT_SESSION_ID_LENGTH)

        await self._lock(self.session_id)

        try:
            opened = await self.handler.open(self.save_path, self.name)
            bag = await self.handler.read(self.session_id) if opened else None
        except BaseException:
            await self._unlock()
            raise

        if not opened:
            logger.warning(f"Session handler {type(self.handler).__name__} failed to open")
            await self._unlock()
            return False

        self.bag = bag
        self.status = SessionStatus.ACTIVE
        self.started = True
        self.destroyed = False

        logger.debug(f"Session started: {self!r}")
        return True

    async def write_close(self) -> bool:
        """
        Write the bag and release the lock without ending the session

        The bag stays readable; a later start() reopens the record.

        Returns:
            True if the data was written
        """
        if not self.is_active:
            return False

        try:
            written = await self.handler.write(self.session_id, self.bag)
            await self.handler.close()
        finally:
            self.status = SessionStatus.NONE
            await self._unlock()

        if not written:
            logger.warning(f"Session data could not be written: {self!r}")
        return written

    async def regenerate_id(self, delete_old: bool = False) -> str:
        """
        Move the session to a fresh id

        Args:
            delete_old: Destroy the old record instead of leaving it for GC

        Returns:
            New session id
        """
        from larasession.defaults import DEFAULT_SESSION_ID_LENGTH

        old_id = self.session_id
        new_id = Crypto.generate_token(DEFAULT_SESSION_ID_LENGTH)

        if old_id:
            if delete_old:
                await self.handler.destroy(old_id)
            elif self.is_active:
                await self.handler.write(old_id, self.bag)

        if self.is_active:
            await self._lock(new_id)
            self.session_id = new_id
            await self._unlock(old_id)
        else:
            self.session_id = new_id

        logger.debug(f"Session id regenerated (old record {'deleted' if delete_old else 'kept'})")
        return new_id

    def unset(self) -> None:
        """Remove all session variables"""
        self.bag.clear()

    async def destroy(self) -> bool:
        """
        Destroy the stored record for the current id

        Returns:
            True if the handler destroyed the record
        """
        destroyed = True
        if self.session_id:
            destroyed = await self.handler.destroy(self.session_id)
            await self.handler.close()

        self.status = SessionStatus.NONE
        self.destroyed = True
        await self._unlock()

        logger.debug(f"Session destroyed: {self!r}")
        return destroyed

    async def gc(self) -> int:
        """Run garbage collection on the handler"""
        return await self.handler.gc(self.gc_maxlifetime)

    # === Locking ===

    async def _lock(self, session_id: str) -> None:
        await self.handler.acquire_lock(session_id)
        self._locked_id = session_id

    async def _unlock(self, session_id: str = None) -> None:
        session_id = session_id or self._locked_id
        if session_id is None:
            return
        await self.handler.release_lock(session_id)
        if session_id == self._locked_id:
            self._locked_id = None

    def __repr__(self) -> str:
        """String representation"""
        return (f"<SessionManager id={Str.limit(self.session_id, 8)} "
                f"status={self.status.value} data={len(self.bag)} keys>")
