"""
Cookie Session Store
Stores session data signed in cookies using itsdangerous
"""
from typing import Any, Dict, Mapping, Optional
from itsdangerous import BadSignature
from larasession.session.store import SessionStore
from larasession.support import Config, Crypto


class CookieSessionStore(SessionStore):
    """
    Cookie-based session storage (signed)

    The "session id" handed to this store is the cookie payload itself.
    Writing is done by the middleware, which calls serialize() on the bag.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        """
        Initialize cookie session store

        Args:
            config: Session config; 'secret' (or app.APP_SECRET_KEY) signs the payload
        """
        super().__init__(config)
        secret = self.config.get('secret') or Config.get('app.APP_SECRET_KEY')
        if not secret:
            raise ValueError(
                "A secret is required for the cookie session driver!\n"
                "Set 'secret' in the session config or APP_SECRET_KEY in config/app.py"
            )
        self.serializer = Crypto.create_serializer(secret)

    async def acquire_lock(self, session_id: str) -> None:
        """Cookie payloads live client side, there is no record to lock"""
        return None

    async def release_lock(self, session_id: str) -> None:
        return None

    async def read(self, session_id: str) -> Dict[str, Any]:
        """
        Read session from signed cookie data

        Args:
            session_id: Signed cookie payload

        Returns:
            Session data dictionary
        """
        if not session_id:
            return {}

        try:
            data = self.serializer.loads(session_id, max_age=self.lifetime)
        except BadSignature:
            return {}

        return data if isinstance(data, dict) else {}

    async def write(self, session_id: str, data: Dict[str, Any]) -> bool:
        """Cookie store doesn't write here - middleware handles it"""
        return True

    def serialize(self, data: Dict[str, Any]) -> str:
        """
        Serialize session data for cookie

        Args:
            data: Session data

        Returns:
            Signed cookie value
        """
        return self.serializer.dumps(data)

    async def destroy(self, session_id: str) -> bool:
        """Cookie deletion happens in middleware"""
        return True

    async def gc(self, max_lifetime: int) -> int:
        """Garbage collection not needed for cookie store"""
        return 0

    async def exists(self, session_id: str) -> bool:
        """Check if the payload carries a valid signature"""
        if not session_id:
            return False

        try:
            self.serializer.loads(session_id, max_age=self.lifetime)
        except BadSignature:
            return False
        return True
