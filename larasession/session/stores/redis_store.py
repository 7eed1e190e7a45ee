"""
Redis Session Store
Stores sessions as JSON blobs with native key expiry
"""
import json
from typing import Any, Dict, Mapping, Optional
import redis.asyncio as aioredis
from redis.exceptions import RedisError
from larasession.exceptions import SessionException
from larasession.logging import getLogger
from larasession.session.store import SessionStore

logger = getLogger(__name__)


class RedisSessionStore(SessionStore):
    """
    Redis-based session storage

    Locks are taken in Redis so that concurrent requests for the same
    session are serialized across worker processes.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None, client: Optional[aioredis.Redis] = None):
        """
        Initialize Redis session store

        Args:
            config: Session config ('redis_url', 'redis_prefix', 'lock_timeout', 'lock_wait')
            client: Pre-built client (skips connecting from redis_url)
        """
        from larasession.defaults import (
            DEFAULT_REDIS_URL,
            DEFAULT_REDIS_SESSION_PREFIX,
            DEFAULT_SESSION_LOCK_TIMEOUT,
            DEFAULT_SESSION_LOCK_WAIT,
        )
        super().__init__(config)
        self.redis_url = self.config.get('redis_url') or DEFAULT_REDIS_URL
        self.key_prefix = self.config.get('redis_prefix') or DEFAULT_REDIS_SESSION_PREFIX
        self.lock_timeout = self.config.get('lock_timeout') or DEFAULT_SESSION_LOCK_TIMEOUT
        self.lock_wait = self.config.get('lock_wait') or DEFAULT_SESSION_LOCK_WAIT
        self.redis: Optional[aioredis.Redis] = client
        self._held_locks: Dict[str, Any] = {}

    async def _get_client(self) -> aioredis.Redis:
        """Connect lazily on first use"""
        if self.redis is None:
            self.redis = aioredis.from_url(
                self.redis_url,
                encoding='utf-8',
                decode_responses=True
            )
        return self.redis

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None

    # === Locking ===

    async def acquire_lock(self, session_id: str) -> None:
        client = await self._get_client()
        lock = client.lock(
            f"{self._key(session_id)}:lock",
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_wait,
        )
        if not await lock.acquire():
            raise SessionException(f"Timed out waiting for session lock after {self.lock_wait}s")
        self._held_locks[session_id] = lock

    async def release_lock(self, session_id: str) -> None:
        lock = self._held_locks.pop(session_id, None)
        if lock is None:
            return
        try:
            await lock.release()
        except RedisError as e:
            # Lock already expired on the server
            logger.warning(f"Failed to release session lock: {e}")

    def is_locked(self, session_id: str) -> bool:
        return session_id in self._held_locks

    # === Persistence ===

    async def read(self, session_id: str) -> Dict[str, Any]:
        """Read session from Redis"""
        client = await self._get_client()

        try:
            value = await client.get(self._key(session_id))
        except RedisError as e:
            logger.warning(f"Failed to read session from Redis: {e}")
            return {}

        if value is None:
            return {}

        try:
            data = json.loads(value)
        except (TypeError, ValueError):
            return {}

        return data if isinstance(data, dict) else {}

    async def write(self, session_id: str, data: Dict[str, Any]) -> bool:
        """Write session to Redis with expiry"""
        client = await self._get_client()

        try:
            serialized = json.dumps(data, ensure_ascii=False)
            await client.setex(self._key(session_id), self.lifetime, serialized)
        except (RedisError, TypeError, ValueError) as e:
            logger.warning(f"Failed to write session to Redis: {e}")
            return False

        return True

    async def destroy(self, session_id: str) -> bool:
        """Delete session from Redis"""
        client = await self._get_client()

        try:
            await client.delete(self._key(session_id))
        except RedisError as e:
            logger.warning(f"Failed to delete session from Redis: {e}")
            return False

        return True

    async def gc(self, max_lifetime: int) -> int:
        """Redis expires session keys on its own"""
        return 0

    async def exists(self, session_id: str) -> bool:
        """Check if session key exists"""
        client = await self._get_client()

        try:
            return await client.exists(self._key(session_id)) > 0
        except RedisError:
            return False
