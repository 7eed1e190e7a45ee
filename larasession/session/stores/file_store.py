"""
File Session Store
Stores sessions as JSON files in the filesystem
"""
import json
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from larasession.logging import getLogger
from larasession.session.store import SessionStore

logger = getLogger(__name__)


class FileSessionStore(SessionStore):
    """File-based session storage"""

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        """
        Initialize file session store

        Args:
            config: Session config; 'path' is the storage directory
        """
        from larasession.defaults import DEFAULT_SESSION_PATH
        super().__init__(config)
        self.path = Path(self.config.get('path') or DEFAULT_SESSION_PATH)

    async def open(self, save_path: Optional[str], name: str) -> bool:
        """Switch to the manager's save path and make sure it exists"""
        if save_path:
            self.path = Path(save_path)

        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create session directory {self.path}: {e}")
            return False
        return True

    def _get_session_file(self, session_id: str) -> Path:
        """Get path to session file"""
        return self.path / f"session_{session_id}.json"

    async def read(self, session_id: str) -> Dict[str, Any]:
        """Read session from file"""
        session_file = self._get_session_file(session_id)

        if not session_file.exists():
            return {}

        try:
            with open(session_file, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Unreadable session file {session_file.name}: {e}")
            return {}

        if not isinstance(payload, dict):
            logger.warning(f"Malformed session file {session_file.name}")
            return {}

        if payload.get('_expire_at', 0) < time.time():
            await self.destroy(session_id)
            return {}

        data = payload.get('data')
        return data if isinstance(data, dict) else {}

    async def write(self, session_id: str, data: Dict[str, Any]) -> bool:
        """Write session to file"""
        session_file = self._get_session_file(session_id)
        now = time.time()
        payload = {
            'data': data,
            '_created_at': now,
            '_expire_at': now + self.lifetime,
        }

        try:
            self.path.mkdir(parents=True, exist_ok=True)
            with open(session_file, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to write session file {session_file.name}: {e}")
            return False

        return True

    async def destroy(self, session_id: str) -> bool:
        """Delete session file"""
        try:
            self._get_session_file(session_id).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete session file: {e}")
            return False
        return True

    async def gc(self, max_lifetime: int) -> int:
        """Remove expired session files"""
        current_time = time.time()
        deleted = 0

        if not self.path.exists():
            return 0

        for session_file in self.path.glob('session_*.json'):
            try:
                with open(session_file, 'r', encoding='utf-8') as f:
                    payload = json.load(f)
                expire_at = payload.get('_expire_at')
                if expire_at is None:
                    expire_at = payload.get('_created_at', 0) + max_lifetime
                expired = expire_at < current_time
            except (json.JSONDecodeError, OSError, AttributeError):
                # Corrupted file, delete it
                expired = True

            if expired:
                session_file.unlink(missing_ok=True)
                deleted += 1

        if deleted:
            logger.debug(f"Session GC removed {deleted} expired file(s)")

        return deleted

    async def exists(self, session_id: str) -> bool:
        """Check if session file exists"""
        return self._get_session_file(session_id).exists()
