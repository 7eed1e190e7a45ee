"""
Array Session Store
Stores sessions in memory (for testing only)
"""
import copy
from typing import Any, Dict, Mapping, Optional
from larasession.session.store import SessionStore


class ArraySessionStore(SessionStore):
    """
    In-memory session storage

    WARNING: Not suitable for production use.
    Sessions are lost when the application restarts.
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        """Initialize array session store"""
        super().__init__(config)
        self._sessions: Dict[str, Dict[str, Any]] = {}

    async def read(self, session_id: str) -> Dict[str, Any]:
        """Read session from memory"""
        return copy.deepcopy(self._sessions.get(session_id, {}))

    async def write(self, session_id: str, data: Dict[str, Any]) -> bool:
        """Write session to memory"""
        self._sessions[session_id] = copy.deepcopy(data)
        return True

    async def destroy(self, session_id: str) -> bool:
        """Delete session from memory"""
        self._sessions.pop(session_id, None)
        return True

    async def gc(self, max_lifetime: int) -> int:
        """Garbage collection not needed for array store"""
        return 0

    async def exists(self, session_id: str) -> bool:
        """Check if session exists in memory"""
        return session_id in self._sessions
