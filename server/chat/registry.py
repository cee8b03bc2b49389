"""
Session registry module.

Process-wide map from nickname to live Session. All mutation goes through
the registry lock; readers that do network I/O take a snapshot first.
"""

import asyncio
from typing import Dict, List, Optional, TYPE_CHECKING

from common.protocol_definitions import is_valid_nickname

if TYPE_CHECKING:
    from server.chat.session import Session


class Registry:
    """Concurrency-safe nickname -> Session mapping."""

    def __init__(self):
        self._sessions: Dict[str, 'Session'] = {}
        self.lock = asyncio.Lock()

    async def add(self, session: 'Session') -> bool:
        """
        Insert a session unless its nickname is invalid or taken.

        The availability check and the insert happen under one lock, so two
        handshakes racing for the same nickname cannot both succeed.
        """
        if not is_valid_nickname(session.nickname):
            return False
        async with self.lock:
            if session.nickname in self._sessions:
                return False
            self._sessions[session.nickname] = session
            return True

    async def remove(self, nickname: str, session: Optional['Session'] = None) -> Optional['Session']:
        """
        Remove a nickname and return its session.

        When `session` is given the entry is removed only if it still maps to
        that exact session.
        """
        async with self.lock:
            current = self._sessions.get(nickname)
            if current is None or (session is not None and current is not session):
                return None
            del self._sessions[nickname]
            return current

    async def get(self, nickname: str) -> Optional['Session']:
        async with self.lock:
            return self._sessions.get(nickname)

    async def snapshot(self) -> List['Session']:
        """Copy of the current sessions, safe to iterate while sending."""
        async with self.lock:
            return list(self._sessions.values())

    async def clear(self) -> List['Session']:
        """Remove every session and return what was removed."""
        async with self.lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            return sessions

    def nicknames(self) -> List[str]:
        return list(self._sessions.keys())

    def __len__(self) -> int:
        return len(self._sessions)
