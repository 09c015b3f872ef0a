import asyncio
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Hashable, Iterable, Optional


@dataclass
class Session:
    """Live quiz state of one chat."""

    chat_id: Hashable
    remaining: deque[str] = field(default_factory=deque)
    current: Optional[str] = None


class SessionRegistry:
    """Sessions keyed by chat id, with one lock per chat.

    Mutating methods never await, so each of them is atomic on the event loop.
    Callers that need several operations to run as one step for a chat wrap
    them in `lock(chat_id)`; chats never wait on each other's locks.
    """

    def __init__(self) -> None:
        self._sessions: dict[Hashable, Session] = {}
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._lock_users: dict[Hashable, int] = {}

    def create(self, chat_id: Hashable, prompts: Iterable[str]) -> bool:
        """Store a new session. Returns False if the chat already has one."""
        if chat_id in self._sessions:
            return False
        self._sessions[chat_id] = Session(chat_id=chat_id, remaining=deque(prompts))
        return True

    def get(self, chat_id: Hashable) -> Optional[Session]:
        return self._sessions.get(chat_id)

    def remove(self, chat_id: Hashable) -> None:
        self._sessions.pop(chat_id, None)

    def advance(self, chat_id: Hashable) -> Optional[str]:
        """Pop the next prompt and make it current; None when nothing is left."""
        session = self._sessions.get(chat_id)
        if session is None or not session.remaining:
            return None
        session.current = session.remaining.popleft()
        return session.current

    @asynccontextmanager
    async def lock(self, chat_id: Hashable) -> AsyncIterator[None]:
        """Serialize work for a single chat."""
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = self._locks[chat_id] = asyncio.Lock()
        self._lock_users[chat_id] = self._lock_users.get(chat_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[chat_id] -= 1
            if not self._lock_users[chat_id]:
                del self._lock_users[chat_id]
                del self._locks[chat_id]

    def __contains__(self, chat_id: Hashable) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
