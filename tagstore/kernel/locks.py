"""
Per-key asyncio locks.

Serializes check-then-act sequences (username/title uniqueness) and tag
vocabulary cascades inside one process. Build one instance at startup and
hand it to every repository; a lock only protects callers sharing the
same instance.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tagstore.errors import Conflict


def user_key(username: str) -> str:
    return f"user:{username}"


def title_key(title: str) -> str:
    return f"project-title:{title}"


def vocabulary_key(project_id: int) -> str:
    return f"project-tags:{project_id}"


class KeyedLocks:
    """
    Hands out one asyncio.Lock per key.

    Usage:
        locks = KeyedLocks()
        async with locks.hold(title_key("Pokemon")):
            ...
    """

    def __init__(self):
        # key -> (lock, number of holders and waiters)
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        return len(self._locks)


async def commit_or_conflict(session: AsyncSession, message: str) -> None:
    """
    Commit the session, turning a uniqueness violation into Conflict.

    Call while still holding the lock that guarded the check, so the
    next holder sees the committed row.
    """
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict(message)
