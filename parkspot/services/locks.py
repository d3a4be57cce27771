"""Per-slot mutual exclusion for ledger writes inside one process."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict
from uuid import UUID


class SlotLockRegistry:
    """Hands out one ``asyncio.Lock`` per slot id.

    Cross-process safety comes from the slot ``version`` column; the lock only
    keeps coroutines of this process from racing each other into a stale
    write. A lock is dropped once nobody holds or waits for it.
    """

    def __init__(self):
        self._locks: Dict[UUID, asyncio.Lock] = {}
        self._users: Dict[UUID, int] = {}

    def lock_for(self, slot_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(slot_id)
        if lock is None:
            lock = self._locks[slot_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, slot_id: UUID) -> AsyncIterator[None]:
        lock = self.lock_for(slot_id)
        self._users[slot_id] = self._users.get(slot_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[slot_id] -= 1
            if not self._users[slot_id]:
                del self._users[slot_id]
                self._locks.pop(slot_id, None)

    def __len__(self) -> int:
        return len(self._locks)
