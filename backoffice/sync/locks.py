"""Per-record mutual exclusion for sync entry points."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

_locks: dict[tuple[str, str], asyncio.Lock] = {}
_waiters: dict[tuple[str, str], int] = {}


@asynccontextmanager
async def record_lock(kind: str, record_id) -> AsyncIterator[None]:
    """Serialize syncs of one local record inside this process.

    Cross-process exclusion comes from ``SELECT ... FOR UPDATE`` on the
    record row; this lock keeps a single worker from racing itself.
    """
    key = (kind, str(record_id))
    lock = _locks.get(key)
    if lock is None:
        lock = _locks[key] = asyncio.Lock()
    _waiters[key] = _waiters.get(key, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _waiters[key] -= 1
        if _waiters[key] == 0:
            _waiters.pop(key, None)
            _locks.pop(key, None)


def held_locks() -> int:
    """Number of records with a sync in flight or waiting."""
    return len(_locks)
