"""
Single-writer store transactions.

Each store key has one asyncio.Lock while anyone holds or awaits it. Load,
operate, save and commit all happen under the lock, so concurrent requests
against the same store apply one after another and no write is lost. A key's
lock is dropped from the registry once its last user leaves.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.db.operations import load_store, save_store
from cardengine.models.result import OperationResult
from cardengine.models.store import CardStore
from cardengine.services.reconciler import reconcile

logger = logging.getLogger(__name__)

_store_locks: dict[str, asyncio.Lock] = {}
_lock_users: Counter[str] = Counter()


@asynccontextmanager
async def hold_store_lock(key: str) -> AsyncIterator[None]:
    """Hold the store's lock for the duration of the block."""
    lock = _store_locks.get(key)
    if lock is None:
        lock = _store_locks[key] = asyncio.Lock()
    _lock_users[key] += 1
    try:
        async with lock:
            yield
    finally:
        _lock_users[key] -= 1
        if _lock_users[key] <= 0:
            del _lock_users[key]
            _store_locks.pop(key, None)


class StoreTransaction:
    """Holds the working store for one locked unit of work."""

    def __init__(self, key: str, store: CardStore):
        self.key = key
        self.store = store
        self.dirty = False

    def apply(self, result: OperationResult) -> OperationResult:
        """Adopt an operation's store when it advanced."""
        if result.changed:
            self.store = result.store
            self.dirty = True
        return result


@asynccontextmanager
async def store_transaction(session: AsyncSession, key: str) -> AsyncIterator[StoreTransaction]:
    """
    Lock the store, load it reconciled, and persist it if an operation changed it.

    An exception inside the block leaves the saved document untouched.
    """
    async with hold_store_lock(key):
        store = reconcile(await load_store(session, key))
        txn = StoreTransaction(key, store)
        yield txn
        if txn.dirty:
            await save_store(session, key, txn.store)
            await session.commit()
            logger.debug("store_saved", extra={"store_key": key})
