"""
Snapshot persistence.

load/save of whole card-store documents. Saving overwrites; loading a key
that was never saved yields the structurally empty document.
"""

import copy
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.config import settings
from cardengine.models.db import CardDocumentDB
from cardengine.models.store import CardStore, empty_snapshot


async def get_document(session: AsyncSession, key: str) -> CardDocumentDB | None:
    """Get a stored document by key, or None."""
    result = await session.execute(select(CardDocumentDB).where(CardDocumentDB.key == key))
    return result.scalar_one_or_none()


async def load_snapshot(session: AsyncSession, key: str) -> dict[str, Any]:
    """Last saved snapshot for the key, or the empty default."""
    document = await get_document(session, key)
    if document is None or not document.snapshot:
        return empty_snapshot()
    return copy.deepcopy(document.snapshot)


async def save_snapshot(
    session: AsyncSession, key: str, snapshot: dict[str, Any]
) -> CardDocumentDB:
    """Overwrite the snapshot stored under the key, creating the row if needed."""
    document = await get_document(session, key)
    if document is None:
        document = CardDocumentDB(key=key, snapshot=snapshot)
        session.add(document)
    else:
        # Reassign so the JSON column is flagged dirty
        document.snapshot = copy.deepcopy(snapshot)
    await session.flush()
    return document


async def delete_snapshot(session: AsyncSession, key: str) -> bool:
    """
    Delete a stored document.

    Returns True if deleted, False if not found.
    """
    document = await get_document(session, key)
    if document is None:
        return False
    await session.delete(document)
    await session.flush()
    return True


async def load_store(
    session: AsyncSession, key: str, slot_defaults: list[str] | None = None
) -> CardStore:
    """Load and decode a store, normalizing hands against the slot defaults."""
    snapshot = await load_snapshot(session, key)
    defaults = slot_defaults if slot_defaults is not None else settings.slot_default_images
    return CardStore.from_snapshot(snapshot, defaults)


async def save_store(session: AsyncSession, key: str, store: CardStore) -> CardDocumentDB:
    return await save_snapshot(session, key, store.to_snapshot())
