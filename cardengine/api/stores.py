"""
Store API endpoints.

Read the derived store view the renderer consumes, or drop a store.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.db import delete_snapshot, hold_store_lock, store_transaction
from cardengine.db.database import get_session
from cardengine.models.failure import ApiResponse, create_success
from cardengine.services.views import DEFAULT_SORT, StoreView, build_store_view

router = APIRouter(prefix="/stores", tags=["stores"])


class DeleteStoreData(BaseModel):
    store_key: str
    deleted: bool


@router.get("/{store_key}", response_model=ApiResponse[StoreView])
async def get_store_view(
    store_key: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    search: Annotated[str, Query(max_length=200)] = "",
    sort: str = DEFAULT_SORT,
    pile_search: Annotated[str, Query(max_length=200)] = "",
) -> ApiResponse[Any]:
    """
    Get the sorted, filtered view of a store.

    `search` filters card lists by name, type, rarity and tags;
    `pile_search` filters decks and hands by name.
    """
    async with store_transaction(session, store_key) as txn:
        view = build_store_view(txn.store, search=search, sort_key=sort, pile_search=pile_search)
    return create_success(view)


@router.delete("/{store_key}", response_model=ApiResponse[DeleteStoreData])
async def delete_store(
    store_key: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Delete a store's persisted document. Irreversible."""
    async with hold_store_lock(store_key):
        deleted = await delete_snapshot(session, store_key)
        await session.commit()
    return create_success(DeleteStoreData(store_key=store_key, deleted=deleted))
