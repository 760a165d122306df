"""
Booster API endpoints.

Open packs into the pool and manage booster tile artwork.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.api.responses import OperationData, operation_response
from cardengine.db import store_transaction
from cardengine.db.database import get_session
from cardengine.models.failure import ApiResponse
from cardengine.services.booster import open_booster
from cardengine.services.piles import clear_pack_image, set_pack_image

router = APIRouter(prefix="/stores/{store_key}/boosters", tags=["boosters"])


class PackImageRequest(BaseModel):
    image: str = Field(..., min_length=1)


@router.post("/{pack_key}", response_model=ApiResponse[OperationData])
async def open_pack(
    store_key: str,
    pack_key: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """
    Open one booster into the pool.

    A short pack still succeeds; the shortfall is listed in notices.
    """
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(open_booster(txn.store, pack_key))
    return operation_response(result)


@router.put("/{pack_key}/image", response_model=ApiResponse[OperationData])
async def update_pack_image(
    store_key: str,
    pack_key: str,
    request: PackImageRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(set_pack_image(txn.store, pack_key, request.image))
    return operation_response(result)


@router.delete("/{pack_key}/image", response_model=ApiResponse[OperationData])
async def remove_pack_image(
    store_key: str,
    pack_key: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(clear_pack_image(txn.store, pack_key))
    return operation_response(result)
