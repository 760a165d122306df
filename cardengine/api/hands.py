"""
Hand play endpoints.

Draw from, mulligan against, and return cards to a hand's linked deck.
All of these report a known failure when the hand has no usable link.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.api.responses import OperationData, operation_response
from cardengine.db import store_transaction
from cardengine.db.database import get_session
from cardengine.models.failure import ApiResponse
from cardengine.services.transfer import (
    DrawMode,
    draw_to_hand,
    mulligan,
    return_all_to_linked_deck,
    return_card_to_linked_deck,
)

router = APIRouter(prefix="/stores/{store_key}/hands/{hand_id}", tags=["hands"])


class DrawRequest(BaseModel):
    count: int = Field(default=1, ge=1, le=100)
    mode: DrawMode = DrawMode.TOP


class MulliganRequest(BaseModel):
    draw_count: int | None = Field(default=None, ge=0, le=100)


class ReturnCardRequest(BaseModel):
    card_id: str = Field(..., min_length=1)


@router.post("/draw", response_model=ApiResponse[OperationData])
async def draw(
    store_key: str,
    hand_id: str,
    request: DrawRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Draw from the top, bottom, or a random position of the linked deck."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(draw_to_hand(txn.store, hand_id, request.count, request.mode))
    return operation_response(result)


@router.post("/mulligan", response_model=ApiResponse[OperationData])
async def mulligan_hand(
    store_key: str,
    hand_id: str,
    request: MulliganRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(mulligan(txn.store, hand_id, request.draw_count))
    return operation_response(result)


@router.post("/return", response_model=ApiResponse[OperationData])
async def return_card(
    store_key: str,
    hand_id: str,
    request: ReturnCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Put one card on the front of the linked deck."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(return_card_to_linked_deck(txn.store, hand_id, request.card_id))
    return operation_response(result)


@router.post("/return-all", response_model=ApiResponse[OperationData])
async def return_all(
    store_key: str,
    hand_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Return the hand's cards, discard and slot cards to the linked deck."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(return_all_to_linked_deck(txn.store, hand_id))
    return operation_response(result)
