"""
Pile API endpoints.

Deck and hand lifecycle, hand-to-deck links, and hand slots.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.api.responses import OperationData, operation_response
from cardengine.db import store_transaction
from cardengine.db.database import get_session
from cardengine.models.failure import ApiResponse
from cardengine.services import piles

router = APIRouter(prefix="/stores/{store_key}", tags=["piles"])


class CreatePileRequest(BaseModel):
    name: str | None = Field(default=None, description="Defaults to 'Deck <n>' / 'Hand <n>'")


class UpdateDeckRequest(BaseModel):
    name: str | None = None
    toggle_collapsed: bool = False


class UpdateHandRequest(BaseModel):
    name: str | None = None
    src_deck_id: str | None = Field(
        default=None,
        description="Deck to draw from; empty string unlinks",
    )
    toggle_collapsed: bool = False


class SlotImageRequest(BaseModel):
    image: str = Field(..., min_length=1)


# --- Decks ---


@router.post("/decks", response_model=ApiResponse[OperationData])
async def create_deck(
    store_key: str,
    request: CreatePileRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.create_deck(txn.store, request.name))
    return operation_response(result)


@router.patch("/decks/{deck_id}", response_model=ApiResponse[OperationData])
async def update_deck(
    store_key: str,
    deck_id: str,
    request: UpdateDeckRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Rename a deck and/or flip its collapsed flag."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.rename_deck(txn.store, deck_id, request.name or ""))
        if request.toggle_collapsed and not result.refused:
            result = txn.apply(piles.toggle_deck_collapsed(txn.store, deck_id))
    return operation_response(result)


@router.post("/decks/{deck_id}/clear", response_model=ApiResponse[OperationData])
async def clear_deck(
    store_key: str,
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Move every card in the deck to the pool."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.clear_deck(txn.store, deck_id))
    return operation_response(result)


@router.delete("/decks/{deck_id}", response_model=ApiResponse[OperationData])
async def delete_deck(
    store_key: str,
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Delete a deck; its cards go to the pool."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.delete_deck(txn.store, deck_id))
    return operation_response(result)


# --- Hands ---


@router.post("/hands", response_model=ApiResponse[OperationData])
async def create_hand(
    store_key: str,
    request: CreatePileRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.create_hand(txn.store, request.name))
    return operation_response(result)


@router.patch("/hands/{hand_id}", response_model=ApiResponse[OperationData])
async def update_hand(
    store_key: str,
    hand_id: str,
    request: UpdateHandRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Rename a hand, link it to a deck, and/or flip its collapsed flag."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.rename_hand(txn.store, hand_id, request.name or ""))
        if request.src_deck_id is not None and not result.refused:
            result = txn.apply(piles.link_hand_to_deck(txn.store, hand_id, request.src_deck_id))
        if request.toggle_collapsed and not result.refused:
            result = txn.apply(piles.toggle_hand_collapsed(txn.store, hand_id))
    return operation_response(result)


@router.post("/hands/{hand_id}/clear", response_model=ApiResponse[OperationData])
async def clear_hand(
    store_key: str,
    hand_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Move the hand's cards and discard to the pool."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.clear_hand(txn.store, hand_id))
    return operation_response(result)


@router.delete("/hands/{hand_id}", response_model=ApiResponse[OperationData])
async def delete_hand(
    store_key: str,
    hand_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.delete_hand(txn.store, hand_id))
    return operation_response(result)


# --- Slots ---


@router.delete("/hands/{hand_id}/slots/{index}", response_model=ApiResponse[OperationData])
async def clear_slot(
    store_key: str,
    hand_id: str,
    index: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.clear_slot(txn.store, hand_id, index))
    return operation_response(result)


@router.put("/hands/{hand_id}/slots/{index}/image", response_model=ApiResponse[OperationData])
async def set_slot_image(
    store_key: str,
    hand_id: str,
    index: int,
    request: SlotImageRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.set_slot_image(txn.store, hand_id, index, request.image))
    return operation_response(result)


@router.delete("/hands/{hand_id}/slots/{index}/image", response_model=ApiResponse[OperationData])
async def clear_slot_image(
    store_key: str,
    hand_id: str,
    index: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(piles.clear_slot_image(txn.store, hand_id, index))
    return operation_response(result)
