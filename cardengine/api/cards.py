"""
Card API endpoints.

Catalog creation, card edits, deletion, and moves between zones.
Zone references use the wire form: pool, master, deck:<id>, hand:<id>,
hand-discard:<id>, hand-slot:<hand id>:<index>.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardengine.api.responses import OperationData, operation_response
from cardengine.db import store_transaction
from cardengine.db.database import get_session
from cardengine.models.card import Rarity
from cardengine.models.failure import ApiResponse, FailureKind, create_known_failure
from cardengine.models.zones import ZoneRefError, parse_zone_ref
from cardengine.services.catalog import (
    clear_card_image,
    create_catalog_card,
    edit_card,
    set_card_image,
    set_card_tags,
)
from cardengine.services.transfer import delete_card, move_card, move_card_to_slot

router = APIRouter(prefix="/stores/{store_key}", tags=["cards"])


class CreateCardRequest(BaseModel):
    name: str | None = Field(default=None, description="Defaults to 'Card <n>'")


class EditCardRequest(BaseModel):
    name: str | None = None
    type: str = ""
    rarity: Rarity = Rarity.COMMON
    rules_html: str = Field(default="", description="Rules text as HTML")


class TagsRequest(BaseModel):
    tags: list[str] = Field(..., examples=[["Bullet", "draw"]])


class ImageRequest(BaseModel):
    image: str = Field(..., min_length=1, examples=["cards/ace.webp"])


class MoveRequest(BaseModel):
    card_id: str = Field(..., min_length=1)
    from_zone: str = Field(..., examples=["pool", "master", "hand-slot:h1:3"])
    to_zone: str = Field(..., examples=["deck:d1", "hand:h1", "hand-discard:h1"])


class SlotMoveRequest(BaseModel):
    card_id: str = Field(..., min_length=1)
    from_zone: str
    hand_id: str
    slot_index: int


@router.post("/catalog", response_model=ApiResponse[OperationData])
async def create_card(
    store_key: str,
    request: CreateCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Create a master catalog card with default metadata."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(create_catalog_card(txn.store, request.name))
    return operation_response(result)


@router.patch("/cards/{card_id}", response_model=ApiResponse[OperationData])
async def update_card(
    store_key: str,
    card_id: str,
    request: EditCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Replace a card's name, type, rarity and rules text. Tags are kept."""
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(
            edit_card(
                txn.store,
                card_id,
                name=request.name,
                card_type=request.type,
                rarity=request.rarity,
                rules_html=request.rules_html,
            )
        )
    return operation_response(result)


@router.put("/cards/{card_id}/tags", response_model=ApiResponse[OperationData])
async def update_card_tags(
    store_key: str,
    card_id: str,
    request: TagsRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(set_card_tags(txn.store, card_id, request.tags))
    return operation_response(result)


@router.put("/cards/{card_id}/image", response_model=ApiResponse[OperationData])
async def update_card_image(
    store_key: str,
    card_id: str,
    request: ImageRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(set_card_image(txn.store, card_id, request.image))
    return operation_response(result)


@router.delete("/cards/{card_id}/image", response_model=ApiResponse[OperationData])
async def remove_card_image(
    store_key: str,
    card_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(clear_card_image(txn.store, card_id))
    return operation_response(result)


@router.delete("/cards/{card_id}", response_model=ApiResponse[OperationData])
async def remove_card(
    store_key: str,
    card_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """
    Permanently delete a card from the catalog, every zone and the registry.

    This cannot be undone.
    """
    async with store_transaction(session, store_key) as txn:
        result = txn.apply(delete_card(txn.store, card_id))
    return operation_response(result)


@router.post("/moves", response_model=ApiResponse[OperationData])
async def move(
    store_key: str,
    request: MoveRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """
    Move a card between zones.

    Moving from the master catalog copies the card into a new instance.
    """
    try:
        from_ref = parse_zone_ref(request.from_zone)
        to_ref = parse_zone_ref(request.to_zone)
    except ZoneRefError as e:
        return create_known_failure(FailureKind.INVALID_INPUT, str(e))

    async with store_transaction(session, store_key) as txn:
        result = txn.apply(move_card(txn.store, request.card_id, from_ref, to_ref))
    return operation_response(result)


@router.post("/moves/slot", response_model=ApiResponse[OperationData])
async def move_to_slot(
    store_key: str,
    request: SlotMoveRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ApiResponse[Any]:
    """Place a card into one hand slot, overwriting its occupant."""
    try:
        from_ref = parse_zone_ref(request.from_zone)
    except ZoneRefError as e:
        return create_known_failure(FailureKind.INVALID_INPUT, str(e))

    async with store_transaction(session, store_key) as txn:
        result = txn.apply(
            move_card_to_slot(
                txn.store, request.card_id, from_ref, request.hand_id, request.slot_index
            )
        )
    return operation_response(result)
