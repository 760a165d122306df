"""
Transfer Engine: moves and clones cards between zones.

Every operation takes a CardStore and returns an OperationResult. Mutation
happens on a working copy; the result store has been reconciled and passed
the invariant check. A reported condition that stops an operation returns
the input store untouched.

Moving out of the catalog is a copy: a fresh id is minted and the
catalog entry is never altered.
"""

import logging
import random
from collections.abc import Callable
from enum import Enum

from cardengine.config import HAND_SLOT_COUNT, settings
from cardengine.models.card import new_card_id
from cardengine.models.failure import FailureKind
from cardengine.models.result import Notice, OperationResult
from cardengine.models.store import CardStore
from cardengine.models.zones import (
    CatalogRef,
    Deck,
    DeckRef,
    Hand,
    HandCardsRef,
    HandDiscardRef,
    HandSlotRef,
    PoolRef,
    ZoneRef,
)
from cardengine.services.reconciler import commit

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


class DrawMode(str, Enum):
    """Which end of the linked deck a draw takes from."""

    TOP = "top"
    BOTTOM = "bottom"
    RANDOM = "random"


def _not_found(what: str, ident: str) -> Notice:
    return Notice(FailureKind.NOT_FOUND, f"{what} '{ident}' not found.")


def _append_once(ids: list[str], card_id: str) -> None:
    if card_id not in ids:
        ids.append(card_id)


def _missing_target(store: CardStore, ref: ZoneRef) -> Notice | None:
    """Report a destination deck or hand that does not exist."""
    match ref:
        case DeckRef(deck_id) if store.find_deck(deck_id) is None:
            return _not_found("Deck", deck_id)
        case HandCardsRef(hand_id) | HandDiscardRef(hand_id) if store.find_hand(hand_id) is None:
            return _not_found("Hand", hand_id)
    return None


def _insert(store: CardStore, card_id: str, ref: ZoneRef) -> None:
    """Append an id to a sequence zone unless already present."""
    match ref:
        case PoolRef():
            _append_once(store.pool, card_id)
        case DeckRef(deck_id):
            deck = store.find_deck(deck_id)
            if deck is not None:
                _append_once(deck.cards, card_id)
        case HandCardsRef(hand_id):
            hand = store.find_hand(hand_id)
            if hand is not None:
                _append_once(hand.cards, card_id)
        case HandDiscardRef(hand_id):
            hand = store.find_hand(hand_id)
            if hand is not None:
                _append_once(hand.discard, card_id)


def _clone(store: CardStore, source_id: str, id_factory: IdFactory) -> str:
    """Mint a new id carrying a copy of the source's registry entry."""
    new_id = id_factory()
    store.registry.clone_entry(source_id, new_id)
    logger.debug("card_cloned", extra={"source_id": source_id, "card_id": new_id})
    return new_id


def move_card(
    store: CardStore,
    card_id: str,
    from_ref: ZoneRef,
    to_ref: ZoneRef,
    id_factory: IdFactory = new_card_id,
) -> OperationResult:
    """
    Move a card to a zone, or copy it there when it comes from the catalog.

    Dropping onto the catalog is a no-op. Slot targets are handled by
    move_card_to_slot().
    """
    if isinstance(to_ref, HandSlotRef):
        return move_card_to_slot(
            store, card_id, from_ref, to_ref.hand_id, to_ref.index, id_factory=id_factory
        )
    if isinstance(to_ref, CatalogRef):
        return OperationResult.unchanged(store)

    missing = _missing_target(store, to_ref)
    if missing is not None:
        return OperationResult.unchanged(store, missing)

    work = store.copy()
    if isinstance(from_ref, CatalogRef):
        if not store.in_catalog(card_id):
            return OperationResult.unchanged(store, _not_found("Catalog card", card_id))
        new_id = _clone(work, card_id, id_factory)
        _insert(work, new_id, to_ref)
        return commit(work, created_ids=[new_id])

    if not store.knows(card_id):
        return OperationResult.unchanged(store, _not_found("Card", card_id))

    work.remove_everywhere(card_id)
    _insert(work, card_id, to_ref)
    return commit(work)


def move_card_to_slot(
    store: CardStore,
    card_id: str,
    from_ref: ZoneRef,
    hand_id: str,
    slot_index: int,
    id_factory: IdFactory = new_card_id,
    return_displaced_to_pool: bool | None = None,
) -> OperationResult:
    """
    Place a card into exactly one hand slot, overwriting its occupant.

    The displaced card is left unowned unless return_displaced_to_pool
    (default from settings) sends it to the pool.
    """
    if return_displaced_to_pool is None:
        return_displaced_to_pool = settings.return_displaced_slot_cards_to_pool

    work = store.copy()
    target = work.find_hand(hand_id)
    if target is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))
    if not 0 <= slot_index < HAND_SLOT_COUNT:
        return OperationResult.unchanged(
            store,
            Notice(
                FailureKind.INVALID_INPUT,
                f"Slot index must be between 0 and {HAND_SLOT_COUNT - 1}, got {slot_index}.",
            ),
        )

    created: list[str] = []
    if isinstance(from_ref, CatalogRef):
        if not store.in_catalog(card_id):
            return OperationResult.unchanged(store, _not_found("Catalog card", card_id))
        placed = _clone(work, card_id, id_factory)
        created.append(placed)
    else:
        if not store.knows(card_id):
            return OperationResult.unchanged(store, _not_found("Card", card_id))
        placed = card_id
        work.remove_everywhere(card_id)

    displaced = target.slots[slot_index]
    target.slots[slot_index] = placed

    if displaced and displaced != placed:
        if return_displaced_to_pool:
            _append_once(work.pool, displaced)
        else:
            logger.info(
                "slot_card_displaced",
                extra={"hand_id": hand_id, "slot_index": slot_index, "card_id": displaced},
            )

    return commit(work, created_ids=created)


def _resolve_linked_deck(
    store: CardStore, hand_id: str
) -> tuple[Hand, Deck] | Notice:
    hand = store.find_hand(hand_id)
    if hand is None:
        return _not_found("Hand", hand_id)
    if not hand.src_deck_id:
        return Notice(FailureKind.NO_LINKED_DECK, "No linked deck selected for this hand.")
    deck = store.find_deck(hand.src_deck_id)
    if deck is None:
        return Notice(FailureKind.LINKED_DECK_NOT_FOUND, "Linked deck not found.")
    return hand, deck


def _return_to_deck(store: CardStore, deck: Deck, card_id: str) -> None:
    """Pull a card from everywhere and put it at index 0 of the deck."""
    store.remove_everywhere(card_id)
    deck.cards.insert(0, card_id)


def return_card_to_linked_deck(store: CardStore, hand_id: str, card_id: str) -> OperationResult:
    """Send one card, from anywhere, to the front of the hand's linked deck."""
    work = store.copy()
    linked = _resolve_linked_deck(work, hand_id)
    if isinstance(linked, Notice):
        return OperationResult.unchanged(store, linked)
    if not store.knows(card_id):
        return OperationResult.unchanged(store, _not_found("Card", card_id))
    _, deck = linked
    _return_to_deck(work, deck, card_id)
    return commit(work)


def return_all_to_linked_deck(store: CardStore, hand_id: str) -> OperationResult:
    """Return every card in a hand's cards, discard and slots to its linked deck."""
    work = store.copy()
    linked = _resolve_linked_deck(work, hand_id)
    if isinstance(linked, Notice):
        return OperationResult.unchanged(store, linked)
    hand, deck = linked
    returning = hand.owned_ids()
    for card_id in returning:
        _return_to_deck(work, deck, card_id)

    logger.info("hand_returned", extra={"hand_id": hand_id, "returned": len(returning)})
    return commit(work)


def _draw(deck: Deck, hand: Hand, count: int, mode: DrawMode, rng: random.Random) -> int:
    drawn = 0
    for _ in range(count):
        if not deck.cards:
            break
        if mode is DrawMode.TOP:
            idx = len(deck.cards) - 1
        elif mode is DrawMode.BOTTOM:
            idx = 0
        else:
            idx = rng.randrange(len(deck.cards))
        _append_once(hand.cards, deck.cards.pop(idx))
        drawn += 1
    return drawn


def draw_to_hand(
    store: CardStore,
    hand_id: str,
    count: int = 1,
    mode: DrawMode | str = DrawMode.TOP,
    rng: random.Random | None = None,
) -> OperationResult:
    """
    Draw up to `count` cards from the linked deck into the hand.

    top takes the last card, bottom the first, random a uniform index.
    Stops early when the deck runs out.
    """
    try:
        mode = DrawMode(mode)
    except ValueError:
        return OperationResult.unchanged(
            store, Notice(FailureKind.INVALID_INPUT, f"Unknown draw mode '{mode}'.")
        )
    if count < 1:
        return OperationResult.unchanged(
            store, Notice(FailureKind.INVALID_INPUT, "Draw count must be at least 1.")
        )

    work = store.copy()
    linked = _resolve_linked_deck(work, hand_id)
    if isinstance(linked, Notice):
        return OperationResult.unchanged(store, linked)
    hand, deck = linked
    drawn = _draw(deck, hand, count, mode, rng or random.Random())

    logger.debug(
        "cards_drawn",
        extra={"hand_id": hand_id, "mode": mode.value, "requested": count, "drawn": drawn},
    )
    return commit(work)


def mulligan(
    store: CardStore,
    hand_id: str,
    draw_count: int | None = None,
    rng: random.Random | None = None,
) -> OperationResult:
    """
    Put the hand's cards back onto the top of the linked deck, then draw at random.

    Only hand cards return; discard and slots are untouched.
    """
    if draw_count is None:
        draw_count = settings.mulligan_draw_count

    work = store.copy()
    linked = _resolve_linked_deck(work, hand_id)
    if isinstance(linked, Notice):
        return OperationResult.unchanged(store, linked)
    hand, deck = linked
    returning, hand.cards = hand.cards, []
    for card_id in returning:
        _append_once(deck.cards, card_id)

    _draw(deck, hand, max(draw_count, 0), DrawMode.RANDOM, rng or random.Random())
    return commit(work)


def delete_card(
    store: CardStore,
    card_id: str,
    clear_slots: bool | None = None,
) -> OperationResult:
    """
    Permanently remove a card from the catalog, every zone and the registry.

    Hand slots keep the dead id unless clear_slots (default from settings)
    is set.
    """
    if clear_slots is None:
        clear_slots = settings.clear_slots_on_delete

    if not store.knows(card_id):
        return OperationResult.unchanged(store, _not_found("Card", card_id))

    work = store.copy()
    work.catalog = [c for c in work.catalog if c.id != card_id]
    work.remove_everywhere(card_id, include_slots=clear_slots)
    work.registry.forget(card_id)

    logger.info("card_deleted", extra={"card_id": card_id, "slots_cleared": clear_slots})
    return commit(work)
