"""
Pile management: deck and hand lifecycle plus slot and pack artwork.

Clearing or deleting a pile sends its cards to the pool rather than
destroying them.
"""

import logging

from cardengine.config import HAND_SLOT_COUNT, settings
from cardengine.models.card import new_card_id
from cardengine.models.failure import FailureKind
from cardengine.models.result import Notice, OperationResult
from cardengine.models.store import CardStore
from cardengine.models.zones import Deck, Hand, fit_slots
from cardengine.services.booster import find_pack_type
from cardengine.services.reconciler import commit
from cardengine.services.transfer import IdFactory

logger = logging.getLogger(__name__)


def _not_found(what: str, ident: str) -> Notice:
    return Notice(FailureKind.NOT_FOUND, f"{what} '{ident}' not found.")


def _bad_slot(index: int) -> Notice:
    return Notice(
        FailureKind.INVALID_INPUT,
        f"Slot index must be between 0 and {HAND_SLOT_COUNT - 1}, got {index}.",
    )


def _to_pool(store: CardStore, card_ids: list[str]) -> None:
    for cid in card_ids:
        if cid and cid not in store.pool:
            store.pool.append(cid)


# --- Decks ---


def create_deck(
    store: CardStore,
    name: str | None = None,
    id_factory: IdFactory = new_card_id,
) -> OperationResult:
    work = store.copy()
    deck_id = id_factory()
    name = (name or "").strip() or f"Deck {len(work.decks) + 1}"
    work.decks.append(Deck(id=deck_id, name=name))
    return commit(work, created_ids=[deck_id])


def rename_deck(store: CardStore, deck_id: str, name: str) -> OperationResult:
    if store.find_deck(deck_id) is None:
        return OperationResult.unchanged(store, _not_found("Deck", deck_id))
    name = (name or "").strip()
    if not name:
        return OperationResult.unchanged(store)

    work = store.copy()
    work.find_deck(deck_id).name = name  # type: ignore[union-attr]
    return commit(work)


def toggle_deck_collapsed(store: CardStore, deck_id: str) -> OperationResult:
    if store.find_deck(deck_id) is None:
        return OperationResult.unchanged(store, _not_found("Deck", deck_id))

    work = store.copy()
    deck = work.find_deck(deck_id)
    deck.collapsed = not deck.collapsed  # type: ignore[union-attr]
    return commit(work)


def clear_deck(store: CardStore, deck_id: str) -> OperationResult:
    """Empty a deck into the pool."""
    work = store.copy()
    deck = work.find_deck(deck_id)
    if deck is None:
        return OperationResult.unchanged(store, _not_found("Deck", deck_id))

    _to_pool(work, deck.cards)
    deck.cards = []
    return commit(work)


def delete_deck(store: CardStore, deck_id: str) -> OperationResult:
    """
    Remove a deck, sending its cards to the pool.

    Hands linked to the deck keep the dangling link; draws from them report
    the missing deck.
    """
    deck = store.find_deck(deck_id)
    if deck is None:
        return OperationResult.unchanged(store, _not_found("Deck", deck_id))

    work = store.copy()
    _to_pool(work, deck.cards)
    work.decks = [d for d in work.decks if d.id != deck_id]
    logger.info("deck_deleted", extra={"deck_id": deck_id, "cards_to_pool": len(deck.cards)})
    return commit(work)


# --- Hands ---


def create_hand(
    store: CardStore,
    name: str | None = None,
    id_factory: IdFactory = new_card_id,
    slot_defaults: list[str] | None = None,
) -> OperationResult:
    work = store.copy()
    hand_id = id_factory()
    name = (name or "").strip() or f"Hand {len(work.hands) + 1}"
    defaults = slot_defaults if slot_defaults is not None else settings.slot_default_images
    work.hands.append(Hand(id=hand_id, name=name, slot_images=fit_slots([], defaults)))
    return commit(work, created_ids=[hand_id])


def rename_hand(store: CardStore, hand_id: str, name: str) -> OperationResult:
    if store.find_hand(hand_id) is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))
    name = (name or "").strip()
    if not name:
        return OperationResult.unchanged(store)

    work = store.copy()
    work.find_hand(hand_id).name = name  # type: ignore[union-attr]
    return commit(work)


def toggle_hand_collapsed(store: CardStore, hand_id: str) -> OperationResult:
    if store.find_hand(hand_id) is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))

    work = store.copy()
    hand = work.find_hand(hand_id)
    hand.collapsed = not hand.collapsed  # type: ignore[union-attr]
    return commit(work)


def link_hand_to_deck(store: CardStore, hand_id: str, deck_id: str) -> OperationResult:
    """Set the deck a hand draws from; "" unlinks it."""
    if store.find_hand(hand_id) is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))
    if deck_id and store.find_deck(deck_id) is None:
        return OperationResult.unchanged(store, _not_found("Deck", deck_id))

    work = store.copy()
    work.find_hand(hand_id).src_deck_id = deck_id or ""  # type: ignore[union-attr]
    return commit(work)


def clear_hand(store: CardStore, hand_id: str) -> OperationResult:
    """Send a hand's cards and discard to the pool. Slots are kept."""
    work = store.copy()
    hand = work.find_hand(hand_id)
    if hand is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))

    _to_pool(work, [*hand.cards, *hand.discard])
    hand.cards = []
    hand.discard = []
    return commit(work)


def delete_hand(store: CardStore, hand_id: str) -> OperationResult:
    """
    Remove a hand, sending its cards and discard to the pool.

    Cards sitting in its slots go with the hand.
    """
    hand = store.find_hand(hand_id)
    if hand is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))

    work = store.copy()
    _to_pool(work, [*hand.cards, *hand.discard])
    work.hands = [h for h in work.hands if h.id != hand_id]
    logger.info("hand_deleted", extra={"hand_id": hand_id})
    return commit(work)


# --- Slots ---


def clear_slot(store: CardStore, hand_id: str, index: int) -> OperationResult:
    """Empty one slot. The card it held is left unowned."""
    if store.find_hand(hand_id) is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))
    if not 0 <= index < HAND_SLOT_COUNT:
        return OperationResult.unchanged(store, _bad_slot(index))

    work = store.copy()
    work.find_hand(hand_id).slots[index] = ""  # type: ignore[union-attr]
    return commit(work)


def set_slot_image(store: CardStore, hand_id: str, index: int, image: str | None) -> OperationResult:
    """Set slot artwork; None or "" clears it."""
    if store.find_hand(hand_id) is None:
        return OperationResult.unchanged(store, _not_found("Hand", hand_id))
    if not 0 <= index < HAND_SLOT_COUNT:
        return OperationResult.unchanged(store, _bad_slot(index))

    work = store.copy()
    work.find_hand(hand_id).slot_images[index] = image or ""  # type: ignore[union-attr]
    return commit(work)


def clear_slot_image(store: CardStore, hand_id: str, index: int) -> OperationResult:
    return set_slot_image(store, hand_id, index, None)


# --- Booster artwork ---


def set_pack_image(store: CardStore, pack_key: str, image: str | None) -> OperationResult:
    """Set a booster tile's artwork; None or "" clears it."""
    if find_pack_type(pack_key) is None:
        return OperationResult.unchanged(
            store, Notice(FailureKind.UNKNOWN_PACK, f"Unknown pack type '{pack_key}'.")
        )

    work = store.copy()
    if image:
        work.pack_images[pack_key] = image
    else:
        work.pack_images.pop(pack_key, None)
    return commit(work)


def clear_pack_image(store: CardStore, pack_key: str) -> OperationResult:
    return set_pack_image(store, pack_key, None)
