"""
Catalog editing: create master cards and edit card display state.

Edits apply to any registry id, catalog or instance alike. A rename is
mirrored onto the card's catalog entry when it has one.
"""

import logging

from cardengine.models.card import CardDefinition, CardMeta, Rarity, normalize_tags, new_card_id
from cardengine.models.failure import FailureKind
from cardengine.models.result import Notice, OperationResult
from cardengine.models.store import CardStore
from cardengine.services.reconciler import commit
from cardengine.services.transfer import IdFactory

logger = logging.getLogger(__name__)


def _missing_card(store: CardStore, card_id: str) -> OperationResult | None:
    if card_id and store.knows(card_id):
        return None
    return OperationResult.unchanged(
        store, Notice(FailureKind.NOT_FOUND, f"Card '{card_id}' not found.")
    )


def create_catalog_card(
    store: CardStore,
    name: str | None = None,
    id_factory: IdFactory = new_card_id,
) -> OperationResult:
    """Add a master card with default metadata; default name is 'Card <n>'."""
    work = store.copy()
    card_id = id_factory()
    name = (name or "").strip() or f"Card {len(work.registry.names) + 1}"

    work.catalog.append(CardDefinition(id=card_id, name=name))
    work.registry.register(card_id, name)

    logger.info("catalog_card_created", extra={"card_id": card_id})
    return commit(work, created_ids=[card_id])


def edit_card(
    store: CardStore,
    card_id: str,
    name: str | None = None,
    card_type: str = "",
    rarity: Rarity | str = Rarity.COMMON,
    rules_html: str = "",
) -> OperationResult:
    """
    Replace a card's name, type, rarity and rules text.

    Tags are kept. A blank name leaves the current name in place.
    """
    missing = _missing_card(store, card_id)
    if missing is not None:
        return missing

    work = store.copy()
    new_name = (name or "").strip()
    if new_name and new_name != work.registry.names.get(card_id):
        work.registry.names[card_id] = new_name
        for entry in work.catalog:
            if entry.id == card_id:
                entry.name = new_name

    previous = work.registry.meta_of(card_id)
    work.registry.meta[card_id] = CardMeta(
        type=(card_type or "").strip(),
        rarity=Rarity.parse(rarity),
        rules_html=rules_html or "",
        tags=list(previous.tags),
    )
    return commit(work)


def set_card_tags(store: CardStore, card_id: str, tags: list[str]) -> OperationResult:
    missing = _missing_card(store, card_id)
    if missing is not None:
        return missing

    work = store.copy()
    meta = work.registry.meta_of(card_id).clone()
    meta.tags = normalize_tags(tags)
    work.registry.meta[card_id] = meta
    return commit(work)


def set_card_image(store: CardStore, card_id: str, image: str | None) -> OperationResult:
    """Set a card's artwork path; None or "" clears it."""
    missing = _missing_card(store, card_id)
    if missing is not None:
        return missing

    work = store.copy()
    if image:
        work.registry.images[card_id] = image
    else:
        work.registry.images.pop(card_id, None)
    return commit(work)


def clear_card_image(store: CardStore, card_id: str) -> OperationResult:
    return set_card_image(store, card_id, None)
