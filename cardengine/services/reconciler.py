"""
Ownership Reconciler: restores store invariants in one deterministic pass.

INVARIANTS (hold for every store returned by reconcile()):
- Single ownership: an id lives in at most one of pool, a deck,
  or a hand's cards / discard / slots
- Precedence on conflict: hand > deck > pool; within a tier the first
  claimant in document order keeps the id
- No duplicates within a zone, first occurrence wins
- Hand slots and slot images are exactly HAND_SLOT_COUNT wide
- Registry holds only ids referenced by the catalog or some zone
- Catalog entries are unique by id

reconcile() is total, never mutates its argument, and is idempotent.
"""

import logging
from collections import Counter

from cardengine.config import HAND_SLOT_COUNT
from cardengine.models.card import CardDefinition
from cardengine.models.failure import InvariantViolationError
from cardengine.models.result import Notice, OperationResult
from cardengine.models.store import CardStore
from cardengine.models.zones import fit_slots

logger = logging.getLogger(__name__)


def _claim(ids: list[str], owned: set[str]) -> list[str]:
    """Keep ids not yet owned, in order, and mark them owned."""
    kept: list[str] = []
    for cid in ids or []:
        if not cid or cid in owned:
            continue
        owned.add(cid)
        kept.append(cid)
    return kept


def reconcile(store: CardStore) -> CardStore:
    """Return a repaired copy of the store."""
    result = store.copy()
    before = sum(len(d.cards) for d in store.decks) + len(store.pool)

    # Decks first; a later deck loses ids an earlier deck already holds
    deck_owned: set[str] = set()
    for deck in result.decks:
        deck.cards = _claim(deck.cards, deck_owned)

    # Hands: cards, discard and slots are peers
    hand_owned: set[str] = set()
    for hand in result.hands:
        hand.cards = _claim(hand.cards, hand_owned)
        hand.discard = _claim(hand.discard, hand_owned)
        slots = fit_slots(hand.slots)
        for i, cid in enumerate(slots):
            if not cid or cid in hand_owned:
                slots[i] = ""
            else:
                hand_owned.add(cid)
        hand.slots = slots
        hand.slot_images = fit_slots(hand.slot_images)

    # Pool yields to hands and decks
    pool_seen = set(hand_owned | deck_owned)
    result.pool = _claim(result.pool, pool_seen)

    # Hands outrank decks
    for deck in result.decks:
        deck.cards = [cid for cid in deck.cards if cid not in hand_owned]

    seen_catalog: set[str] = set()
    catalog: list[CardDefinition] = []
    for entry in result.catalog:
        if not entry.id or entry.id in seen_catalog:
            continue
        seen_catalog.add(entry.id)
        catalog.append(entry)
    result.catalog = catalog

    referenced = result.referenced_ids()
    pruned = result.registry.ids() - referenced
    for cid in pruned:
        result.registry.forget(cid)

    after = sum(len(d.cards) for d in result.decks) + len(result.pool)
    if pruned or after != before:
        logger.debug(
            "store_reconciled",
            extra={
                "pruned_registry_entries": len(pruned),
                "dropped_zone_entries": before - after,
            },
        )

    return result


def find_invariant_violations(store: CardStore) -> list[str]:
    """
    Describe every broken invariant in the store.

    Returns an empty list for a valid store.
    """
    violations: list[str] = []
    holders: Counter[str] = Counter()

    def check_sequence(label: str, ids: list[str]) -> None:
        present = [cid for cid in ids if cid]
        if len(present) != len(ids):
            violations.append(f"{label} contains an empty id")
        if len(set(present)) != len(present):
            violations.append(f"{label} contains duplicate ids")
        holders.update(set(present))

    check_sequence("pool", store.pool)
    for deck in store.decks:
        check_sequence(f"deck {deck.id}", deck.cards)
    for hand in store.hands:
        check_sequence(f"hand {hand.id} cards", hand.cards)
        check_sequence(f"hand {hand.id} discard", hand.discard)
        if len(hand.slots) != HAND_SLOT_COUNT:
            violations.append(f"hand {hand.id} has {len(hand.slots)} slots")
        if len(hand.slot_images) != HAND_SLOT_COUNT:
            violations.append(f"hand {hand.id} has {len(hand.slot_images)} slot images")
        filled = [cid for cid in hand.slots if cid]
        if len(set(filled)) != len(filled):
            violations.append(f"hand {hand.id} slots contain duplicate ids")
        holders.update(set(filled))

    for cid, count in holders.items():
        if count > 1:
            violations.append(f"card {cid} is owned by {count} zones")

    catalog_ids = [c.id for c in store.catalog]
    if len(set(catalog_ids)) != len(catalog_ids):
        violations.append("catalog contains duplicate ids")

    orphans = store.registry.ids() - store.referenced_ids()
    if orphans:
        violations.append(f"registry holds {len(orphans)} unreferenced ids")

    return violations


def ensure_invariants(store: CardStore) -> CardStore:
    """
    Postcondition check shared by every operation.

    Raises:
        InvariantViolationError: If the store breaks an invariant
    """
    violations = find_invariant_violations(store)
    if violations:
        logger.error("invariant_violation", extra={"violations": violations})
        raise InvariantViolationError(violations)
    return store


def commit(
    store: CardStore,
    notices: list[Notice] | None = None,
    created_ids: list[str] | None = None,
) -> OperationResult:
    """Reconcile a mutated working copy and wrap it as an operation result."""
    reconciled = ensure_invariants(reconcile(store))
    for notice in notices or []:
        logger.info("operation_notice", extra={"kind": notice.kind.value, "notice": notice.message})
    return OperationResult(
        store=reconciled,
        changed=True,
        notices=list(notices or []),
        created_ids=list(created_ids or []),
    )
