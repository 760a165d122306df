"""
Booster Generator: tag-filtered, rarity-tiered random packs.

A pack is drawn from catalog cards only. Chosen catalog ids are cloned
into fresh instances appended to the pool; nothing already owned by a
zone is touched.

INVARIANTS:
- Sampling is without replacement: a catalog id appears at most once per pack
- Pack size is fixed by the tier roll; a short pack only happens when the
  whole candidate pool is exhausted
- Opening a pack only appends to the pool
"""

import logging
import random
from dataclasses import dataclass

from cardengine.config import (
    LEGENDARY_TIER_THRESHOLD,
    SET_TIER_THRESHOLD,
    UNIQUE_TIER_THRESHOLD,
)
from cardengine.models.card import Rarity, new_card_id
from cardengine.models.failure import FailureKind
from cardengine.models.result import Notice, OperationResult
from cardengine.models.store import CardStore
from cardengine.services.reconciler import commit
from cardengine.services.sampling import take_random
from cardengine.services.transfer import IdFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackType:
    """A booster flavour. A tag of None matches the whole catalog."""

    key: str
    tag: str | None


PACK_TYPES: tuple[PackType, ...] = (
    PackType("Universal", None),
    PackType("Bullet", "Bullet"),
    PackType("Scope", "Scope"),
    PackType("Trigger", "Trigger"),
    PackType("Jacket", "Jacket"),
)

BASE_TIER: tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.COMMON,
    Rarity.COMMON,
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
)


def find_pack_type(pack_key: str) -> PackType | None:
    return next((p for p in PACK_TYPES if p.key == pack_key), None)


def roll_pack_tier(roll: float) -> list[Rarity]:
    """
    Rarities wanted for a pack, given a uniform roll in [0, 1).

    <0.65 base (7), <0.80 +Set (8), <0.95 +Legendary (9), else +Unique (10).
    """
    tier = list(BASE_TIER)
    if roll < SET_TIER_THRESHOLD:
        return tier
    tier.append(Rarity.SET)
    if roll < LEGENDARY_TIER_THRESHOLD:
        return tier
    tier.append(Rarity.LEGENDARY)
    if roll < UNIQUE_TIER_THRESHOLD:
        return tier
    tier.append(Rarity.UNIQUE)
    return tier


def collect_candidates(store: CardStore, pack: PackType) -> list[str]:
    """Catalog ids eligible for the pack, in catalog order."""
    ids = [cid for cid in store.catalog_ids() if cid]
    if pack.tag is None:
        return ids
    return [cid for cid in ids if store.registry.meta_of(cid).has_tag(pack.tag)]


def bucket_by_rarity(store: CardStore, candidates: list[str]) -> dict[Rarity, list[str]]:
    buckets: dict[Rarity, list[str]] = {r: [] for r in Rarity}
    for cid in candidates:
        buckets[store.registry.meta_of(cid).rarity].append(cid)
    return buckets


def choose_pack_cards(
    store: CardStore,
    candidates: list[str],
    wanted: list[Rarity],
    rng: random.Random,
) -> list[str | None]:
    """
    Fill each wanted rarity slot; None marks a slot left unfilled.

    Slots first draw from their own rarity bucket, then any still empty
    draw from whatever candidates remain unused.
    """
    buckets = bucket_by_rarity(store, candidates)
    used: set[str] = set()
    chosen: list[str | None] = []

    for rarity in wanted:
        bucket = buckets[rarity]
        if bucket:
            pick = take_random(bucket, rng)
            used.add(pick)
            chosen.append(pick)
        else:
            chosen.append(None)

    remaining = [cid for cid in candidates if cid not in used]
    for i, pick in enumerate(chosen):
        if pick is not None:
            continue
        if not remaining:
            break
        chosen[i] = take_random(remaining, rng)

    return chosen


def open_booster(
    store: CardStore,
    pack_key: str,
    rng: random.Random | None = None,
    id_factory: IdFactory = new_card_id,
) -> OperationResult:
    """
    Open one booster of the given pack type into the pool.

    created_ids lists the new pool ids in pack-slot order.
    """
    rng = rng or random.Random()

    pack = find_pack_type(pack_key)
    if pack is None:
        return OperationResult.unchanged(
            store, Notice(FailureKind.UNKNOWN_PACK, f"Unknown pack type '{pack_key}'.")
        )

    candidates = collect_candidates(store, pack)
    if not candidates:
        return OperationResult.unchanged(
            store,
            Notice(
                FailureKind.EMPTY_CANDIDATE_POOL,
                f"No Master cards found for {pack_key} pack.",
            ),
        )

    wanted = roll_pack_tier(rng.random())
    chosen = choose_pack_cards(store, candidates, wanted, rng)
    picks = [cid for cid in chosen if cid is not None]

    notices: list[Notice] = []
    if len(picks) < len(wanted):
        notices.append(
            Notice(
                FailureKind.SHORT_PACK,
                f"Insufficient {pack_key} cards at requested rarities; "
                f"filled {len(picks)} of {len(wanted)} with available cards.",
            )
        )

    work = store.copy()
    created: list[str] = []
    for catalog_id in picks:
        new_id = id_factory()
        if new_id in work.registry or new_id in work.pool:
            continue
        work.registry.clone_entry(catalog_id, new_id)
        work.pool.append(new_id)
        created.append(new_id)

    logger.info(
        "booster_opened",
        extra={
            "pack_key": pack_key,
            "tier_size": len(wanted),
            "cards_added": len(created),
            "candidate_count": len(candidates),
        },
    )
    return commit(work, notices=notices, created_ids=created)
