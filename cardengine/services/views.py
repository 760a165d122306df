"""
Derived read-only views of a store for the renderer.

Views never mutate the store. Search and sort apply to card lists;
pile search filters decks and hands by name only.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import cmp_to_key

from cardengine.config import HAND_SLOT_COUNT, settings
from cardengine.models.store import CardStore
from cardengine.services.booster import PACK_TYPES

SORT_KEYS = ("name-asc", "name-desc", "type-asc", "type-desc", "rarity-asc", "rarity-desc")
DEFAULT_SORT = "name-asc"


@dataclass
class CardItem:
    id: str
    name: str
    image: str | None


@dataclass
class SlotTile:
    image: str
    card: CardItem | None


@dataclass
class DeckView:
    id: str
    name: str
    collapsed: bool
    count: int
    cards: list[CardItem]


@dataclass
class HandView:
    id: str
    name: str
    collapsed: bool
    src_deck_id: str
    count: int
    discard_count: int
    cards: list[CardItem]
    discard: list[CardItem]
    slots: list[SlotTile]


@dataclass
class BoosterTile:
    key: str
    image: str | None


@dataclass
class StoreView:
    catalog: list[CardItem] = field(default_factory=list)
    pool: list[CardItem] = field(default_factory=list)
    decks: list[DeckView] = field(default_factory=list)
    hands: list[HandView] = field(default_factory=list)
    boosters: list[BoosterTile] = field(default_factory=list)
    deck_choices: list[dict[str, str]] = field(default_factory=list)


def card_item(store: CardStore, card_id: str) -> CardItem:
    return CardItem(
        id=card_id,
        name=store.registry.name_of(card_id),
        image=store.registry.images.get(card_id) or None,
    )


def matches_search(store: CardStore, item: CardItem, search: str) -> bool:
    """Case-insensitive substring match over name, type, rarity and tags."""
    if not search:
        return True
    meta = store.registry.meta_of(item.id)
    haystack = f"{item.name} {meta.type} {meta.rarity.value} {' '.join(meta.tags)}"
    return search.lower() in haystack.lower()


def _compare(a: str, b: str) -> int:
    return (a > b) - (a < b)


def make_sorter(store: CardStore, sort_key: str) -> Callable[[CardItem, CardItem], int]:
    """Comparator for a sort key; ties fall back to name."""

    def sorter(a: CardItem, b: CardItem) -> int:
        name_a, name_b = a.name.lower(), b.name.lower()
        meta_a, meta_b = store.registry.meta_of(a.id), store.registry.meta_of(b.id)
        type_a, type_b = meta_a.type.lower(), meta_b.type.lower()
        rank_a, rank_b = meta_a.rarity.rank, meta_b.rarity.rank

        if sort_key == "name-desc":
            return _compare(name_b, name_a)
        if sort_key == "type-asc":
            return _compare(type_a, type_b) or _compare(name_a, name_b)
        if sort_key == "type-desc":
            return _compare(type_b, type_a) or _compare(name_b, name_a)
        if sort_key == "rarity-asc":
            return (rank_a - rank_b) or _compare(name_a, name_b)
        if sort_key == "rarity-desc":
            return (rank_b - rank_a) or _compare(name_b, name_a)
        return _compare(name_a, name_b)

    return sorter


def card_list(
    store: CardStore,
    card_ids: list[str],
    search: str = "",
    sort_key: str = DEFAULT_SORT,
) -> list[CardItem]:
    """Unique, filtered, sorted items for a sequence of ids."""
    seen: set[str] = set()
    items: list[CardItem] = []
    for cid in card_ids:
        if not cid or cid in seen:
            continue
        seen.add(cid)
        item = card_item(store, cid)
        if matches_search(store, item, search):
            items.append(item)
    return sorted(items, key=cmp_to_key(make_sorter(store, sort_key)))


def slot_tiles(
    store: CardStore,
    hand_slots: list[str],
    slot_images: list[str],
    slot_defaults: list[str],
) -> list[SlotTile]:
    tiles: list[SlotTile] = []
    for i in range(HAND_SLOT_COUNT):
        cid = hand_slots[i] if i < len(hand_slots) else ""
        image = (slot_images[i] if i < len(slot_images) else "") or slot_defaults[i] or ""
        # A dead id left behind by a delete renders as an empty slot
        card = card_item(store, cid) if cid and cid in store.registry else None
        tiles.append(SlotTile(image=image, card=card))
    return tiles


def build_store_view(
    store: CardStore,
    search: str = "",
    sort_key: str = DEFAULT_SORT,
    pile_search: str = "",
    slot_defaults: list[str] | None = None,
) -> StoreView:
    """Everything the renderer needs, in one pass."""
    search = (search or "").strip().lower()
    pile_needle = (pile_search or "").strip().lower()
    if sort_key not in SORT_KEYS:
        sort_key = DEFAULT_SORT
    defaults = slot_defaults if slot_defaults is not None else settings.slot_default_images

    decks: list[DeckView] = []
    for deck in store.decks:
        if pile_needle and pile_needle not in deck.name.lower():
            continue
        items = card_list(store, deck.cards, search, sort_key)
        decks.append(
            DeckView(
                id=deck.id,
                name=deck.name,
                collapsed=deck.collapsed,
                count=len(items),
                cards=items,
            )
        )

    hands: list[HandView] = []
    for hand in store.hands:
        if pile_needle and pile_needle not in hand.name.lower():
            continue
        cards = card_list(store, hand.cards, search, sort_key)
        discard = card_list(store, hand.discard, search, sort_key)
        hands.append(
            HandView(
                id=hand.id,
                name=hand.name,
                collapsed=hand.collapsed,
                src_deck_id=hand.src_deck_id,
                count=len(cards),
                discard_count=len(discard),
                cards=cards,
                discard=discard,
                slots=slot_tiles(store, hand.slots, hand.slot_images, defaults),
            )
        )

    return StoreView(
        catalog=card_list(store, store.catalog_ids(), search, sort_key),
        pool=card_list(store, store.pool, search, sort_key),
        decks=decks,
        hands=hands,
        boosters=[BoosterTile(key=p.key, image=store.pack_images.get(p.key)) for p in PACK_TYPES],
        deck_choices=[{"id": d.id, "name": d.name} for d in store.decks],
    )
