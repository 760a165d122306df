"""
The card store: catalog, registry and zones as one explicit value.

Operations never reach for a global document. They receive a CardStore,
work on a copy, and hand back a reconciled store.
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from cardengine.models.card import CardDefinition, CardMeta, fallback_card_name
from cardengine.models.zones import Deck, Hand


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _sequence(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def empty_snapshot() -> dict[str, Any]:
    """The structurally empty persisted document."""
    return {
        "catalog": [],
        "pool": [],
        "decks": [],
        "hands": [],
        "registry": {"names": {}, "images": {}, "meta": {}},
        "packImages": {},
    }


@dataclass
class Registry:
    """Canonical display state per card id, shared by every zone."""

    names: dict[str, str] = field(default_factory=dict)
    images: dict[str, str | None] = field(default_factory=dict)
    meta: dict[str, CardMeta] = field(default_factory=dict)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self.names or card_id in self.images or card_id in self.meta

    def name_of(self, card_id: str) -> str:
        return self.names.get(card_id) or fallback_card_name(card_id)

    def meta_of(self, card_id: str) -> CardMeta:
        return self.meta.get(card_id) or CardMeta()

    def register(
        self,
        card_id: str,
        name: str,
        image: str | None = None,
        meta: CardMeta | None = None,
    ) -> None:
        self.names[card_id] = name
        self.images[card_id] = image
        self.meta[card_id] = meta or CardMeta()

    def clone_entry(self, source_id: str, new_id: str) -> None:
        """Copy name, image and a deep copy of meta onto a new id."""
        self.register(
            new_id,
            self.name_of(source_id),
            self.images.get(source_id) or None,
            self.meta_of(source_id).clone(),
        )

    def forget(self, card_id: str) -> None:
        self.names.pop(card_id, None)
        self.images.pop(card_id, None)
        self.meta.pop(card_id, None)

    def ids(self) -> set[str]:
        return set(self.names) | set(self.images) | set(self.meta)


@dataclass
class CardStore:
    """
    The whole persisted document.

    Attributes:
        catalog: Master card definitions (clone templates, not a zone)
        pool: Loose cards, insertion ordered
        decks: Deck zones
        hands: Hand zones
        registry: id -> name / image / meta
        pack_images: Booster tile artwork by pack key
    """

    catalog: list[CardDefinition] = field(default_factory=list)
    pool: list[str] = field(default_factory=list)
    decks: list[Deck] = field(default_factory=list)
    hands: list[Hand] = field(default_factory=list)
    registry: Registry = field(default_factory=Registry)
    pack_images: dict[str, str] = field(default_factory=dict)

    def copy(self) -> "CardStore":
        return copy.deepcopy(self)

    # --- Lookups ---

    def find_deck(self, deck_id: str) -> Deck | None:
        return next((d for d in self.decks if d.id == deck_id), None)

    def find_hand(self, hand_id: str) -> Hand | None:
        return next((h for h in self.hands if h.id == hand_id), None)

    def catalog_ids(self) -> list[str]:
        return [c.id for c in self.catalog]

    def in_catalog(self, card_id: str) -> bool:
        return any(c.id == card_id for c in self.catalog)

    def owned_ids(self) -> set[str]:
        """Every id held by some zone."""
        owned = set(self.pool)
        for deck in self.decks:
            owned.update(deck.cards)
        for hand in self.hands:
            owned.update(hand.owned_ids())
        owned.discard("")
        return owned

    def referenced_ids(self) -> set[str]:
        """Ids that keep their registry entry alive."""
        return self.owned_ids() | {c.id for c in self.catalog if c.id}

    def knows(self, card_id: str) -> bool:
        return bool(card_id) and (card_id in self.registry or card_id in self.referenced_ids())

    # --- Zone removal ---

    def remove_everywhere(self, card_id: str, include_slots: bool = True) -> None:
        """Drop an id from the pool, every deck, and every hand."""
        self.pool = [cid for cid in self.pool if cid != card_id]
        for deck in self.decks:
            deck.cards = [cid for cid in deck.cards if cid != card_id]
        for hand in self.hands:
            hand.cards = [cid for cid in hand.cards if cid != card_id]
            hand.discard = [cid for cid in hand.discard if cid != card_id]
            if include_slots:
                hand.slots = ["" if cid == card_id else cid for cid in hand.slots]

    # --- Snapshot codec ---

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "catalog": [{"id": c.id, "name": c.name} for c in self.catalog],
            "pool": list(self.pool),
            "decks": [d.to_dict() for d in self.decks],
            "hands": [h.to_dict() for h in self.hands],
            "registry": {
                "names": dict(self.registry.names),
                "images": dict(self.registry.images),
                "meta": {cid: m.to_dict() for cid, m in self.registry.meta.items()},
            },
            "packImages": dict(self.pack_images),
        }

    @classmethod
    def from_snapshot(
        cls,
        data: dict[str, Any] | None,
        slot_defaults: list[str] | None = None,
    ) -> "CardStore":
        """
        Build a store from a persisted document.

        Hands are normalized to ten slots; missing slot images fall back to
        the per-index defaults. Pool entries may be bare ids or {id, name}.
        Entries of the wrong shape are dropped rather than raised on.
        """
        data = _mapping(data) or empty_snapshot()
        registry_data = _mapping(data.get("registry"))

        catalog = [
            CardDefinition(id=str(entry.get("id")), name=str(entry.get("name") or ""))
            for entry in _sequence(data.get("catalog"))
            if isinstance(entry, dict) and entry.get("id")
        ]

        pool: list[str] = []
        for entry in _sequence(data.get("pool")):
            card_id = entry.get("id") if isinstance(entry, dict) else entry
            if card_id and isinstance(card_id, (str, int)):
                pool.append(str(card_id))

        return cls(
            catalog=catalog,
            pool=pool,
            decks=[Deck.from_dict(d) for d in _sequence(data.get("decks")) if isinstance(d, dict)],
            hands=[
                Hand.from_dict(h, slot_defaults)
                for h in _sequence(data.get("hands"))
                if isinstance(h, dict)
            ],
            registry=Registry(
                names={
                    str(cid): str(name)
                    for cid, name in _mapping(registry_data.get("names")).items()
                    if name
                },
                images={
                    str(cid): image if isinstance(image, str) else None
                    for cid, image in _mapping(registry_data.get("images")).items()
                },
                meta={
                    str(cid): CardMeta.from_dict(m)
                    for cid, m in _mapping(registry_data.get("meta")).items()
                    if isinstance(m, dict)
                },
            ),
            pack_images={
                str(key): image
                for key, image in _mapping(data.get("packImages")).items()
                if image and isinstance(image, str)
            },
        )
