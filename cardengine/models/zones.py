"""
Zone containers and zone references.

A card id may be owned by at most one zone at a time: the pool, one deck,
or one hand (its cards, its discard, or one of its ten slots). The catalog
is not a zone; it is only ever a clone source.
"""

from dataclasses import dataclass, field
from typing import Any

from cardengine.config import HAND_SLOT_COUNT


def empty_slots() -> list[str]:
    return [""] * HAND_SLOT_COUNT


def id_list(values: Any) -> list[str]:
    """Card ids from a stored sequence; non-lists and blank entries are dropped."""
    if not isinstance(values, list):
        return []
    return [str(v) for v in values if v and isinstance(v, (str, int))]


def fit_slots(values: Any, defaults: list[str] | None = None) -> list[str]:
    """
    Pad or truncate a slot array to exactly HAND_SLOT_COUNT entries.

    Empty entries take the matching default when one is given.
    """
    values = values if isinstance(values, list) else []
    defaults = defaults or empty_slots()
    fitted: list[str] = []
    for i in range(HAND_SLOT_COUNT):
        value = values[i] if i < len(values) else ""
        if not isinstance(value, str):
            value = ""
        if not value and i < len(defaults):
            value = defaults[i]
        fitted.append(value or "")
    return fitted


@dataclass
class Deck:
    """
    An ordered stack of card ids.

    The last element is the top of the deck.
    """

    id: str
    name: str
    cards: list[str] = field(default_factory=list)
    collapsed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cards": list(self.cards),
            "collapsed": self.collapsed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Deck":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            cards=id_list(data.get("cards")),
            collapsed=bool(data.get("collapsed")),
        )


@dataclass
class Hand:
    """
    A player hand: ordered cards, ordered discard, and ten fixed slots.

    Attributes:
        cards: Cards held in hand
        discard: Discard pile for this hand
        slots: Exactly ten entries, "" marks an empty slot
        slot_images: Exactly ten slot artwork paths, "" when unset
        src_deck_id: Deck drawn from and returned to, "" when unlinked
    """

    id: str
    name: str
    cards: list[str] = field(default_factory=list)
    discard: list[str] = field(default_factory=list)
    slots: list[str] = field(default_factory=empty_slots)
    slot_images: list[str] = field(default_factory=empty_slots)
    src_deck_id: str = ""
    collapsed: bool = False

    def owned_ids(self) -> list[str]:
        """Cards, discard, then non-empty slots, each once."""
        seen: list[str] = []
        for cid in [*self.cards, *self.discard, *self.slots]:
            if cid and cid not in seen:
                seen.append(cid)
        return seen

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "cards": list(self.cards),
            "discard": list(self.discard),
            "slots": list(self.slots),
            "slotImages": list(self.slot_images),
            "srcDeckId": self.src_deck_id,
            "collapsed": self.collapsed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], slot_defaults: list[str] | None = None) -> "Hand":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            cards=id_list(data.get("cards")),
            discard=id_list(data.get("discard")),
            slots=fit_slots(data.get("slots")),
            slot_images=fit_slots(data.get("slotImages"), slot_defaults),
            src_deck_id=str(data.get("srcDeckId") or ""),
            collapsed=bool(data.get("collapsed")),
        )


# =============================================================================
# ZONE REFERENCES
# =============================================================================


@dataclass(frozen=True, slots=True)
class PoolRef:
    pass


@dataclass(frozen=True, slots=True)
class CatalogRef:
    pass


@dataclass(frozen=True, slots=True)
class DeckRef:
    deck_id: str


@dataclass(frozen=True, slots=True)
class HandCardsRef:
    hand_id: str


@dataclass(frozen=True, slots=True)
class HandDiscardRef:
    hand_id: str


@dataclass(frozen=True, slots=True)
class HandSlotRef:
    hand_id: str
    index: int


ZoneRef = PoolRef | CatalogRef | DeckRef | HandCardsRef | HandDiscardRef | HandSlotRef


class ZoneRefError(ValueError):
    """Raised when a zone reference string cannot be parsed."""


def parse_zone_ref(raw: str) -> ZoneRef:
    """
    Parse the wire form of a zone reference.

    Accepted forms: "pool", "master" or "catalog", "deck:<id>", "hand:<id>",
    "hand-discard:<id>", "hand-slot:<id>:<index>".

    Raises:
        ZoneRefError: If the string matches none of the forms
    """
    text = (raw or "").strip()
    if text == "pool":
        return PoolRef()
    if text in ("master", "catalog"):
        return CatalogRef()

    kind, _, rest = text.partition(":")
    if not rest:
        raise ZoneRefError(f"Unrecognised zone reference: {raw!r}")

    if kind == "deck":
        return DeckRef(rest)
    if kind == "hand":
        return HandCardsRef(rest)
    if kind == "hand-discard":
        return HandDiscardRef(rest)
    if kind == "hand-slot":
        hand_id, _, index = rest.rpartition(":")
        if not hand_id or not index.isdigit():
            raise ZoneRefError(f"Malformed slot reference: {raw!r}")
        return HandSlotRef(hand_id, int(index))

    raise ZoneRefError(f"Unrecognised zone reference: {raw!r}")


def format_zone_ref(ref: ZoneRef) -> str:
    """Inverse of parse_zone_ref."""
    match ref:
        case PoolRef():
            return "pool"
        case CatalogRef():
            return "master"
        case DeckRef(deck_id):
            return f"deck:{deck_id}"
        case HandCardsRef(hand_id):
            return f"hand:{hand_id}"
        case HandDiscardRef(hand_id):
            return f"hand-discard:{hand_id}"
        case HandSlotRef(hand_id, index):
            return f"hand-slot:{hand_id}:{index}"
    raise ZoneRefError(f"Not a zone reference: {ref!r}")
