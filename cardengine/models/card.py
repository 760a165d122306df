import copy
import secrets
import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_ID_ALPHABET = string.ascii_letters + string.digits
CARD_ID_LENGTH = 16


def new_card_id() -> str:
    """Mint a fresh 16-character alphanumeric id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(CARD_ID_LENGTH))


def fallback_card_name(card_id: str) -> str:
    """Display name for an id with no registry name."""
    return f"Card {str(card_id)[:4]}"


class Rarity(str, Enum):
    """Card rarity in its fixed total order, lowest first."""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    SET = "Set"
    LEGENDARY = "Legendary"
    UNIQUE = "Unique"

    @property
    def rank(self) -> int:
        return _RARITY_ORDER.index(self)

    @classmethod
    def parse(cls, value: Any) -> "Rarity":
        """Read a stored rarity; missing or unknown values are Common."""
        if isinstance(value, Rarity):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.COMMON


_RARITY_ORDER = list(Rarity)


def normalize_tags(tags: Any) -> list[str]:
    """
    Trim tags, drop empties and repeats, keep first-seen order.

    A bare string is one tag; any other non-list value yields no tags.
    """
    if isinstance(tags, str):
        tags = [tags]
    elif not isinstance(tags, list):
        return []
    result: list[str] = []
    for raw in tags:
        if raw is None:
            continue
        tag = str(raw).strip()
        if tag and tag not in result:
            result.append(tag)
    return result


@dataclass
class CardMeta:
    """
    Per-card metadata held in the registry.

    Attributes:
        type: Free-form card type line
        rarity: One of the six rarities
        rules_html: Rules text as opaque HTML
        tags: Ordered, duplicate-free tag list
    """

    type: str = ""
    rarity: Rarity = Rarity.COMMON
    rules_html: str = ""
    tags: list[str] = field(default_factory=list)

    def clone(self) -> "CardMeta":
        return copy.deepcopy(self)

    def has_tag(self, tag: str) -> bool:
        """Case-insensitive tag membership."""
        needle = tag.lower()
        return any(t.lower() == needle for t in self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "rarity": self.rarity.value,
            "rules": self.rules_html,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CardMeta":
        if not isinstance(data, dict):
            data = {}
        return cls(
            type=str(data.get("type") or ""),
            rarity=Rarity.parse(data.get("rarity")),
            rules_html=str(data.get("rules") or data.get("rules_html") or ""),
            tags=normalize_tags(data.get("tags")),
        )


@dataclass
class CardDefinition:
    """A master catalog entry, the template cards are cloned from."""

    id: str
    name: str
