import itertools
from collections.abc import Callable

import pytest

from cardengine.db import transactions as transactions_module
from cardengine.models.card import CardDefinition, CardMeta, Rarity
from cardengine.models.store import CardStore
from cardengine.models.zones import Deck, Hand


@pytest.fixture(autouse=True)
def clear_store_locks():
    """Each test gets fresh per-store locks bound to its own event loop."""
    transactions_module._store_locks.clear()
    transactions_module._lock_users.clear()
    yield
    transactions_module._store_locks.clear()
    transactions_module._lock_users.clear()


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic ids: new1, new2, ..."""
    counter = itertools.count(1)
    return lambda: f"new{next(counter)}"


@pytest.fixture
def store() -> CardStore:
    """
    A small table.

    Catalog: m1 "Ace" (Rare, Bullet), m2 "Bolt" (Common, Scope)
    Pool: p1
    Deck d1: [a, b, c] with c on top
    Hand h1: linked to d1, empty
    Hand h2: unlinked, empty
    """
    s = CardStore(
        catalog=[CardDefinition("m1", "Ace"), CardDefinition("m2", "Bolt")],
        pool=["p1"],
        decks=[Deck(id="d1", name="Main", cards=["a", "b", "c"])],
        hands=[
            Hand(id="h1", name="Player", src_deck_id="d1"),
            Hand(id="h2", name="Spare"),
        ],
    )
    s.registry.register("m1", "Ace", "ace.webp", CardMeta(rarity=Rarity.RARE, tags=["Bullet"]))
    s.registry.register("m2", "Bolt", None, CardMeta(type="Spell", tags=["Scope"]))
    for cid in ("p1", "a", "b", "c"):
        s.registry.register(cid, cid.upper())
    return s
