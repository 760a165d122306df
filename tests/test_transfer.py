"""Tests for card moves, draws and deletions."""

import random

from cardengine.models.failure import FailureKind
from cardengine.models.store import CardStore
from cardengine.models.zones import (
    CatalogRef,
    DeckRef,
    HandCardsRef,
    HandDiscardRef,
    HandSlotRef,
    PoolRef,
)
from cardengine.services.reconciler import find_invariant_violations
from cardengine.services.transfer import (
    DrawMode,
    delete_card,
    draw_to_hand,
    move_card,
    move_card_to_slot,
    mulligan,
    return_all_to_linked_deck,
    return_card_to_linked_deck,
)


class TestDrawToHand:
    def test_draw_top_takes_from_end(self, store: CardStore) -> None:
        """Top draws pop the last card first."""
        result = draw_to_hand(store, "h1", 2, DrawMode.TOP)

        assert result.store.find_deck("d1").cards == ["a"]
        assert result.store.find_hand("h1").cards == ["c", "b"]

    def test_draw_bottom_takes_from_start(self, store: CardStore) -> None:
        result = draw_to_hand(store, "h1", 1, "bottom")

        assert result.store.find_deck("d1").cards == ["b", "c"]
        assert result.store.find_hand("h1").cards == ["a"]

    def test_draw_random_conserves_cards(self, store: CardStore) -> None:
        result = draw_to_hand(store, "h1", 1, DrawMode.RANDOM, rng=random.Random(3))

        deck = result.store.find_deck("d1").cards
        hand = result.store.find_hand("h1").cards
        assert len(deck) == 2
        assert len(hand) == 1
        assert sorted(deck + hand) == ["a", "b", "c"]

    def test_draw_stops_when_deck_runs_out(self, store: CardStore) -> None:
        result = draw_to_hand(store, "h1", 5)

        assert result.changed is True
        assert result.store.find_deck("d1").cards == []
        assert result.store.find_hand("h1").cards == ["c", "b", "a"]

    def test_draw_without_link_is_refused(self, store: CardStore) -> None:
        result = draw_to_hand(store, "h2")

        assert result.refused
        assert result.notices[0].kind == FailureKind.NO_LINKED_DECK
        assert result.store is store

    def test_draw_with_dangling_link_is_refused(self, store: CardStore) -> None:
        store.find_hand("h2").src_deck_id = "gone"

        result = draw_to_hand(store, "h2")

        assert result.refused
        assert result.notices[0].kind == FailureKind.LINKED_DECK_NOT_FOUND

    def test_unknown_mode_is_invalid(self, store: CardStore) -> None:
        result = draw_to_hand(store, "h1", 1, "sideways")

        assert result.notices[0].kind == FailureKind.INVALID_INPUT

    def test_zero_count_is_invalid(self, store: CardStore) -> None:
        result = draw_to_hand(store, "h1", 0)

        assert result.notices[0].kind == FailureKind.INVALID_INPUT

    def test_input_store_untouched(self, store: CardStore) -> None:
        before = store.to_snapshot()

        draw_to_hand(store, "h1", 2)

        assert store.to_snapshot() == before


class TestMoveCard:
    def test_catalog_move_copies(self, store: CardStore, id_factory) -> None:
        """Moving out of the catalog mints a new id and leaves the master alone."""
        result = move_card(store, "m1", CatalogRef(), DeckRef("d1"), id_factory=id_factory)

        assert result.created_ids == ["new1"]
        assert result.store.find_deck("d1").cards == ["a", "b", "c", "new1"]
        assert result.store.catalog_ids() == ["m1", "m2"]
        assert result.store.registry.name_of("new1") == "Ace"
        assert result.store.registry.images["new1"] == "ace.webp"
        assert "m1" not in result.store.owned_ids()

    def test_catalog_copy_has_independent_meta(self, store: CardStore, id_factory) -> None:
        result = move_card(store, "m1", CatalogRef(), PoolRef(), id_factory=id_factory)

        registry = result.store.registry
        registry.meta["new1"].tags.append("Extra")
        assert registry.meta_of("m1").tags == ["Bullet"]

    def test_move_pool_to_deck(self, store: CardStore) -> None:
        result = move_card(store, "p1", PoolRef(), DeckRef("d1"))

        assert result.store.pool == []
        assert result.store.find_deck("d1").cards == ["a", "b", "c", "p1"]
        assert result.created_ids == []

    def test_move_deck_to_discard(self, store: CardStore) -> None:
        result = move_card(store, "b", DeckRef("d1"), HandDiscardRef("h2"))

        assert result.store.find_deck("d1").cards == ["a", "c"]
        assert result.store.find_hand("h2").discard == ["b"]

    def test_move_out_of_slot_clears_it(self, store: CardStore) -> None:
        store.find_hand("h1").slots[4] = "p1"
        store.pool = []

        result = move_card(store, "p1", HandSlotRef("h1", 4), PoolRef())

        assert result.store.find_hand("h1").slots[4] == ""
        assert result.store.pool == ["p1"]

    def test_drop_on_catalog_is_noop(self, store: CardStore) -> None:
        result = move_card(store, "p1", PoolRef(), CatalogRef())

        assert result.changed is False
        assert result.notices == []
        assert not result.refused

    def test_missing_target_reported(self, store: CardStore) -> None:
        result = move_card(store, "p1", PoolRef(), HandCardsRef("nope"))

        assert result.refused
        assert result.notices[0].kind == FailureKind.NOT_FOUND

    def test_unknown_card_reported(self, store: CardStore) -> None:
        result = move_card(store, "zzz", PoolRef(), DeckRef("d1"))

        assert result.notices[0].kind == FailureKind.NOT_FOUND

    def test_unknown_catalog_card_reported(self, store: CardStore) -> None:
        result = move_card(store, "p1", CatalogRef(), DeckRef("d1"))

        assert result.notices[0].kind == FailureKind.NOT_FOUND

    def test_slot_target_delegates(self, store: CardStore) -> None:
        result = move_card(store, "p1", PoolRef(), HandSlotRef("h1", 2))

        assert result.store.find_hand("h1").slots[2] == "p1"

    def test_single_ownership_after_moves(self, store: CardStore, id_factory) -> None:
        s = move_card(store, "a", DeckRef("d1"), HandCardsRef("h1")).store
        s = move_card(s, "a", HandCardsRef("h1"), HandDiscardRef("h2")).store
        s = move_card(s, "m2", CatalogRef(), HandSlotRef("h2", 0), id_factory=id_factory).store
        s = move_card(s, "a", HandDiscardRef("h2"), PoolRef()).store

        assert find_invariant_violations(s) == []
        assert s.pool == ["p1", "a"]
        assert s.find_hand("h2").slots[0] == "new1"


class TestMoveCardToSlot:
    def test_place_from_pool(self, store: CardStore) -> None:
        result = move_card_to_slot(store, "p1", PoolRef(), "h1", 3)

        assert result.store.find_hand("h1").slots[3] == "p1"
        assert result.store.pool == []

    def test_place_from_catalog(self, store: CardStore, id_factory) -> None:
        result = move_card_to_slot(store, "m2", CatalogRef(), "h1", 0, id_factory=id_factory)

        assert result.created_ids == ["new1"]
        assert result.store.find_hand("h1").slots[0] == "new1"
        assert result.store.registry.meta_of("new1").type == "Spell"

    def test_displaced_card_is_orphaned(self, store: CardStore) -> None:
        s = move_card_to_slot(store, "p1", PoolRef(), "h1", 3).store

        result = move_card_to_slot(s, "a", DeckRef("d1"), "h1", 3)

        assert result.store.find_hand("h1").slots[3] == "a"
        assert "p1" not in result.store.owned_ids()
        assert "p1" not in result.store.registry

    def test_displaced_card_can_return_to_pool(self, store: CardStore) -> None:
        s = move_card_to_slot(store, "p1", PoolRef(), "h1", 3).store

        result = move_card_to_slot(s, "a", DeckRef("d1"), "h1", 3, return_displaced_to_pool=True)

        assert result.store.pool == ["p1"]
        assert result.store.find_hand("h1").slots[3] == "a"

    def test_move_between_slots(self, store: CardStore) -> None:
        s = move_card_to_slot(store, "p1", PoolRef(), "h1", 2).store

        result = move_card_to_slot(s, "p1", HandSlotRef("h1", 2), "h1", 5)

        slots = result.store.find_hand("h1").slots
        assert slots[2] == ""
        assert slots[5] == "p1"
        assert len(slots) == 10

    def test_out_of_range_slot_is_invalid(self, store: CardStore) -> None:
        result = move_card_to_slot(store, "p1", PoolRef(), "h1", 10)

        assert result.refused
        assert result.notices[0].kind == FailureKind.INVALID_INPUT

    def test_unknown_hand_reported(self, store: CardStore) -> None:
        result = move_card_to_slot(store, "p1", PoolRef(), "nope", 0)

        assert result.notices[0].kind == FailureKind.NOT_FOUND

    def test_unknown_hand_checked_before_slot_index(self, store: CardStore) -> None:
        result = move_card_to_slot(store, "p1", PoolRef(), "nope", 99)

        assert result.refused
        assert result.store is store
        assert result.notices[0].kind == FailureKind.NOT_FOUND


class TestReturnToLinkedDeck:
    def test_return_puts_card_at_front(self, store: CardStore) -> None:
        result = return_card_to_linked_deck(store, "h1", "p1")

        assert result.store.find_deck("d1").cards == ["p1", "a", "b", "c"]
        assert result.store.pool == []

    def test_return_unknown_card(self, store: CardStore) -> None:
        result = return_card_to_linked_deck(store, "h1", "zzz")

        assert result.notices[0].kind == FailureKind.NOT_FOUND

    def test_return_without_link(self, store: CardStore) -> None:
        result = return_card_to_linked_deck(store, "h2", "p1")

        assert result.notices[0].kind == FailureKind.NO_LINKED_DECK

    def test_return_all_empties_hand(self, store: CardStore) -> None:
        hand = store.find_hand("h1")
        hand.cards = ["x"]
        hand.discard = ["y"]
        hand.slots[0] = "z"
        for cid in ("x", "y", "z"):
            store.registry.register(cid, cid)

        result = return_all_to_linked_deck(store, "h1")

        returned = result.store.find_hand("h1")
        assert returned.cards == []
        assert returned.discard == []
        assert returned.slots == [""] * 10
        assert result.store.find_deck("d1").cards == ["z", "y", "x", "a", "b", "c"]


class TestMulligan:
    def test_mulligan_redraws(self, store: CardStore) -> None:
        s = draw_to_hand(store, "h1", 2).store

        result = mulligan(s, "h1", draw_count=2, rng=random.Random(7))

        deck = result.store.find_deck("d1").cards
        hand = result.store.find_hand("h1").cards
        assert len(hand) == 2
        assert sorted(deck + hand) == ["a", "b", "c"]

    def test_mulligan_returns_to_top(self, store: CardStore) -> None:
        s = draw_to_hand(store, "h1", 2).store

        result = mulligan(s, "h1", draw_count=0)

        assert result.store.find_deck("d1").cards == ["a", "c", "b"]
        assert result.store.find_hand("h1").cards == []

    def test_mulligan_keeps_discard_and_slots(self, store: CardStore) -> None:
        hand = store.find_hand("h1")
        hand.discard = ["p1"]
        store.pool = []

        result = mulligan(store, "h1", draw_count=1, rng=random.Random(1))

        assert result.store.find_hand("h1").discard == ["p1"]

    def test_mulligan_without_link(self, store: CardStore) -> None:
        result = mulligan(store, "h2")

        assert result.notices[0].kind == FailureKind.NO_LINKED_DECK


class TestDeleteCard:
    def test_delete_removes_everywhere(self, store: CardStore) -> None:
        result = delete_card(store, "b")

        assert result.store.find_deck("d1").cards == ["a", "c"]
        assert "b" not in result.store.registry

    def test_delete_catalog_card_keeps_copies(self, store: CardStore, id_factory) -> None:
        s = move_card(store, "m1", CatalogRef(), PoolRef(), id_factory=id_factory).store

        result = delete_card(s, "m1")

        assert result.store.catalog_ids() == ["m2"]
        assert "m1" not in result.store.registry
        assert result.store.registry.name_of("new1") == "Ace"

    def test_delete_leaves_slot_by_default(self, store: CardStore) -> None:
        s = move_card_to_slot(store, "p1", PoolRef(), "h1", 1).store

        result = delete_card(s, "p1")

        assert result.store.find_hand("h1").slots[1] == "p1"
        assert "p1" not in result.store.registry

    def test_delete_can_clear_slots(self, store: CardStore) -> None:
        s = move_card_to_slot(store, "p1", PoolRef(), "h1", 1).store

        result = delete_card(s, "p1", clear_slots=True)

        assert result.store.find_hand("h1").slots[1] == ""

    def test_delete_unknown_card(self, store: CardStore) -> None:
        result = delete_card(store, "zzz")

        assert result.refused
        assert result.notices[0].kind == FailureKind.NOT_FOUND
