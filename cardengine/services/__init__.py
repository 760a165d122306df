"""
Card engine services.

Reconciliation, card transfers, booster generation, catalog and pile
editing, and renderer views. Every mutating service takes a CardStore and
returns an OperationResult.
"""

from cardengine.services.booster import PACK_TYPES, PackType, open_booster, roll_pack_tier
from cardengine.services.catalog import (
    clear_card_image,
    create_catalog_card,
    edit_card,
    set_card_image,
    set_card_tags,
)
from cardengine.services.piles import (
    clear_deck,
    clear_hand,
    clear_pack_image,
    clear_slot,
    clear_slot_image,
    create_deck,
    create_hand,
    delete_deck,
    delete_hand,
    link_hand_to_deck,
    rename_deck,
    rename_hand,
    set_pack_image,
    set_slot_image,
    toggle_deck_collapsed,
    toggle_hand_collapsed,
)
from cardengine.services.reconciler import (
    commit,
    ensure_invariants,
    find_invariant_violations,
    reconcile,
)
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
from cardengine.services.views import StoreView, build_store_view

__all__ = [
    "DrawMode",
    "PACK_TYPES",
    "PackType",
    "StoreView",
    "build_store_view",
    "clear_card_image",
    "clear_deck",
    "clear_hand",
    "clear_pack_image",
    "clear_slot",
    "clear_slot_image",
    "commit",
    "create_catalog_card",
    "create_deck",
    "create_hand",
    "delete_card",
    "delete_deck",
    "delete_hand",
    "draw_to_hand",
    "edit_card",
    "ensure_invariants",
    "find_invariant_violations",
    "link_hand_to_deck",
    "move_card",
    "move_card_to_slot",
    "mulligan",
    "open_booster",
    "reconcile",
    "rename_deck",
    "rename_hand",
    "return_all_to_linked_deck",
    "return_card_to_linked_deck",
    "roll_pack_tier",
    "set_card_image",
    "set_card_tags",
    "set_pack_image",
    "set_slot_image",
    "toggle_deck_collapsed",
    "toggle_hand_collapsed",
]
