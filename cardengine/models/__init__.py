from cardengine.models.card import (
    CardDefinition,
    CardMeta,
    Rarity,
    fallback_card_name,
    new_card_id,
    normalize_tags,
)
from cardengine.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    FailureDetail,
    FailureKind,
    InvariantViolationError,
    KnownError,
    OutcomeType,
    create_known_failure,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from cardengine.models.result import Notice, OperationResult
from cardengine.models.store import CardStore, Registry, empty_snapshot
from cardengine.models.zones import (
    CatalogRef,
    Deck,
    DeckRef,
    Hand,
    HandCardsRef,
    HandDiscardRef,
    HandSlotRef,
    PoolRef,
    ZoneRef,
    ZoneRefError,
    format_zone_ref,
    parse_zone_ref,
)

__all__ = [
    "ApiResponse",
    "CardDefinition",
    "CardMeta",
    "CardStore",
    "CatalogRef",
    "Deck",
    "DeckRef",
    "FailureDetail",
    "FailureKind",
    "Hand",
    "HandCardsRef",
    "HandDiscardRef",
    "HandSlotRef",
    "InvariantViolationError",
    "KnownError",
    "Notice",
    "OperationResult",
    "OutcomeType",
    "PoolRef",
    "Rarity",
    "Registry",
    "STANDARD_MESSAGES",
    "STANDARD_SUGGESTIONS",
    "ZoneRef",
    "ZoneRefError",
    "create_known_failure",
    "create_success",
    "create_unknown_failure",
    "empty_snapshot",
    "fallback_card_name",
    "finalize_response",
    "format_zone_ref",
    "is_finalized",
    "new_card_id",
    "normalize_tags",
    "parse_zone_ref",
]
