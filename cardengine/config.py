from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Every hand has exactly this many slots
HAND_SLOT_COUNT = 10


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Card Engine"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/cardengine"

    # Default artwork for each hand slot, by slot index
    slot_default_images: list[str] = [""] * HAND_SLOT_COUNT

    # Deleting a card leaves hand slots untouched unless enabled
    clear_slots_on_delete: bool = False

    # A card displaced from an occupied slot is orphaned unless enabled
    return_displaced_slot_cards_to_pool: bool = False

    mulligan_draw_count: int = 5

    @field_validator("slot_default_images")
    @classmethod
    def _pad_slot_defaults(cls, value: list[str]) -> list[str]:
        padded = [v or "" for v in value[:HAND_SLOT_COUNT]]
        return padded + [""] * (HAND_SLOT_COUNT - len(padded))


settings = Settings()


# =============================================================================
# BOOSTER TIER THRESHOLDS
# =============================================================================

# Roll below this -> base tier (7 cards)
SET_TIER_THRESHOLD = 0.65

# Roll below this -> base + Set (8 cards)
LEGENDARY_TIER_THRESHOLD = 0.80

# Roll below this -> base + Set + Legendary (9 cards), otherwise + Unique
UNIQUE_TIER_THRESHOLD = 0.95
