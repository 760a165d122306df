from cardengine.api.boosters import router as boosters_router
from cardengine.api.cards import router as cards_router
from cardengine.api.hands import router as hands_router
from cardengine.api.health import router as health_router
from cardengine.api.piles import router as piles_router
from cardengine.api.stores import router as stores_router

__all__ = [
    "boosters_router",
    "cards_router",
    "hands_router",
    "health_router",
    "piles_router",
    "stores_router",
]
