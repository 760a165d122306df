from cardengine.db.database import get_session, init_db
from cardengine.db.operations import (
    delete_snapshot,
    get_document,
    load_snapshot,
    load_store,
    save_snapshot,
    save_store,
)
from cardengine.db.transactions import StoreTransaction, hold_store_lock, store_transaction

__all__ = [
    "StoreTransaction",
    "delete_snapshot",
    "get_document",
    "get_session",
    "hold_store_lock",
    "init_db",
    "load_snapshot",
    "load_store",
    "save_snapshot",
    "save_store",
    "store_transaction",
]
