"""Storage subsystem — key-value blobs backed by SQLite."""

from .kv import (
    LOGS_KEY,
    SETTINGS_KEY,
    URLS_KEY,
    KeyValueStore,
    SQLiteKVStore,
    StoreError,
    decode_or_default,
    get_typed,
)
