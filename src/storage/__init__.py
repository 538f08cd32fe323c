"""Storage — персистентное состояние Gatekeeper поверх key-value хранилища."""

from .gatekeeper_storage import DEFAULT_KEY_PREFIX, GatekeeperStorage
from .key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StoreValue,
)

__all__ = [
    "DEFAULT_KEY_PREFIX",
    "GatekeeperStorage",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "StoreValue",
]
