"""Data storage layer."""

from cookiecogs.storage.json_store import JsonStore, MemoryStore
from cookiecogs.storage.migrations import SCHEMA_VERSION, VERSION_KEY, migrate

__all__ = [
    "JsonStore",
    "MemoryStore",
    "SCHEMA_VERSION",
    "VERSION_KEY",
    "migrate",
]
