"""
Key-value store package.

Provides a factory function to create the configured store.
"""

from pathlib import Path

from .base import KeyValueStore
from .file import FileKeyValueStore
from .memory import MemoryKeyValueStore


def create_kv_store(
    store_type: str = "file",
    path: str | Path = "./data/kv",
) -> KeyValueStore:
    """
    Factory function to create a key-value store.

    Args:
        store_type: Type of store ("file" or "memory")
        path: Directory for the file-backed store

    Returns:
        Configured KeyValueStore instance

    Raises:
        ValueError: If store_type is not recognized
    """
    if store_type == "file":
        return FileKeyValueStore(path)
    elif store_type == "memory":
        return MemoryKeyValueStore()
    else:
        raise ValueError(f"Unknown key-value store type: {store_type}")


__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "create_kv_store",
]
