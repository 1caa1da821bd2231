"""
Abstract base class for key-value stores.

The store is a string-keyed bag of JSON blobs with last-writer-wins semantics.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Abstract interface for JSON key-value stores."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """
        Read and decode the JSON value stored under a key.

        Args:
            key: Store key

        Returns:
            The decoded value, or None if the key is missing
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """
        Store a JSON-serializable value under a key, replacing any previous value.

        Args:
            key: Store key
            value: JSON-serializable value
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass
