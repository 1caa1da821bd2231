"""
In-process key-value store, used for development and tests.
"""

import json
from typing import Any

from .base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Keeps values as serialized JSON so readers never share objects with writers."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
