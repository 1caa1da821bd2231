"""
File-backed key-value store.

Each key is a JSON file in one directory. Writes are atomic per key.
"""

import json
import re
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from ..errors import CacheError
from .base import KeyValueStore

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileKeyValueStore(KeyValueStore):
    """Stores each value in ``<directory>/<key>.json``."""

    def __init__(self, directory: Path | str):
        """
        Initialize the store.

        Args:
            directory: Directory holding one JSON file per key
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.debug("FileKeyValueStore initialized: dir={}", self.directory)

    def path_for(self, key: str) -> Path:
        """Return the file path for a key (unsafe characters become underscores)."""
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    async def get(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read key {} from {}: {}", key, path, e)
            return None

    async def put(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            payload = json.dumps(value)
            tmp = tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.directory,
                prefix=".tmp-",
                suffix=".json",
                delete=False,
            )
        except (OSError, TypeError) as e:
            raise CacheError(f"Could not write key {key}: {e}") from e

        tmp_path = Path(tmp.name)
        try:
            with tmp:
                tmp.write(payload)
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise CacheError(f"Could not write key {key}: {e}") from e
        logger.debug("Saved key {} to {}", key, path)

    async def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
