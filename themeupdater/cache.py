"""Key/value cache stores with per-key TTL and prefix invalidation."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class CacheStore(ABC):
    """Abstract cache shared by resolution passes.

    Entries are whole-value replacements; concurrent writers resolve as last
    writer wins. Stores never perform network I/O.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or None when missing or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store value with an absolute expiry of now + ttl seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove one entry; missing keys are ignored."""

    @abstractmethod
    def delete_by_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix and return the count."""


class InMemoryCacheStore(CacheStore):
    """Process-local cache for tests and single-process runs."""

    def __init__(self, *, clock: Clock = time.time) -> None:
        self._items: dict[str, tuple[Any, float]] = {}
        self._clock = clock

    def _purge_expired(self, key: str) -> None:
        item = self._items.get(key)
        if item is None:
            return
        _, expires_at = item
        if self._clock() >= expires_at:
            self._items.pop(key, None)

    def get(self, key: str) -> Any | None:
        self._purge_expired(key)
        item = self._items.get(key)
        if item is None:
            return None
        return item[0]

    def set(self, key: str, value: Any, ttl: int) -> None:
        self._items[key] = (value, self._clock() + int(ttl))

    def delete(self, key: str) -> None:
        self._items.pop(key, None)

    def delete_by_prefix(self, prefix: str) -> int:
        doomed = [key for key in self._items if key.startswith(prefix)]
        for key in doomed:
            del self._items[key]
        return len(doomed)

    def keys(self) -> list[str]:
        """Return the keys of unexpired entries."""
        for key in list(self._items):
            self._purge_expired(key)
        return sorted(self._items)


class FileCacheStore(CacheStore):
    """Directory-backed cache shared between processes.

    Each key maps to one JSON file named by the key digest. Values must be JSON
    serializable.
    """

    def __init__(self, directory: Path, *, clock: Clock = time.time) -> None:
        self.directory = directory
        self._clock = clock
        self.directory.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> Any | None:
        path = self._path_for(key)
        entry = self._read_entry(path)
        if entry is None:
            return None
        if self._clock() >= float(entry.get("expires_at", 0)):
            path.unlink(missing_ok=True)
            return None
        return entry.get("value")

    def set(self, key: str, value: Any, ttl: int) -> None:
        payload = {
            "key": key,
            "value": value,
            "expires_at": self._clock() + int(ttl),
        }
        self._atomic_write(self._path_for(key), json.dumps(payload, ensure_ascii=False))

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def delete_by_prefix(self, prefix: str) -> int:
        removed = 0
        for path in self.directory.glob("*.json"):
            entry = self._read_entry(path)
            if entry is None:
                continue
            if str(entry.get("key", "")).startswith(prefix):
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{_sha256(key)}.json"

    def _read_entry(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.debug("discarding unreadable cache file %s", path)
            path.unlink(missing_ok=True)
            return None
        if not isinstance(loaded, dict):
            path.unlink(missing_ok=True)
            return None
        return loaded

    def _atomic_write(self, path: Path, text: str) -> None:
        fd, temp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(temp_name, path)
        except OSError:
            Path(temp_name).unlink(missing_ok=True)
            raise


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
