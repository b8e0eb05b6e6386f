"""Thread-safe in-memory response cache with TTL and size limit."""

from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass

from aigccheck.gemini_config import CacheConfig


@dataclass
class _Entry:
    value: str
    expires_at: float


class Cache:
    """Caches prompt responses keyed by the SHA-256 of the prompt."""

    def __init__(self, config: CacheConfig) -> None:
        self.config = config
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _hash(key: str) -> str:
        return hashlib.sha256(key.encode("utf-8")).hexdigest()

    def get(self, key: str) -> str | None:
        """Cached value for key, or None when missing, expired or disabled."""
        if not self.config.enabled:
            return None
        with self._lock:
            entry = self._entries.get(self._hash(key))
            if entry is None or time.monotonic() > entry.expires_at:
                return None
            return entry.value

    def set(self, key: str, value: str) -> None:
        """Store a value; evicts the entry expiring soonest when full."""
        if not self.config.enabled:
            return
        with self._lock:
            if len(self._entries) >= self.config.max_entries and self._entries:
                oldest = min(self._entries, key=lambda k: self._entries[k].expires_at)
                del self._entries[oldest]
            self._entries[self._hash(key)] = _Entry(value, time.monotonic() + self.config.ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(self._hash(key), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        with self._lock:
            now = time.monotonic()
            expired = [k for k, e in self._entries.items() if now > e.expires_at]
            for k in expired:
                del self._entries[k]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)