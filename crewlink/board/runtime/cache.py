"""Time-bounded in-memory cache keyed by logical query identity.

Entries expire individually; there is no capacity bound and no LRU eviction.
An expired entry is logically absent the moment its TTL passes, whether or not
it has been physically removed yet. Removal happens lazily on read or
explicitly through ``invalidate``.

Values are stored as given. Callers store immutable results (tuples of frozen
models) so nothing held here aliases a request's working set.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic_core import to_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Stored value with its absolute expiry (monotonic clock)."""

    key: str
    value: Any
    expires_at: float
    size_bytes: int


@dataclass(frozen=True)
class CacheEntryInfo:
    """Diagnostic view of a live entry."""

    key: str
    remaining_ttl: float
    approx_size_bytes: int


def measure_size(value: Any) -> int:
    """Approximate payload size in bytes.

    Strings count as their UTF-8 length; everything else is measured by its
    JSON serialization.
    """
    if isinstance(value, str):
        return len(value.encode("utf-8"))
    if isinstance(value, bytes):
        return len(value)
    return len(to_json(value, fallback=str))


class TTLCache:
    """Thread-safe key/value store with per-entry expiry.

    Sets are atomic per key and overwrite unconditionally, so concurrent
    writers of the same key resolve last-write-wins.
    """

    def __init__(
        self,
        default_ttl: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            default_ttl: TTL in seconds used when ``set`` is called without one
            clock: Monotonic time source (injectable for tests)
        """
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def get(self, key: str) -> Any | None:
        """Return the value for ``key`` if present and unexpired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now >= entry.expires_at:
                del self._entries[key]
                logger.debug("cache_expired", extra={"key": key})
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds`` (default TTL if None)."""
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError("ttl_seconds must be positive")
        size = measure_size(value)
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl, size_bytes=size)
        with self._lock:
            self._entries[key] = entry
        logger.debug("cache_set", extra={"key": key, "ttl": ttl, "size_bytes": size})

    def invalidate(self, key: str) -> bool:
        """Remove ``key``; returns whether a live or expired entry existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with ``prefix``; returns the count removed."""
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def list_entries(self) -> list[CacheEntryInfo]:
        """Live entries sorted by remaining TTL, longest first."""
        now = self._clock()
        with self._lock:
            live = [entry for entry in self._entries.values() if entry.expires_at > now]
        infos = [
            CacheEntryInfo(
                key=entry.key,
                remaining_ttl=entry.expires_at - now,
                approx_size_bytes=entry.size_bytes,
            )
            for entry in live
        ]
        infos.sort(key=lambda info: info.remaining_ttl, reverse=True)
        return infos

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for entry in self._entries.values() if entry.expires_at > now)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
