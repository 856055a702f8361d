"""
File Cache — SHA-256 hash-based review result caching.

The registry is a fixed snapshot per engine instance, so a review result
is fully determined by (path, content). Unchanged files skip re-review.
"""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass, field
from typing import Any

from apiguard.config import settings
from apiguard.models.review_models import ReviewResult


@dataclass
class CacheEntry:
    """A cached review result for a single file."""

    content_hash: str
    result: ReviewResult
    ttl_seconds: int
    timestamp: float = field(default_factory=time.time)

    @property
    def is_expired(self) -> bool:
        return (time.time() - self.timestamp) > self.ttl_seconds


class FileCache:
    """
    In-memory review cache holding the latest reviewed content per path.

    A lookup hits only when the stored content hash matches; reviewing new
    content for a path replaces the previous entry. At most max_entries
    paths are held; the least recently used one is evicted first.
    """

    def __init__(self, ttl_seconds: int | None = None, max_entries: int | None = None) -> None:
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.max_entries = settings.cache_max_entries if max_entries is None else max_entries
        self._store: dict[str, CacheEntry] = {}
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @staticmethod
    def hash_content(content: str) -> str:
        """Compute SHA-256 hash of file content."""
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    def get(self, file_path: str, content: str) -> ReviewResult | None:
        """
        Look up the cached review for a file.

        Returns None if not cached, expired, or content has changed.
        """
        entry = self._store.get(file_path)
        if entry is not None and entry.is_expired:
            del self._store[file_path]
            entry = None

        if entry is None or entry.content_hash != self.hash_content(content):
            self.misses += 1
            return None

        self.hits += 1
        # dict order doubles as recency order
        self._store[file_path] = self._store.pop(file_path)
        return entry.result.model_copy(deep=True)

    def put(self, file_path: str, content: str, result: ReviewResult) -> None:
        """Cache the review result for a file, replacing any older version."""
        self._store.pop(file_path, None)
        self._store[file_path] = CacheEntry(
            content_hash=self.hash_content(content),
            result=result,
            ttl_seconds=self.ttl_seconds,
        )
        while len(self._store) > self.max_entries:
            del self._store[next(iter(self._store))]
            self.evictions += 1

    def invalidate(self, file_path: str) -> bool:
        """Drop the entry for a path. Returns True if one existed."""
        return self._store.pop(file_path, None) is not None

    def clear(self) -> None:
        self._store.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @property
    def size(self) -> int:
        """Number of cached entries."""
        return len(self._store)

    def stats(self) -> dict[str, Any]:
        expired = sum(1 for e in self._store.values() if e.is_expired)
        return {
            "entries": len(self._store),
            "expired_entries": expired,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }
