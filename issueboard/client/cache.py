"""Read cache keyed by collection tuples such as ``("comments", issue_id)``."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable

QueryKey = tuple[Hashable, ...]

MISSING = object()


@dataclass
class CacheEntry:
    value: Any
    fetched_at: float


class QueryCache:
    """Holds the last successful read per key.

    An entry younger than ``stale_seconds`` is served without a refetch.
    Staleness is a freshness bound, not a correctness guarantee; writes must
    call ``invalidate`` so the next read goes back to the server.
    """

    def __init__(self, stale_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.stale_seconds = stale_seconds
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}

    def __contains__(self, key: QueryKey) -> bool:
        return key in self._entries

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None:
            return False
        return self._clock() - entry.fetched_at < self.stale_seconds

    def get(self, key: QueryKey) -> Any:
        """Cached value for ``key`` when fresh, otherwise ``MISSING``."""

        if not self.is_fresh(key):
            return MISSING
        return self._entries[key].value

    def set(self, key: QueryKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock())

    def invalidate(self, *prefix: Hashable) -> int:
        """Drop every entry whose key starts with ``prefix``; return the count."""

        doomed = [key for key in self._entries if key[: len(prefix)] == prefix]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()
