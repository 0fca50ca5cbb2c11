"""Time-bounded in-memory cache of pool snapshots.

Pool parameters change at most once per block, so a quote burst (peg-point
search, route planning, repeated UI refreshes) can reuse one fetch for the
lifetime of a block.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from pegswap.amm.dispatch import AnySnapshot
from pegswap.constants import POOL_PARAMS_CACHE_TTL

logger = structlog.get_logger()


@dataclass(frozen=True)
class CacheEntry:
    """A snapshot and the clock reading at which it was stored."""

    snapshot: AnySnapshot
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at


class PoolStateCache:
    """Pool snapshots keyed by lower-cased pool id, valid for ttl seconds.

    Entries are immutable and replaced whole on put(), so a reader never sees
    a half-updated snapshot. Concurrent writers for the same pool race and
    the last write wins. The service fills it only from its fetch path,
    never from request bodies.

    Instances are injected where needed; there is no module-level cache.
    """

    def __init__(
        self,
        ttl: float = POOL_PARAMS_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            ttl: Seconds an entry stays fresh (default: 12, one block)
            clock: Monotonic time source, injectable for tests
        """
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @staticmethod
    def _key(pool_id: str) -> str:
        return pool_id.lower()

    def _is_stale(self, entry: CacheEntry, now: float) -> bool:
        return entry.age(now) >= self.ttl

    def _prune(self, now: float) -> None:
        stale = [key for key, entry in self._entries.items() if self._is_stale(entry, now)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("pool_cache_pruned", count=len(stale))

    def get_entry(self, pool_id: str) -> CacheEntry | None:
        """Return the fresh entry for pool_id, or None if absent or stale.

        A stale entry is dropped on the way out.
        """
        key = self._key(pool_id)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_stale(entry, self._clock()):
            del self._entries[key]
            return None
        return entry

    def get(self, pool_id: str) -> AnySnapshot | None:
        """Return the cached snapshot if younger than ttl, else None."""
        entry = self.get_entry(pool_id)
        if entry is None:
            logger.debug("pool_cache_miss", pool=self._key(pool_id))
            return None
        logger.debug("pool_cache_hit", pool=self._key(pool_id))
        return entry.snapshot

    def put(self, pool_id: str, snapshot: AnySnapshot) -> CacheEntry:
        """Store snapshot for pool_id, replacing any previous entry.

        Expired entries for other pools are evicted first, so the cache only
        ever holds pools fetched within the last ttl seconds.
        """
        now = self._clock()
        self._prune(now)
        entry = CacheEntry(snapshot=snapshot, fetched_at=now)
        self._entries[self._key(pool_id)] = entry
        return entry

    def get_or_fetch(self, pool_id: str, fetch: Callable[[], AnySnapshot]) -> AnySnapshot:
        """Return the cached snapshot, calling fetch() and storing its result on a miss.

        Exceptions raised by fetch propagate and leave the cache unchanged.
        """
        snapshot = self.get(pool_id)
        if snapshot is not None:
            return snapshot
        snapshot = fetch()
        self.put(pool_id, snapshot)
        return snapshot

    def invalidate(self, pool_id: str) -> bool:
        """Drop the entry for pool_id. Returns True if there was one."""
        return self._entries.pop(self._key(pool_id), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pool_id: object) -> bool:
        """True if a fresh entry exists for pool_id."""
        if not isinstance(pool_id, str):
            return False
        return self.get_entry(pool_id) is not None
