# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Member count cache — in-memory TTL store keyed by (host, room_id).
Lives outside the pipeline; only successful counts are stored.
"""

import time
from collections import OrderedDict
from typing import Callable, Optional

CacheKey = tuple[str, str]


class MemberCountCache:
    """Bounded TTL cache. Oldest entries are evicted first."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._store: "OrderedDict[CacheKey, tuple[float, int]]" = OrderedDict()

    # ── Read ──

    def get(self, key: CacheKey) -> Optional[int]:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    def set(self, key: CacheKey, value: int) -> None:
        if self.ttl <= 0:
            return
        self._store.pop(key, None)
        self._store[key] = (self._clock() + self.ttl, value)
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)

    def clear(self) -> None:
        self._store.clear()
