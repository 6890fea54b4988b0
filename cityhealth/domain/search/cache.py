"""Expiring result cache owned by the search service."""

import copy
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CachedResult:
    payload: Any
    inserted_at: float


class ResultCache:
    """Key/value cache with a fixed TTL and a maximum entry count.

    Entries aged ``ttl_seconds`` or more are misses and are dropped on lookup.
    When an insert pushes the size past ``max_entries``, the least recently
    inserted entry is evicted. Lookups never refresh an entry's position.
    Payloads are copied on the way in and out, so callers may mutate what
    they get back without touching the cached entry.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 50,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CachedResult] = OrderedDict()

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at >= self.ttl_seconds:
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        return copy.deepcopy(entry.payload)

    def put(self, key: str, payload: Any) -> None:
        # Re-inserting a key makes it the most recently inserted
        self._entries.pop(key, None)
        self._entries[key] = CachedResult(payload=copy.deepcopy(payload), inserted_at=self._clock())
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache full, evicted: %s", evicted)

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
