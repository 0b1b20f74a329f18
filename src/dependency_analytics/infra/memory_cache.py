from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from ..core.domain.models import CacheLookup, DependencyIdentity
from ..core.domain.records import record_identity
from ..core.ports.cache_port import CacheFactoryPort, VulnerabilityCachePort

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class _Entry:
    value: dict[str, Any]
    inserted_at: float


class MemoryCacheAdapter(VulnerabilityCachePort):
    """Bounded, age-masked store of vulnerability records for one namespace.

    - Entries older than max_age_seconds read as misses even before eviction.
    - Writes evict the oldest-inserted entries once capacity is exceeded;
      reads never evict.
    """

    def __init__(self, namespace: str, max_items: int, max_age_seconds: float, clock: Clock = time.monotonic) -> None:
        if max_items < 1:
            raise ValueError(f"max_items must be positive, got {max_items}")
        self._namespace = namespace
        self._max_items = max_items
        self._max_age = max_age_seconds
        self._clock = clock
        self._entries: OrderedDict[DependencyIdentity, _Entry] = OrderedDict()

    @property
    def namespace(self) -> str:
        return self._namespace

    def get(self, keys: Sequence[DependencyIdentity]) -> list[CacheLookup]:
        now = self._clock()
        result: list[CacheLookup] = []
        for key in keys:
            entry = self._entries.get(key)
            if entry is None or now - entry.inserted_at > self._max_age:
                result.append(CacheLookup(key))
            else:
                result.append(CacheLookup(key, entry.value))
        return result

    def add(self, records: Iterable[dict[str, Any]]) -> None:
        now = self._clock()
        for record in records:
            key = record_identity(record)
            # Overwriting counts as a fresh insertion.
            self._entries.pop(key, None)
            self._entries[key] = _Entry(record, now)
        evicted = 0
        while len(self._entries) > self._max_items:
            self._entries.popitem(last=False)
            evicted += 1
        if evicted:
            logger.debug(f"Evicted {evicted} entries from cache '{self._namespace}'")

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class NamespacedMemoryCache(CacheFactoryPort):
    """Process-wide cache, one MemoryCacheAdapter per namespace (ecosystem)."""

    def __init__(self, max_items: int = 1000, max_age_seconds: float = 30 * 60, clock: Clock = time.monotonic) -> None:
        self._max_items = max_items
        self._max_age = max_age_seconds
        self._clock = clock
        self._namespaces: dict[str, MemoryCacheAdapter] = {}

    def namespace(self, name: str) -> MemoryCacheAdapter:
        cache = self._namespaces.get(name)
        if cache is None:
            logger.debug(f"Creating cache namespace '{name}' (max_items={self._max_items}, max_age={self._max_age}s)")
            cache = MemoryCacheAdapter(name, self._max_items, self._max_age, self._clock)
            self._namespaces[name] = cache
        return cache

    def clear(self, namespace: str | None = None) -> None:
        """Clear one namespace, or every namespace when None."""
        if namespace is None:
            for cache in self._namespaces.values():
                cache.clear()
            return
        if namespace in self._namespaces:
            self._namespaces[namespace].clear()
