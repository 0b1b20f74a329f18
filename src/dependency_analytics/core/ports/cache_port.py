from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence

from ..domain.models import CacheLookup, DependencyIdentity


class VulnerabilityCachePort(Protocol):
    def get(self, keys: Sequence[DependencyIdentity]) -> list[CacheLookup]:
        """Return one lookup per key, in input order; expired entries are misses."""
        ...

    def add(self, records: Iterable[dict[str, Any]]) -> None:
        """Insert or overwrite records keyed by their (package, version)."""

    def clear(self) -> None:
        """Drop every entry in this namespace."""


class CacheFactoryPort(Protocol):
    def namespace(self, name: str) -> VulnerabilityCachePort:
        """Return the shared cache for one namespace (one per ecosystem)."""
        ...
