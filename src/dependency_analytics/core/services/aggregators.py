from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Protocol, Sequence

from ..domain.enums import Ecosystem
from ..domain.models import DependencyIdentity
from ..domain.records import Vulnerability, VulnerabilityRecord

logger = logging.getLogger(__name__)

INCOMPATIBLE_SUFFIX = "+incompatible"


@dataclass(frozen=True)
class QueryPlan:
    """Minimal set of identities to query plus the reverse fan-out mapping."""

    queries: tuple[DependencyIdentity, ...]
    targets: Mapping[DependencyIdentity, tuple[DependencyIdentity, ...]] = field(default_factory=dict)

    def targets_for(self, key: DependencyIdentity) -> tuple[DependencyIdentity, ...]:
        return self.targets.get(key, ())


class VulnerabilityAggregator(Protocol):
    def key_for(self, identity: DependencyIdentity) -> DependencyIdentity:
        """Canonical query key for a declared or returned identity."""
        ...

    def plan(self, identities: Sequence[DependencyIdentity]) -> QueryPlan:
        ...

    def merge(self, records: Sequence[VulnerabilityRecord]) -> list[VulnerabilityRecord]:
        """Fold raw records into one result per query key."""
        ...


class NoopVulnerabilityAggregator:
    """One declared version maps to exactly one query and one result."""

    def key_for(self, identity: DependencyIdentity) -> DependencyIdentity:
        return identity

    def plan(self, identities: Sequence[DependencyIdentity]) -> QueryPlan:
        unique = tuple(dict.fromkeys(identities))
        return QueryPlan(queries=unique, targets={i: (i,) for i in unique})

    def merge(self, records: Sequence[VulnerabilityRecord]) -> list[VulnerabilityRecord]:
        return list(records)


class GolangVulnerabilityAggregator:
    """Module-version aware aggregation for go.mod requirements.

    Requirements that resolve to the same module version (for example
    ``v2.0.0+incompatible`` and ``v2.0.0``) are queried once and the result is
    fanned back out to every declaration. Several records returned for one
    module version are folded into a single result.
    """

    def key_for(self, identity: DependencyIdentity) -> DependencyIdentity:
        name = identity.name.strip()
        version = identity.version.strip()
        if version.endswith(INCOMPATIBLE_SUFFIX):
            version = version[: -len(INCOMPATIBLE_SUFFIX)]
        if version and not version.startswith("v"):
            version = f"v{version}"
        return DependencyIdentity(name, version)

    def plan(self, identities: Sequence[DependencyIdentity]) -> QueryPlan:
        targets: dict[DependencyIdentity, list[DependencyIdentity]] = {}
        for identity in identities:
            key = self.key_for(identity)
            bucket = targets.setdefault(key, [])
            if identity not in bucket:
                bucket.append(identity)
        collapsed = len(identities) - len(targets)
        if collapsed > 0:
            logger.debug(f"Collapsed {collapsed} golang requirements onto shared module versions")
        return QueryPlan(
            queries=tuple(targets),
            targets={key: tuple(ids) for key, ids in targets.items()},
        )

    def merge(self, records: Sequence[VulnerabilityRecord]) -> list[VulnerabilityRecord]:
        grouped: dict[DependencyIdentity, list[VulnerabilityRecord]] = {}
        for record in records:
            grouped.setdefault(self.key_for(record.identity), []).append(record)
        return [self._fold(key, group) for key, group in grouped.items()]

    @staticmethod
    def _fold(key: DependencyIdentity, group: list[VulnerabilityRecord]) -> VulnerabilityRecord:
        if len(group) == 1:
            return group[0].model_copy(update={"package": key.name, "version": key.version})

        seen: dict[str, Vulnerability] = {}
        for record in group:
            for vuln in record.vulnerability:
                seen.setdefault(vuln.id, vuln)

        severities = [s for s in (r.severity for r in group) if s is not None]
        highest = max(severities, key=lambda s: s.rank) if severities else None
        recommended = next((r.recommended_versions for r in group if r.recommended_versions), None)

        return group[0].model_copy(
            update={
                "package": key.name,
                "version": key.version,
                "vulnerability": list(seen.values()),
                "known_security_vulnerability_count": max(r.known_security_vulnerability_count for r in group),
                "security_advisory_count": max(r.security_advisory_count for r in group),
                "exploitable_vulnerabilities_count": max(r.exploitable_vulnerabilities_count for r in group),
                "highest_severity": highest.value.lower() if highest else None,
                "recommended_versions": recommended,
                "package_unknown": all(r.package_unknown for r in group),
            }
        )


def aggregator_for(ecosystem: Ecosystem) -> VulnerabilityAggregator:
    if ecosystem is Ecosystem.GOLANG:
        return GolangVulnerabilityAggregator()
    return NoopVulnerabilityAggregator()


__all__ = [
    "QueryPlan",
    "VulnerabilityAggregator",
    "NoopVulnerabilityAggregator",
    "GolangVulnerabilityAggregator",
    "aggregator_for",
]
