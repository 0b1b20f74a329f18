from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional


class Ecosystem(Enum):
    NPM = "npm"
    MAVEN = "maven"
    PYPI = "pypi"
    GOLANG = "golang"

    @property
    def has_module_versions(self) -> bool:
        """Ecosystems whose versions are resolved by the aggregator instead of a structural filter."""
        return self is Ecosystem.GOLANG


class AdvisorySeverity(Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @property
    def rank(self) -> int:
        order = {
            AdvisorySeverity.CRITICAL: 4,
            AdvisorySeverity.HIGH: 3,
            AdvisorySeverity.MEDIUM: 2,
            AdvisorySeverity.LOW: 1,
            AdvisorySeverity.UNKNOWN: 0,
        }
        return order[self]

    @classmethod
    def from_str(cls, value: Optional[str]) -> Optional["AdvisorySeverity"]:
        """Parse a severity label as reported by the remote service.

        Labels are case-insensitive; "moderate" maps to MEDIUM. Returns None for
        empty or unrecognised input.
        """
        if value is None:
            return None
        s = value.strip().upper()
        if not s:
            return None
        label_map = {
            "CRITICAL": cls.CRITICAL,
            "HIGH": cls.HIGH,
            "MEDIUM": cls.MEDIUM,
            "MODERATE": cls.MEDIUM,
            "LOW": cls.LOW,
            "UNKNOWN": cls.UNKNOWN,
        }
        return label_map.get(s)


class DiagnosticSeverity(IntEnum):
    """Editor diagnostic severities (values follow the language server protocol)."""

    ERROR = 1
    WARNING = 2
    INFORMATION = 3
    HINT = 4

    @classmethod
    def from_advisory(cls, severity: Optional[AdvisorySeverity]) -> "DiagnosticSeverity":
        if severity in (AdvisorySeverity.CRITICAL, AdvisorySeverity.HIGH):
            return cls.ERROR
        if severity is AdvisorySeverity.MEDIUM:
            return cls.WARNING
        if severity is AdvisorySeverity.LOW:
            return cls.INFORMATION
        return cls.ERROR
