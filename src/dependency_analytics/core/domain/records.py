from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import AdvisorySeverity
from .models import DependencyIdentity


class Vulnerability(BaseModel):
    """One advisory attached to a package version."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: Optional[str] = None
    severity: Optional[str] = None
    url: Optional[str] = None
    exploitable: Optional[bool] = None


class VulnerabilityRecord(BaseModel):
    """Per package/version result of the component-analyses API.

    Only the fields read by the engines are declared; anything else the service
    sends is kept as extra data and written back to the cache untouched.
    """

    model_config = ConfigDict(extra="allow")

    package: str
    version: str
    package_unknown: bool = False
    recommended_versions: Optional[str] = None
    registration_link: Optional[str] = None
    message: Optional[str] = None
    highest_severity: Optional[str] = None
    known_security_vulnerability_count: int = 0
    security_advisory_count: int = 0
    exploitable_vulnerabilities_count: int = 0
    vulnerability: list[Vulnerability] = Field(default_factory=list)

    @property
    def identity(self) -> DependencyIdentity:
        return DependencyIdentity(self.package, self.version)

    @property
    def severity(self) -> Optional[AdvisorySeverity]:
        return AdvisorySeverity.from_str(self.highest_severity)

    @property
    def is_flagged(self) -> bool:
        return bool(
            self.vulnerability
            or self.known_security_vulnerability_count
            or self.security_advisory_count
        )

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "VulnerabilityRecord":
        return cls.model_validate(raw)


def record_identity(raw: dict[str, Any]) -> DependencyIdentity:
    """Identity of a raw record as returned by the service (package, version)."""
    return DependencyIdentity(str(raw.get("package", "")), str(raw.get("version", "")))
