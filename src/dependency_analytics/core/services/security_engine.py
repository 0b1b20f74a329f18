from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..domain.enums import DiagnosticSeverity
from ..domain.models import CodeAction, Dependency, Diagnostic, TextEdit
from ..domain.records import VulnerabilityRecord

if TYPE_CHECKING:
    from .pipeline import AnalysisCycle

logger = logging.getLogger(__name__)

ANALYTICS_SOURCE = "Dependency Analytics"


class SecurityEngine:
    """Flags declarations whose package version has known vulnerabilities or advisories."""

    name = "security"

    def __init__(self, source: str = ANALYTICS_SOURCE) -> None:
        self._source = source

    def consume(self, dependency: Dependency, record: VulnerabilityRecord, cycle: "AnalysisCycle") -> None:
        if record.package_unknown or not record.is_flagged:
            return

        diagnostic = Diagnostic(
            range=dependency.range,
            message=self._message(dependency, record),
            severity=DiagnosticSeverity.from_advisory(record.severity),
            source=self._source,
            code=record.vulnerability[0].id if record.vulnerability else None,
        )
        cycle.diagnostics.append(diagnostic)
        cycle.counts.add(
            vulnerabilities=record.known_security_vulnerability_count,
            advisories=record.security_advisory_count,
            exploits=record.exploitable_vulnerabilities_count,
        )

        recommended = record.recommended_versions
        if recommended and recommended != dependency.version.value:
            cycle.code_actions.register(
                diagnostic,
                CodeAction(
                    title=f"Switch to recommended version {recommended}",
                    diagnostics=(diagnostic,),
                    edits={cycle.uri: (TextEdit(dependency.range, recommended),)},
                ),
            )
        logger.debug(f"Flagged {dependency.name.value}@{dependency.version.value} in {cycle.uri}")

    @staticmethod
    def _message(dependency: Dependency, record: VulnerabilityRecord) -> str:
        lines = [f"{dependency.name.value}: {dependency.version.value}"]
        if record.known_security_vulnerability_count:
            lines.append(f"Known security vulnerabilities: {record.known_security_vulnerability_count}")
        if record.security_advisory_count:
            lines.append(f"Security advisories: {record.security_advisory_count}")
        if record.exploitable_vulnerabilities_count:
            lines.append(f"Exploitable vulnerabilities: {record.exploitable_vulnerabilities_count}")
        if record.severity is not None:
            lines.append(f"Highest severity: {record.severity.value.lower()}")
        if record.recommended_versions:
            lines.append(f"Recommendation: use version {record.recommended_versions}")
        else:
            lines.append("Recommendation: no safe version available")
        return "\n".join(lines)
