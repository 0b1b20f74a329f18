from __future__ import annotations

from typing import Sequence

from ..domain.models import Dependency, Diagnostic, TotalCount

CHECKING_MESSAGE = "Checking for security vulnerabilities ..."
NO_VULNERABILITIES_MESSAGE = "No potential security vulnerabilities found"


def _vulnerabilities(count: int) -> str:
    return "Vulnerability" if count == 1 else "Vulnerabilities"


def _advisories(count: int) -> str:
    return "Advisory" if count == 1 else "Advisories"


def build_summary_message(
    dependencies: Sequence[Dependency],
    diagnostics: Sequence[Diagnostic],
    counts: TotalCount,
) -> str:
    """Human readable summary sent when a cycle completes.

    Examples:
        one dependency, nothing flagged:
            'Scanned 1 dependency, No potential security vulnerabilities found'
        counts (1, 1, 1):
            'Scanned 3 dependencies, flagged 1 Known Security Vulnerability and
            1 Security Advisory with 1 Exploitable Vulnerability along with quick fixes'
    """
    total = len(dependencies)
    msg = f"Scanned {total} {'dependency' if total == 1 else 'dependencies'}, "
    if not diagnostics:
        return msg + NO_VULNERABILITIES_MESSAGE

    parts: list[str] = []
    if counts.vulnerability_count:
        parts.append(f"{counts.vulnerability_count} Known Security {_vulnerabilities(counts.vulnerability_count)}")
    if counts.advisory_count:
        parts.append(f"{counts.advisory_count} Security {_advisories(counts.advisory_count)}")
    summary = " and ".join(parts)
    if counts.exploit_count > 0:
        summary += f" with {counts.exploit_count} Exploitable {_vulnerabilities(counts.exploit_count)}"
    if counts.vulnerability_count + counts.advisory_count > 0:
        summary += " along with quick fixes"

    if not summary:
        return msg + NO_VULNERABILITIES_MESSAGE
    return msg + "flagged " + summary.lstrip()
