from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..domain.models import Dependency
from ..domain.records import VulnerabilityRecord

if TYPE_CHECKING:
    from ..services.pipeline import AnalysisCycle


class EnginePort(Protocol):
    name: str

    def consume(self, dependency: Dependency, record: VulnerabilityRecord, cycle: "AnalysisCycle") -> None:
        """Inspect one (dependency, record) pair.

        Engines may append diagnostics to cycle.diagnostics, register quick fixes
        in cycle.code_actions and increment cycle.counts.
        """
