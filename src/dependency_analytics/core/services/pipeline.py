from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic import ValidationError

from ..domain.enums import Ecosystem
from ..domain.models import Dependency, DependencyMap, Diagnostic, TotalCount
from ..domain.records import VulnerabilityRecord
from ..ports.engine_port import EnginePort
from .aggregators import QueryPlan, VulnerabilityAggregator
from .code_actions import CodeActionIndex

logger = logging.getLogger(__name__)


@dataclass
class AnalysisCycle:
    """Mutable state of one analysis run for one document."""

    uri: str
    ecosystem: Ecosystem
    cycle_id: int
    dependencies: DependencyMap
    aggregator: VulnerabilityAggregator
    plan: QueryPlan
    code_actions: CodeActionIndex = field(default_factory=CodeActionIndex)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    counts: TotalCount = field(default_factory=TotalCount)

    def declarations_for(self, record: VulnerabilityRecord) -> list[Dependency]:
        key = self.aggregator.key_for(record.identity)
        declarations: list[Dependency] = []
        for identity in self.plan.targets_for(key):
            declarations.extend(self.dependencies.get(identity))
        return declarations


class DiagnosticsPipeline:
    """Runs every engine, in order, over each (dependency, record) pair."""

    def __init__(self, engines: Sequence[EnginePort]) -> None:
        self._engines = tuple(engines)
        logger.debug(f"Initialized DiagnosticsPipeline with {len(self._engines)} engines")

    def run(self, records: Sequence[dict[str, Any]], cycle: AnalysisCycle) -> int:
        """Feed raw records through the engines; returns the number of diagnostics added."""
        before = len(cycle.diagnostics)
        parsed: list[VulnerabilityRecord] = []
        for raw in records:
            try:
                parsed.append(VulnerabilityRecord.from_raw(raw))
            except ValidationError as e:
                logger.warning(f"Ignoring malformed vulnerability record {raw!r}: {e}")

        for record in cycle.aggregator.merge(parsed):
            declarations = cycle.declarations_for(record)
            if not declarations:
                logger.debug(f"No declaration matches {record.package}@{record.version}")
                continue
            for dependency in declarations:
                self._run_engines(dependency, record, cycle)
        return len(cycle.diagnostics) - before

    def _run_engines(self, dependency: Dependency, record: VulnerabilityRecord, cycle: AnalysisCycle) -> None:
        for engine in self._engines:
            try:
                engine.consume(dependency, record, cycle)
            except Exception:
                logger.exception(
                    f"Engine {engine.name} failed on {dependency.name.value}@{dependency.version.value}"
                )
