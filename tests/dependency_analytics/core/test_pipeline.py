from __future__ import annotations

from dependency_analytics.core.domain.enums import Ecosystem
from dependency_analytics.core.domain.models import Dependency, DependencyMap, Diagnostic
from dependency_analytics.core.services.aggregators import aggregator_for
from dependency_analytics.core.services.pipeline import AnalysisCycle, DiagnosticsPipeline
from dependency_analytics.core.services.security_engine import SecurityEngine


def _cycle(ecosystem: Ecosystem, *deps: Dependency) -> AnalysisCycle:
    dep_map = DependencyMap(deps)
    agg = aggregator_for(ecosystem)
    return AnalysisCycle(
        uri="file:///m",
        ecosystem=ecosystem,
        cycle_id=1,
        dependencies=dep_map,
        aggregator=agg,
        plan=agg.plan(dep_map.identities()),
    )


class ExplodingEngine:
    name = "exploding"

    def __init__(self) -> None:
        self.calls = 0

    def consume(self, dependency, record, cycle) -> None:
        self.calls += 1
        raise RuntimeError("boom")


class MarkerEngine:
    name = "marker"

    def consume(self, dependency, record, cycle) -> None:
        cycle.diagnostics.append(Diagnostic(range=dependency.range, message=f"seen {record.package}"))


def test_failing_engine_does_not_stop_others(make_record):
    a, b = Dependency.at("a", "1.0", line=0), Dependency.at("b", "1.0", line=1)
    cycle = _cycle(Ecosystem.NPM, a, b)
    exploding = ExplodingEngine()
    pipeline = DiagnosticsPipeline([exploding, MarkerEngine()])

    added = pipeline.run([make_record("a", "1.0"), make_record("b", "1.0")], cycle)

    assert added == 2
    assert exploding.calls == 2
    assert [d.message for d in cycle.diagnostics] == ["seen a", "seen b"]


def test_duplicate_declarations_each_get_a_diagnostic(make_record):
    first, second = Dependency.at("a", "1.0", line=0), Dependency.at("a", "1.0", line=4)
    cycle = _cycle(Ecosystem.PYPI, first, second)

    DiagnosticsPipeline([SecurityEngine()]).run([make_record("a", "1.0", vulnerabilities=1)], cycle)

    assert [d.range.start.line for d in cycle.diagnostics] == [0, 4]
    assert cycle.counts.vulnerability_count == 2


def test_malformed_and_unmatched_records_are_skipped(make_record):
    cycle = _cycle(Ecosystem.NPM, Dependency.at("a", "1.0", line=0))
    pipeline = DiagnosticsPipeline([SecurityEngine()])

    added = pipeline.run(
        [{"version": "1.0"}, make_record("other", "9.9", vulnerabilities=1), make_record("a", "1.0", advisories=1)],
        cycle,
    )

    assert added == 1
    assert cycle.diagnostics[0].range.start.line == 0


def test_golang_result_fans_out_to_every_matching_requirement(make_record):
    inc = Dependency.at("github.com/a/b", "v2.0.0+incompatible", line=2)
    plain = Dependency.at("github.com/a/b", "v2.0.0", line=3)
    cycle = _cycle(Ecosystem.GOLANG, inc, plain)

    DiagnosticsPipeline([SecurityEngine()]).run([make_record("github.com/a/b", "v2.0.0", vulnerabilities=1)], cycle)

    assert [d.range.start.line for d in cycle.diagnostics] == [2, 3]
