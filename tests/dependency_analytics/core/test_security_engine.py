from __future__ import annotations

from dependency_analytics.core.domain.enums import DiagnosticSeverity, Ecosystem
from dependency_analytics.core.domain.models import Dependency, DependencyMap, TextEdit
from dependency_analytics.core.domain.records import VulnerabilityRecord
from dependency_analytics.core.services.aggregators import NoopVulnerabilityAggregator
from dependency_analytics.core.services.pipeline import AnalysisCycle
from dependency_analytics.core.services.security_engine import ANALYTICS_SOURCE, SecurityEngine

URI = "file:///work/package.json"


def _cycle(*deps: Dependency) -> AnalysisCycle:
    dep_map = DependencyMap(deps)
    agg = NoopVulnerabilityAggregator()
    return AnalysisCycle(
        uri=URI,
        ecosystem=Ecosystem.NPM,
        cycle_id=1,
        dependencies=dep_map,
        aggregator=agg,
        plan=agg.plan(dep_map.identities()),
    )


def test_flagged_record_produces_diagnostic_and_quick_fix(make_record):
    dep = Dependency.at("lodash", "4.17.20", line=5, name_char=4, version_char=15)
    cycle = _cycle(dep)
    record = VulnerabilityRecord.from_raw(
        make_record("lodash", "4.17.20", vulnerabilities=2, exploits=1, severity="high", recommended="4.17.21", ids=["CVE-2021-23337"])
    )

    SecurityEngine().consume(dep, record, cycle)

    assert len(cycle.diagnostics) == 1
    d = cycle.diagnostics[0]
    assert d.range == dep.range
    assert d.severity == DiagnosticSeverity.ERROR
    assert d.source == ANALYTICS_SOURCE
    assert d.code == "CVE-2021-23337"
    assert d.message.splitlines()[0] == "lodash: 4.17.20"
    assert "Recommendation: use version 4.17.21" in d.message
    assert cycle.counts.to_dict() == {"vulnerabilityCount": 2, "advisoryCount": 0, "exploitCount": 1}

    action = cycle.code_actions.lookup(d)
    assert action is not None
    assert action.title == "Switch to recommended version 4.17.21"
    assert action.edits == {URI: (TextEdit(dep.range, "4.17.21"),)}


def test_medium_severity_is_a_warning(make_record):
    dep = Dependency.at("a", "1.0", line=0)
    cycle = _cycle(dep)
    SecurityEngine().consume(dep, VulnerabilityRecord.from_raw(make_record("a", "1.0", advisories=1, severity="medium")), cycle)
    assert cycle.diagnostics[0].severity == DiagnosticSeverity.WARNING


def test_clean_and_unknown_packages_are_not_flagged(make_record):
    dep = Dependency.at("a", "1.0", line=0)
    cycle = _cycle(dep)
    engine = SecurityEngine()
    engine.consume(dep, VulnerabilityRecord.from_raw(make_record("a", "1.0")), cycle)
    engine.consume(dep, VulnerabilityRecord.from_raw(make_record("a", "1.0", vulnerabilities=3, package_unknown=True)), cycle)
    assert cycle.diagnostics == []
    assert cycle.counts.vulnerability_count == 0


def test_no_quick_fix_when_already_on_recommended_version(make_record):
    dep = Dependency.at("a", "2.0", line=0)
    cycle = _cycle(dep)
    SecurityEngine().consume(dep, VulnerabilityRecord.from_raw(make_record("a", "2.0", advisories=1, recommended="2.0")), cycle)
    assert len(cycle.diagnostics) == 1
    assert len(cycle.code_actions) == 0
