from __future__ import annotations

from dependency_analytics.core.domain.models import CodeAction, Dependency, Diagnostic
from dependency_analytics.core.services.code_actions import CodeActionRegistry
from dependency_analytics.core.services.security_engine import ANALYTICS_SOURCE
from dependency_analytics.core.usecases.code_actions import FULL_STACK_REPORT_ACTION, ProvideCodeActionsUseCase

URI = "file:///work/pom.xml"


def _diag(line: int, source: str | None = ANALYTICS_SOURCE) -> Diagnostic:
    return Diagnostic(range=Dependency.at("a", "1.0", line=line).range, message="m", source=source)


def test_actions_are_found_by_anchor():
    registry = CodeActionRegistry()
    fix = CodeAction(title="Switch to recommended version 2.0")
    registry.reset(URI).register(_diag(3), fix)

    assert registry.actions_for(URI, [_diag(3), _diag(4)]) == [fix]
    assert registry.actions_for("file:///other", [_diag(3)]) == []


def test_reset_drops_previous_cycle_actions():
    registry = CodeActionRegistry()
    registry.reset(URI).register(_diag(3), CodeAction(title="old"))
    registry.reset(URI)
    assert registry.actions_for(URI, [_diag(3)]) == []


def test_full_stack_report_action_only_when_enabled():
    registry = CodeActionRegistry()
    registry.reset(URI)

    assert ProvideCodeActionsUseCase(registry).execute(URI, [_diag(1)]) == []

    enabled = ProvideCodeActionsUseCase(registry, provide_fullstack_action=True)
    assert enabled.execute(URI, [_diag(1)]) == [FULL_STACK_REPORT_ACTION]
    assert enabled.execute(URI, [_diag(1, source="eslint")]) == []
    assert FULL_STACK_REPORT_ACTION.command.command == "extension.fabric8AnalyticsWidgetFullStack"
