from __future__ import annotations

from typing import Iterable

from ..domain.models import CodeAction, Command, Diagnostic
from ..services.code_actions import CodeActionRegistry
from ..services.security_engine import ANALYTICS_SOURCE

FULL_STACK_REPORT_ACTION = CodeAction(
    title="Detailed Vulnerability Report",
    command=Command(title="Analytics Report", command="extension.fabric8AnalyticsWidgetFullStack"),
)


class ProvideCodeActionsUseCase:
    def __init__(self, registry: CodeActionRegistry, provide_fullstack_action: bool = False) -> None:
        self._registry = registry
        self._provide_fullstack_action = provide_fullstack_action

    def execute(self, uri: str, diagnostics: Iterable[Diagnostic]) -> list[CodeAction]:
        diagnostics = list(diagnostics)
        actions = self._registry.actions_for(uri, diagnostics)
        has_analytics_diagnostic = any(d.source == ANALYTICS_SOURCE for d in diagnostics)
        if self._provide_fullstack_action and has_analytics_diagnostic:
            actions.append(FULL_STACK_REPORT_ACTION)
        return actions
