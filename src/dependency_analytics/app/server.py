from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.domain.models import CodeAction, CycleReport, Diagnostic
from ..core.ports.notifier_port import NotifierPort
from ..core.services.code_actions import CodeActionRegistry
from ..core.usecases.analyze_manifest import AnalyzeManifestUseCase
from ..core.usecases.code_actions import ProvideCodeActionsUseCase
from .change_tracker import ChangeTracker
from .handlers import ManifestHandlerRegistry

logger = logging.getLogger(__name__)


class AnalysisServer:
    """Document-event front end: open/change/save/close in, analysis cycles out.

    Diagnostics and notifications go to the notifier wired into the analyze use
    case; the latest report of each document is kept in ``reports``.
    """

    def __init__(
        self,
        handlers: ManifestHandlerRegistry,
        analyze_uc: AnalyzeManifestUseCase,
        code_actions_uc: ProvideCodeActionsUseCase,
        code_actions: CodeActionRegistry,
        notifier: NotifierPort,
        debounce_seconds: float = 0.5,
    ) -> None:
        self._handlers = handlers
        self._analyze_uc = analyze_uc
        self._code_actions_uc = code_actions_uc
        self._code_actions = code_actions
        self._notifier = notifier
        self.tracker = ChangeTracker(self._analyze, quiescence_seconds=debounce_seconds)
        self.reports: dict[str, CycleReport] = {}

    def did_open(self, uri: str, text: str) -> None:
        if self._supports(uri):
            self.tracker.did_open(uri, text)

    def did_change(self, uri: str, text: str) -> None:
        if self._supports(uri):
            self.tracker.did_change(uri, text)

    def did_save(self, uri: str, text: Optional[str] = None) -> None:
        if self._supports(uri):
            self.tracker.did_save(uri, text)

    def did_close(self, uri: str) -> None:
        self.tracker.did_close(uri)
        self._code_actions.discard(uri)
        self._notifier.forget(uri)
        self.reports.pop(uri, None)

    def code_actions(self, uri: str, diagnostics: Iterable[Diagnostic]) -> list[CodeAction]:
        return self._code_actions_uc.execute(uri, diagnostics)

    async def drain(self) -> None:
        await self.tracker.drain()

    def _supports(self, uri: str) -> bool:
        return self._handlers.match(uri) is not None

    async def _analyze(self, uri: str, text: str, cycle_id: int) -> Optional[CycleReport]:
        handler = self._handlers.match(uri)
        if handler is None:
            return None
        report = await self._analyze_uc.execute(
            uri=uri,
            ecosystem=handler.ecosystem,
            contents=text,
            collector=handler.collector_factory(),
            cycle_id=cycle_id,
            is_current=lambda: self.tracker.is_current(uri, cycle_id),
        )
        if not report.superseded and self.tracker.is_current(uri, cycle_id):
            self.reports[uri] = report
        return report
